"""Pure scoring and progression math with no I/O."""
