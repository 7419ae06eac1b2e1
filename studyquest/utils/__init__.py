"""Utility helpers package."""

from studyquest.utils.cache import CacheBackend, cache_backend

__all__ = ["CacheBackend", "cache_backend"]
