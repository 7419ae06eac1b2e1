"""StudyQuest points economy and wagering service."""
