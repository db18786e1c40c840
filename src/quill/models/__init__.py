"""Domain entities and API response models."""
