"""Enumerated topic attributes."""

from enum import StrEnum


class Category(StrEnum):
    """Fixed set of topic categories."""

    PROGRAMMING = "Programming"
    DESIGN = "Design"
    LANGUAGES = "Languages"
    MATHEMATICS = "Mathematics"
    SCIENCE = "Science"
    BUSINESS = "Business"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> "Category | None":
        """Return the matching category, or None when unset or unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Priority(StrEnum):
    """Topic priority, Medium unless chosen otherwise."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: object) -> "Priority":
        """Return the matching priority, falling back to Medium."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.MEDIUM
