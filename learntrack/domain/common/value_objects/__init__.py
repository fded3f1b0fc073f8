"""Common value objects shared across all domain modules."""

from .ids import StudySessionId, TopicId, UserId

__all__ = [
    "StudySessionId",
    "TopicId",
    "UserId",
]
