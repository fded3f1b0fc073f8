from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""

    value: str


@dataclass(frozen=True)
class TopicId(EntityId):
    """Strongly-typed topic identifier."""

    value: str


@dataclass(frozen=True)
class StudySessionId(EntityId):
    """Strongly-typed study session identifier."""

    value: str
