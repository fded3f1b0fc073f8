"""
StudySession entity: one logged, timed study interval against a topic.
"""

import math
from dataclasses import dataclass
from datetime import date

from learntrack.domain.common.entity import Entity
from learntrack.domain.common.exceptions import DomainError
from learntrack.domain.common.value_objects.ids import StudySessionId, TopicId

MIN_DURATION_MINUTES = 1


def coerce_duration(value: object) -> int:
    """Truncate raw duration input to whole minutes, never below one minute."""
    if value is None or isinstance(value, bool):
        return MIN_DURATION_MINUTES
    try:
        minutes = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return MIN_DURATION_MINUTES
    if math.isnan(minutes) or math.isinf(minutes):
        return MIN_DURATION_MINUTES
    return max(MIN_DURATION_MINUTES, int(minutes))


@dataclass
class StudySession(Entity[StudySessionId]):
    """
    Study session logged against a topic.

    Business Rules:
    - Duration is a whole number of minutes, at least MIN_DURATION_MINUTES
    - Sessions are never edited after logging
    - A session only disappears together with its topic
    """

    id: StudySessionId
    topic_id: TopicId
    duration: int
    date: date
    notes: str = ""

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.duration < MIN_DURATION_MINUTES:
            raise DomainError("Duration must be at least 1 minute")

    def belongs_to(self, topic_id: TopicId) -> bool:
        return self.topic_id == topic_id

    @classmethod
    def create(
        cls,
        id: StudySessionId,
        topic_id: TopicId,
        duration: object,
        on_date: date,
        notes: str | None = None,
    ) -> "StudySession":
        """
        Factory method for logging a new session.

        Args:
            id: Freshly generated session ID
            topic_id: Topic the session counts towards
            duration: Raw duration in minutes, coerced to an integer >= 1
            on_date: Calendar date of the session
            notes: Optional free-text notes

        Returns:
            New StudySession instance
        """
        return cls(
            id=id,
            topic_id=topic_id,
            duration=coerce_duration(duration),
            date=on_date,
            notes=notes or "",
        )
