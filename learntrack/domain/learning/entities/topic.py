"""Topic entity: a learning subject with a goal and optional deadline."""

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from learntrack.domain.common.entity import Entity
from learntrack.domain.common.exceptions import ValidationError
from learntrack.domain.common.value_objects.ids import TopicId
from learntrack.domain.learning.value_objects import Category, Priority

UPDATABLE_FIELDS = frozenset({"name", "category", "priority", "target_date", "goal_hours"})


def coerce_goal_hours(value: object) -> float:
    """Turn raw goal input into non-negative hours; anything unusable means no goal."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        return 0.0
    return hours


@dataclass
class Topic(Entity[TopicId]):
    """
    Topic owned by a single user.

    Business Rules:
    - Name cannot be empty
    - Goal hours are non-negative; 0 means no goal (unbounded)
    - The deadline is the start of the target date in UTC
    - Sessions belong to a topic and die with it (enforced by the repository)
    """

    id: TopicId
    name: str
    created_at: datetime
    category: Category | None = None
    priority: Priority = Priority.MEDIUM
    target_date: date | None = None
    goal_hours: float = 0.0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.name or not self.name.strip():
            raise ValidationError("Topic name cannot be empty", field="name", value=self.name)
        if self.goal_hours < 0:
            raise ValidationError(
                "Goal hours cannot be negative", field="goal_hours", value=self.goal_hours
            )

    @property
    def has_goal(self) -> bool:
        return self.goal_hours > 0

    @property
    def goal_minutes(self) -> float:
        return self.goal_hours * 60

    @property
    def deadline(self) -> datetime | None:
        """Instant the deadline expires, or None without a target date."""
        if self.target_date is None:
            return None
        return datetime.combine(self.target_date, time.min, tzinfo=UTC)

    def matches_name(self, search: str) -> bool:
        """Check if topic name contains the search string (case-insensitive)."""
        return search.lower() in self.name.lower()

    def apply_update(self, fields: dict[str, object]) -> None:
        """
        Merge a partial set of fields into the topic.

        Unknown keys are ignored; identity and creation time never change.

        Raises:
            ValidationError: If the merged name or goal is invalid
        """
        for key, value in fields.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key == "name":
                name = str(value or "").strip()
                if not name:
                    raise ValidationError("Topic name cannot be empty", field="name", value=value)
                self.name = name
            elif key == "category":
                self.category = Category.parse(value)
            elif key == "priority":
                self.priority = Priority.parse(value)
            elif key == "target_date":
                self.target_date = value if isinstance(value, date) else None
            elif key == "goal_hours":
                self.goal_hours = coerce_goal_hours(value)

    @classmethod
    def create(
        cls,
        id: TopicId,
        name: str,
        created_at: datetime,
        category: object = None,
        priority: object = None,
        target_date: date | None = None,
        goal_hours: object = None,
    ) -> "Topic":
        """Factory for a new topic, defaulting priority and goal when absent or invalid."""
        return cls(
            id=id,
            name=name.strip(),
            created_at=created_at,
            category=Category.parse(category),
            priority=Priority.parse(priority),
            target_date=target_date,
            goal_hours=coerce_goal_hours(goal_hours),
        )
