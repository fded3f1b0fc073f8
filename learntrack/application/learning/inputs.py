"""Typed inputs for topic and session operations."""

import datetime as dt
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from learntrack.domain.learning.entities.study_session import coerce_duration
from learntrack.domain.learning.entities.topic import coerce_goal_hours
from learntrack.domain.learning.value_objects import Category, Priority


def _blank_to_none(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


class AddTopicInput(BaseModel):
    """
    Topic ready to be added.

    Lenient on purpose: unknown priority becomes Medium and an unusable
    goal becomes 0. Use AddTopicForm to enforce the form rules first.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: Category | None = None
    priority: Priority = Priority.MEDIUM
    target_date: date | None = None
    goal_hours: float = 0.0

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value: Any) -> Category | None:
        return Category.parse(value)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> Priority:
        return Priority.parse(value)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("goal_hours", mode="before")
    @classmethod
    def parse_goal_hours(cls, value: Any) -> float:
        return coerce_goal_hours(value)


class AddTopicForm(BaseModel):
    """
    Add-topic form with the field rules of the topic dialog.

    Validate with context={"today": date} so the target date can be
    checked against the current day.
    """

    model_config = ConfigDict(validate_default=True)

    name: str = ""
    category: str | None = None
    priority: str = Priority.MEDIUM.value
    target_date: date | None = None
    goal_hours: float | None = None

    @field_validator("name", mode="after")
    @classmethod
    def require_name(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("name_required", "Topic name is required")
        return value.strip()

    @field_validator("category", mode="before")
    @classmethod
    def require_category(cls, value: Any) -> str:
        category = Category.parse(value)
        if category is None:
            raise PydanticCustomError("category_required", "Please select a category")
        return category.value

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> str:
        return Priority.parse(value).value

    @field_validator("goal_hours", mode="before")
    @classmethod
    def require_positive_goal(cls, value: Any) -> float:
        hours = coerce_goal_hours(_blank_to_none(value))
        if hours <= 0:
            raise PydanticCustomError("goal_hours_required", "Goal hours must be greater than 0")
        return hours

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("target_date", mode="after")
    @classmethod
    def reject_past_date(cls, value: date | None, info: ValidationInfo) -> date | None:
        today = (info.context or {}).get("today")
        if value is not None and today is not None and value < today:
            raise PydanticCustomError("target_date_past", "Target date cannot be in the past")
        return value

    def to_input(self) -> AddTopicInput:
        return AddTopicInput(
            name=self.name,
            category=self.category,
            priority=self.priority,
            target_date=self.target_date,
            goal_hours=self.goal_hours,
        )


class UpdateTopicInput(BaseModel):
    """Partial topic update; only fields that were provided are merged."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    category: Category | None = None
    priority: Priority | None = None
    target_date: date | None = None
    goal_hours: float | None = None

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, value: Any) -> Category | None:
        return Category.parse(value)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> Priority:
        return Priority.parse(value)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("goal_hours", mode="before")
    @classmethod
    def parse_goal_hours(cls, value: Any) -> float:
        return coerce_goal_hours(value)

    def to_fields(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class LogSessionInput(BaseModel):
    """Session ready to be logged; run the progress checks before building one."""

    model_config = ConfigDict(frozen=True)

    topic_id: str
    duration: int
    notes: str = ""
    date: dt.date | None = None

    @field_validator("topic_id", mode="before")
    @classmethod
    def stringify_topic_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, value: Any) -> int:
        return coerce_duration(value)

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Any:
        return _blank_to_none(value)
