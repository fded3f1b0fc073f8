"""Pydantic schemas for documents held in the keyed store."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from learntrack.domain.learning.entities.study_session import coerce_duration
from learntrack.domain.learning.entities.topic import coerce_goal_hours


class StoredModel(BaseModel):
    """Base for stored records: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class TopicRecord(StoredModel):
    """Topic as stored in a user document."""

    id: str
    name: str
    category: str = ""
    priority: str = "Medium"
    target_date: str = Field("", alias="targetDate")
    goal_hours: float = Field(0, alias="goalHours")
    created_at: str = Field(..., alias="createdAt")

    @field_validator("category", "target_date", mode="before")
    @classmethod
    def null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value: Any) -> Any:
        return value or "Medium"

    @field_validator("goal_hours", mode="before")
    @classmethod
    def parse_goal_hours(cls, value: Any) -> float:
        return coerce_goal_hours(value)


class SessionRecord(StoredModel):
    """Study session as stored in a user document."""

    id: str
    topic_id: str = Field(..., alias="topicId")
    duration: int
    notes: str = ""
    date: str

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, value: Any) -> int:
        return coerce_duration(value)

    @field_validator("notes", mode="before")
    @classmethod
    def null_notes(cls, value: Any) -> Any:
        return "" if value is None else value


class UserDocumentRecord(StoredModel):
    """Per-user document: the user's topics and sessions."""

    topics: list[TopicRecord] = Field(default_factory=list)
    sessions: list[SessionRecord] = Field(default_factory=list)
    last_updated: str | None = Field(None, alias="lastUpdated")
    migrated_at: str | None = Field(None, alias="migratedAt")


class AccountRecord(StoredModel):
    """Registered account in the account collection."""

    id: str
    name: str = ""
    email: str
    phone: str = ""
    age: int | None = None
    gender: str = "male"
    password_hash: str = Field(..., alias="passwordHash")
    login_time: str | None = Field(None, alias="loginTime")


class CurrentSessionRecord(StoredModel):
    """The single authenticated session."""

    user_id: str = Field(..., alias="userId")
    login_time: str = Field(..., alias="loginTime")
