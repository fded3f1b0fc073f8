"""Mappers for stored record ↔ domain conversion."""

from datetime import UTC, date, datetime

from learntrack.domain.common.value_objects.ids import StudySessionId, TopicId, UserId
from learntrack.domain.identity.entities.user import User
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.domain.learning.value_objects import Category, Priority
from learntrack.infrastructure.storage.schemas import AccountRecord, SessionRecord, TopicRecord


def to_iso(value: datetime) -> str:
    """Format an instant as ISO-8601 in UTC with millisecond precision."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_calendar_date(value: str) -> date | None:
    """Parse the date part of a stored date string; empty means unset."""
    if not value:
        return None
    return date.fromisoformat(value[:10])


class TopicMapper:
    """Mapper for TopicRecord ↔ Topic conversion."""

    def to_domain(self, record: TopicRecord) -> Topic:
        """Convert stored record to domain entity."""
        return Topic(
            id=TopicId(record.id),
            name=record.name,
            created_at=from_iso(record.created_at),
            category=Category.parse(record.category),
            priority=Priority.parse(record.priority),
            target_date=parse_calendar_date(record.target_date),
            goal_hours=max(0.0, record.goal_hours),
        )

    def to_record(self, topic: Topic) -> TopicRecord:
        """Convert domain entity to stored record."""
        return TopicRecord(
            id=topic.id.value,
            name=topic.name,
            category=topic.category.value if topic.category else "",
            priority=topic.priority.value,
            target_date=topic.target_date.isoformat() if topic.target_date else "",
            goal_hours=topic.goal_hours,
            created_at=to_iso(topic.created_at),
        )


class StudySessionMapper:
    """Mapper for SessionRecord ↔ StudySession conversion."""

    def to_domain(self, record: SessionRecord) -> StudySession:
        """Convert stored record to domain entity."""
        on_date = parse_calendar_date(record.date)
        if on_date is None:
            raise ValueError(f"Session {record.id} has no date")
        return StudySession(
            id=StudySessionId(record.id),
            topic_id=TopicId(record.topic_id),
            duration=record.duration,
            date=on_date,
            notes=record.notes,
        )

    def to_record(self, session: StudySession) -> SessionRecord:
        """Convert domain entity to stored record."""
        return SessionRecord(
            id=session.id.value,
            topic_id=session.topic_id.value,
            duration=session.duration,
            notes=session.notes,
            date=session.date.isoformat(),
        )


class AccountMapper:
    """Mapper for AccountRecord ↔ User conversion."""

    def to_domain(self, record: AccountRecord) -> User:
        """Convert stored record to domain entity."""
        return User(
            id=UserId(record.id),
            name=record.name,
            email=record.email,
            hashed_password=record.password_hash,
            phone=record.phone,
            age=record.age,
            gender=record.gender,
            login_time=from_iso(record.login_time) if record.login_time else None,
        )

    def to_record(self, user: User) -> AccountRecord:
        """Convert domain entity to stored record."""
        return AccountRecord(
            id=user.id.value,
            name=user.name,
            email=user.email,
            phone=user.phone,
            age=user.age,
            gender=user.gender,
            password_hash=user.hashed_password,
            login_time=to_iso(user.login_time) if user.login_time else None,
        )
