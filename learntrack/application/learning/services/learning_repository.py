"""In-memory topic and session collections of the authenticated user."""

import dataclasses

import structlog

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.id_generator import TimeOrderedIdGenerator
from learntrack.application.common.result import Failure, Result, Success
from learntrack.application.learning.inputs import (
    AddTopicInput,
    LogSessionInput,
    UpdateTopicInput,
)
from learntrack.application.learning.protocols import DocumentGatewayProtocol, UserDocument
from learntrack.domain.common.exceptions import ValidationError
from learntrack.domain.common.value_objects.ids import StudySessionId, TopicId, UserId
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.domain.learning.exceptions import TopicNotFoundError
from learntrack.domain.learning.services.progress_engine import ProgressEngine, TopicProgress
from learntrack.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

TopicRef = TopicId | str


def _topic_id(value: TopicRef) -> TopicId:
    return value if isinstance(value, TopicId) else TopicId(str(value))


class LearningRepository:
    """
    Topic and session collections for one user.

    Every mutation saves the whole document through the gateway before it
    returns. A failed save is logged and kept on last_persistence_error;
    the in-memory collections stay authoritative.
    """

    def __init__(
        self,
        user_id: UserId,
        gateway: DocumentGatewayProtocol,
        clock: ClockProtocol,
        id_generator: TimeOrderedIdGenerator,
        document: UserDocument | None = None,
    ) -> None:
        self.user_id = user_id
        self.gateway = gateway
        self.clock = clock
        self.id_generator = id_generator
        document = document or UserDocument()
        self._topics: list[Topic] = list(document.topics)
        self._sessions: list[StudySession] = list(document.sessions)
        self.last_persistence_error: PersistenceError | None = None

    @classmethod
    def load(
        cls,
        user_id: UserId,
        gateway: DocumentGatewayProtocol,
        clock: ClockProtocol,
        id_generator: TimeOrderedIdGenerator,
    ) -> "LearningRepository":
        """Create a repository holding the user's stored document."""
        return cls(user_id, gateway, clock, id_generator, gateway.load(user_id))

    @property
    def topics(self) -> list[Topic]:
        return list(self._topics)

    @property
    def sessions(self) -> list[StudySession]:
        return list(self._sessions)

    # Mutations

    def add_topic(self, data: AddTopicInput) -> Topic:
        """
        Append a new topic with a fresh ID and creation time.

        Raises:
            ValidationError: If the name is blank
        """
        topic = Topic.create(
            id=TopicId(self._next_id()),
            name=data.name,
            created_at=self.clock.now(),
            category=data.category,
            priority=data.priority,
            target_date=data.target_date,
            goal_hours=data.goal_hours,
        )
        self._topics.append(topic)
        logger.info("topic_added", user_id=self.user_id.value, topic_id=topic.id.value)
        self._persist()
        return topic

    def update_topic(
        self, topic_id: TopicRef, data: UpdateTopicInput
    ) -> Result[Topic, TopicNotFoundError | ValidationError]:
        """
        Merge the provided fields into a topic.

        The update is all-or-nothing: an invalid merged name leaves the
        stored topic unchanged.
        """
        index = self._index_of(_topic_id(topic_id))
        if index is None:
            return Failure(TopicNotFoundError(topic_id))

        updated = dataclasses.replace(self._topics[index])
        try:
            updated.apply_update(data.to_fields())
        except ValidationError as e:
            return Failure(e)

        self._topics[index] = updated
        logger.info("topic_updated", user_id=self.user_id.value, topic_id=updated.id.value)
        self._persist()
        return Success(updated)

    def delete_topic(self, topic_id: TopicRef) -> Result[int, TopicNotFoundError]:
        """
        Remove a topic together with every session logged against it.

        Returns:
            Success with the number of sessions removed
        """
        tid = _topic_id(topic_id)
        index = self._index_of(tid)
        if index is None:
            return Failure(TopicNotFoundError(topic_id))

        del self._topics[index]
        remaining = [s for s in self._sessions if not s.belongs_to(tid)]
        removed = len(self._sessions) - len(remaining)
        self._sessions = remaining

        logger.info(
            "topic_deleted",
            user_id=self.user_id.value,
            topic_id=tid.value,
            sessions_removed=removed,
        )
        self._persist()
        return Success(removed)

    def log_session(self, data: LogSessionInput) -> Result[StudySession, TopicNotFoundError]:
        """
        Append a session against a live topic.

        The date defaults to today. Goal and deadline rules are not checked
        here; run ProgressEngine.validate_session_log beforehand.
        """
        tid = TopicId(data.topic_id)
        if self._index_of(tid) is None:
            return Failure(TopicNotFoundError(data.topic_id))

        session = StudySession.create(
            id=StudySessionId(self._next_id()),
            topic_id=tid,
            duration=data.duration,
            on_date=data.date or self.clock.today(),
            notes=data.notes,
        )
        self._sessions.append(session)
        logger.info(
            "session_logged",
            user_id=self.user_id.value,
            topic_id=tid.value,
            duration=session.duration,
        )
        self._persist()
        return Success(session)

    # Queries

    def find_topic(self, topic_id: TopicRef) -> Topic | None:
        index = self._index_of(_topic_id(topic_id))
        return None if index is None else self._topics[index]

    def get_sessions(self, topic_id: TopicRef) -> list[StudySession]:
        tid = _topic_id(topic_id)
        return [s for s in self._sessions if s.belongs_to(tid)]

    def session_history(self, topic_id: TopicRef) -> list[StudySession]:
        """Sessions of a topic, newest date first; same-day sessions keep logging order."""
        return sorted(self.get_sessions(topic_id), key=lambda s: s.date, reverse=True)

    def get_progress(self, topic_id: TopicRef) -> TopicProgress | None:
        topic = self.find_topic(topic_id)
        if topic is None:
            return None
        return ProgressEngine.compute_progress(topic, self._sessions, self.clock.now())

    def get_active_topics(self) -> list[Topic]:
        """Topics neither completed nor past their deadline, in insertion order."""
        now = self.clock.now()
        return [
            topic
            for topic in self._topics
            if ProgressEngine.compute_progress(topic, self._sessions, now).is_active
        ]

    def get_active_topic_count(self) -> int:
        return len(self.get_active_topics())

    def get_total_study_time(self) -> float:
        """Hours logged across all topics, one decimal."""
        return round(sum(s.duration for s in self._sessions) / 60, 1)

    def _index_of(self, topic_id: TopicId) -> int | None:
        for index, topic in enumerate(self._topics):
            if topic.id == topic_id:
                return index
        return None

    def _next_id(self) -> str:
        taken = {t.id.value for t in self._topics} | {s.id.value for s in self._sessions}
        return self.id_generator.next_id(taken)

    def _persist(self) -> None:
        result = self.gateway.save(self.user_id, self._topics, self._sessions)
        if result.is_failure:
            error = result.unwrap_error()
            self.last_persistence_error = error
            logger.warning("mutation_not_persisted", user_id=self.user_id.value, error=error.message)
        else:
            self.last_persistence_error = None
