"""Per-user document gateway over the keyed store, with legacy migration."""

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.result import Failure, Result, Success
from learntrack.application.learning.protocols.document_gateway import UserDocument
from learntrack.domain.common.exceptions import DomainError
from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.exceptions import PersistenceError
from learntrack.infrastructure.storage.key_value_store import KeyValueStore
from learntrack.infrastructure.storage.mappers import (
    StudySessionMapper,
    TopicMapper,
    from_iso,
    to_iso,
)
from learntrack.infrastructure.storage.schemas import (
    SessionRecord,
    TopicRecord,
    UserDocumentRecord,
)

logger = structlog.get_logger(__name__)

# Keys in the local store
USER_DATA_KEY = "userData"
LEGACY_TOPICS_KEY = "topics"
LEGACY_SESSIONS_KEY = "sessions"


class PersistenceGateway:
    """
    Maps user IDs to documents inside the shared userData mapping.

    Legacy data from before per-user documents lives under the global
    topics/sessions keys. It is moved into the first user slot that loads
    with no topics of its own, then deleted.
    """

    def __init__(self, store: KeyValueStore, clock: ClockProtocol) -> None:
        self.store = store
        self.clock = clock
        self.topic_mapper = TopicMapper()
        self.session_mapper = StudySessionMapper()
        self._migration_checked: set[str] = set()

    def load(self, user_id: UserId) -> UserDocument:
        """
        Load a user's document.

        Read failures are logged and degrade to an empty document.
        """
        try:
            user_data = self._read_user_data()
            document = self._parse_document(user_data.get(user_id.value))

            if user_id.value not in self._migration_checked:
                migrated = self._migrate_legacy(user_id, user_data, document)
                self._migration_checked.add(user_id.value)
                if migrated is not None:
                    document = migrated
        except PersistenceError as e:
            logger.error("user_data_load_failed", user_id=user_id.value, error=e.message)
            return UserDocument()

        logger.info(
            "user_data_loaded",
            user_id=user_id.value,
            topics=len(document.topics),
            sessions=len(document.sessions),
        )
        return document

    def save(
        self, user_id: UserId, topics: list[Topic], sessions: list[StudySession]
    ) -> Result[None, PersistenceError]:
        """
        Overwrite a user's document, stamping lastUpdated.

        Other users' documents are re-read first and kept as they are.
        Failures are reported, never retried.
        """
        try:
            user_data = self._read_user_data()
            record = UserDocumentRecord(
                topics=[self.topic_mapper.to_record(t) for t in topics],
                sessions=[self.session_mapper.to_record(s) for s in sessions],
                last_updated=to_iso(self.clock.now()),
            )
            user_data[user_id.value] = record.model_dump(by_alias=True, exclude_none=True)
            self.store.set_json(USER_DATA_KEY, user_data)
        except PersistenceError as e:
            logger.error("user_data_save_failed", user_id=user_id.value, error=e.message)
            return Failure(e)

        logger.info(
            "user_data_saved", user_id=user_id.value, topics=len(topics), sessions=len(sessions)
        )
        return Success(None)

    def _read_user_data(self) -> dict[str, Any]:
        user_data = self.store.get_json(USER_DATA_KEY)
        if user_data is None:
            return {}
        if not isinstance(user_data, dict):
            raise PersistenceError("decode", USER_DATA_KEY, "expected a mapping of user documents")
        return user_data

    def _parse_document(self, raw: Any) -> UserDocument:
        if not raw:
            return UserDocument()
        try:
            record = UserDocumentRecord.model_validate(raw)
        except PydanticValidationError as e:
            raise PersistenceError("decode", USER_DATA_KEY, str(e)) from e

        return UserDocument(
            topics=self._topics_from_records(record.topics),
            sessions=self._sessions_from_records(record.sessions),
            last_updated=from_iso(record.last_updated) if record.last_updated else None,
            migrated_at=from_iso(record.migrated_at) if record.migrated_at else None,
        )

    def _topics_from_records(self, records: list[TopicRecord]) -> list[Topic]:
        topics = []
        for record in records:
            try:
                topics.append(self.topic_mapper.to_domain(record))
            except (DomainError, ValueError) as e:
                logger.warning("stored_topic_skipped", topic_id=record.id, error=str(e))
        return topics

    def _sessions_from_records(self, records: list[SessionRecord]) -> list[StudySession]:
        sessions = []
        for record in records:
            try:
                sessions.append(self.session_mapper.to_domain(record))
            except (DomainError, ValueError) as e:
                logger.warning("stored_session_skipped", session_id=record.id, error=str(e))
        return sessions

    def _read_legacy(self) -> tuple[list[Any], list[Any]]:
        legacy_topics = self.store.get_json(LEGACY_TOPICS_KEY) or []
        legacy_sessions = self.store.get_json(LEGACY_SESSIONS_KEY) or []
        if not isinstance(legacy_topics, list) or not isinstance(legacy_sessions, list):
            raise PersistenceError("decode", LEGACY_TOPICS_KEY, "legacy data is not a list")
        return legacy_topics, legacy_sessions

    def _migrate_legacy(
        self, user_id: UserId, user_data: dict[str, Any], document: UserDocument
    ) -> UserDocument | None:
        """
        Move legacy global data into the user's slot when the slot has no topics.

        Unreadable legacy data counts as nothing to migrate; the user's own
        document is kept either way.

        Returns:
            The migrated document, or None when there was nothing to migrate
        """
        if document.topics:
            return None
        try:
            legacy_topics, legacy_sessions = self._read_legacy()
        except PersistenceError as e:
            logger.warning("legacy_data_unreadable", user_id=user_id.value, error=e.message)
            return None
        if not legacy_topics:
            return None

        migrated_at = self.clock.now()
        try:
            record = UserDocumentRecord.model_validate(
                {
                    "topics": legacy_topics,
                    "sessions": legacy_sessions,
                    "migratedAt": to_iso(migrated_at),
                }
            )
        except PydanticValidationError as e:
            logger.warning("legacy_data_unreadable", user_id=user_id.value, error=str(e))
            return None

        user_data[user_id.value] = record.model_dump(by_alias=True, exclude_none=True)
        self.store.write_many(
            {USER_DATA_KEY: user_data},
            delete_keys=[LEGACY_TOPICS_KEY, LEGACY_SESSIONS_KEY],
        )

        logger.info(
            "legacy_data_migrated",
            user_id=user_id.value,
            topics=len(record.topics),
            sessions=len(record.sessions),
        )
        return UserDocument(
            topics=self._topics_from_records(record.topics),
            sessions=self._sessions_from_records(record.sessions),
            migrated_at=migrated_at,
        )
