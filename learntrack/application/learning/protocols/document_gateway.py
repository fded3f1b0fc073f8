"""Protocol for the per-user document gateway in learning context."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from learntrack.application.common.result import Result
from learntrack.domain.common.value_objects.ids import UserId
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.exceptions import PersistenceError


@dataclass
class UserDocument:
    """One user's topics and sessions, in insertion order."""

    topics: list[Topic] = field(default_factory=list)
    sessions: list[StudySession] = field(default_factory=list)
    last_updated: datetime | None = None
    migrated_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.topics and not self.sessions


class DocumentGatewayProtocol(Protocol):
    """Protocol for loading and saving a user's document."""

    def load(self, user_id: UserId) -> UserDocument:
        """
        Load the user's document, migrating legacy global data on first load.

        Args:
            user_id: Owner of the document

        Returns:
            The stored document, or an empty one if none exists or reading fails
        """
        ...

    def save(
        self, user_id: UserId, topics: list[Topic], sessions: list[StudySession]
    ) -> Result[None, PersistenceError]:
        """
        Overwrite the user's document with the given collections.

        Args:
            user_id: Owner of the document
            topics: Full topic collection
            sessions: Full session collection

        Returns:
            Success, or Failure carrying the storage error
        """
        ...
