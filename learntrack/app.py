"""Composition root wiring the store, identity, learning and session components."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import structlog
from dependency_injector import providers

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.id_generator import TimeOrderedIdGenerator
from learntrack.application.common.result import FieldErrors, Result, Success
from learntrack.application.identity.services.identity_service import (
    IdentityService,
    LoginError,
    RegistrationError,
)
from learntrack.application.learning.services.dashboard_service import DashboardService
from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.application.learning.services.topic_filter import TopicFilter
from learntrack.application.learning.use_cases.add_topic_use_case import AddTopicUseCase
from learntrack.application.learning.use_cases.log_session_use_case import (
    LogSessionError,
    LogSessionUseCase,
)
from learntrack.application.session.session_context import SessionContext
from learntrack.application.session.session_timer import SessionTimer
from learntrack.config import Settings, configure_logging, get_settings
from learntrack.core import Container
from learntrack.domain.identity.entities.user import User
from learntrack.domain.identity.exceptions import NotAuthenticatedError
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.infrastructure.storage.persistence_gateway import PersistenceGateway

logger = structlog.get_logger(__name__)


class LearnTrack:
    """
    Entry point for a presentation layer.

    Holds at most one SessionContext. Routing only needs is_authenticated;
    everything topic related goes through the current context.
    """

    def __init__(self, container: Container) -> None:
        self.container = container
        self.settings: Settings = container.settings()
        self.clock: ClockProtocol = container.clock()
        self.id_generator: TimeOrderedIdGenerator = container.id_generator()
        self.identity: IdentityService = container.identity_service()
        self.gateway: PersistenceGateway = container.persistence_gateway()
        self.context: SessionContext | None = None
        self.topic_filter = TopicFilter()
        self.last_session_summary = ""

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, clock: ClockProtocol | None = None
    ) -> "LearnTrack":
        """Configure logging, wire the container and build the app."""
        settings = settings or get_settings()
        configure_logging(settings.ENVIRONMENT)

        container = Container()
        container.settings.override(settings)
        if clock is not None:
            container.clock.override(providers.Object(clock))

        logger.info("learntrack_started", environment=settings.ENVIRONMENT)
        return cls(container)

    @property
    def is_authenticated(self) -> bool:
        return self.context is not None

    @property
    def repository(self) -> LearningRepository:
        """
        Current user's topics and sessions.

        Raises:
            NotAuthenticatedError: If nobody is logged in
        """
        if self.context is None:
            raise NotAuthenticatedError
        return self.context.repository

    # Identity

    def register(self, form: Mapping[str, Any]) -> Result[User, RegistrationError]:
        result = self.identity.register(form)
        if isinstance(result, Success):
            self._open_context(result.unwrap())
        return result

    def login(self, email: str, password: str) -> Result[User, LoginError]:
        result = self.identity.login(email, password)
        if isinstance(result, Success):
            self._open_context(result.unwrap())
        return result

    def restore(self) -> User | None:
        """Resume the stored session, if any, after a restart."""
        user = self.identity.restore()
        if user is not None:
            self._open_context(user)
        return user

    def logout(self) -> str:
        """
        End the session on user request.

        Returns:
            The HH:MM:SS session summary, or "" when nobody was logged in
        """
        summary = self.context.close() if self.context is not None else ""
        self._teardown(summary)
        return summary

    def tick(self, now: datetime | None = None) -> str | None:
        """Advance the session timer once; returns the summary if it forced a logout."""
        if self.context is None:
            return None
        return self.context.timer.tick(now)

    # Learning

    def add_topic(self, form: Mapping[str, Any]) -> Result[Topic, FieldErrors]:
        return AddTopicUseCase(self.repository, self.clock).execute(form)

    def log_session(
        self,
        topic_id: str | None,
        duration: object,
        notes: str | None = None,
        on_date: date | str | None = None,
    ) -> Result[StudySession, LogSessionError]:
        return LogSessionUseCase(self.repository, self.clock).execute(
            topic_id, duration, notes, on_date
        )

    def visible_topics(self) -> list[Topic]:
        return self.topic_filter.apply(self.repository.topics)

    def dashboard(self) -> DashboardService:
        return DashboardService(
            self.repository, upcoming_limit=self.settings.UPCOMING_DEADLINES_LIMIT
        )

    def _open_context(self, user: User) -> None:
        if self.context is not None:
            self.last_session_summary = self.context.close()
        repository = LearningRepository.load(user.id, self.gateway, self.clock, self.id_generator)
        timer = SessionTimer(
            self.clock,
            max_seconds=self.settings.SESSION_MAX_SECONDS,
            on_expire=self._on_expire,
            tick_seconds=self.settings.SESSION_TICK_SECONDS,
        )
        timer.start(user.login_time)
        self.context = SessionContext(user=user, repository=repository, timer=timer)
        self.topic_filter = TopicFilter()

    def _on_expire(self, summary: str) -> None:
        if self.context is not None:
            self.context.closed = True
        self._teardown(summary)

    def _teardown(self, summary: str) -> None:
        self.context = None
        self.last_session_summary = summary
        self.identity.logout()
