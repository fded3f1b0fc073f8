"""Use case for logging a study session behind the progress checks."""

from datetime import date

import structlog

from learntrack.application.common.clock import ClockProtocol
from learntrack.application.common.result import Failure, FieldErrors, Result, Success
from learntrack.application.common.validation import validate_form
from learntrack.application.learning.inputs import LogSessionInput
from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.domain.common.exceptions import BusinessRuleViolationError
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.exceptions import TopicNotFoundError
from learntrack.domain.learning.services.progress_engine import (
    ProgressEngine,
    SessionLogGuidance,
)

logger = structlog.get_logger(__name__)

SessionRuleError = BusinessRuleViolationError | TopicNotFoundError
LogSessionError = SessionRuleError | FieldErrors


class LogSessionUseCase:
    def __init__(self, repository: LearningRepository, clock: ClockProtocol) -> None:
        """Initialize use case with dependencies."""
        self.repository = repository
        self.clock = clock

    def check(self, topic_id: str | None, duration: object) -> Result[int, SessionRuleError]:
        """
        Run the pre-submission checks for a session.

        Returns:
            Success with the duration in whole minutes, or Failure with
            NoTopicSelectedError, TopicNotFoundError, DeadlinePassedError,
            InvalidDurationError or GoalExceededError
        """
        if not topic_id:
            topic = None
        else:
            topic = self.repository.find_topic(topic_id)
            if topic is None:
                return Failure(TopicNotFoundError(topic_id))

        past_sessions = self.repository.get_sessions(topic.id) if topic else []
        error = ProgressEngine.validate_session_log(
            topic, past_sessions, duration, self.clock.now()
        )
        if error is not None:
            return Failure(error)
        return Success(ProgressEngine.parse_duration(duration))

    def execute(
        self,
        topic_id: str | None,
        duration: object,
        notes: str | None = None,
        on_date: date | str | None = None,
    ) -> Result[StudySession, LogSessionError]:
        """
        Log a session once every check has passed.

        Args:
            topic_id: Selected topic, or None when nothing is selected
            duration: Raw duration in minutes
            notes: Optional notes
            on_date: Session date, today when omitted

        Returns:
            Success with the stored session, Failure with the first rule
            the session breaks, or Failure with field errors for a
            malformed date
        """
        checked = self.check(topic_id, duration)
        if checked.is_failure:
            error = checked.unwrap_error()
            logger.info("session_rejected", topic_id=topic_id, reason=error.message)
            return checked

        validated = validate_form(
            LogSessionInput,
            {"topic_id": topic_id, "duration": checked.unwrap(), "notes": notes, "date": on_date},
        )
        if validated.is_failure:
            logger.info("session_form_rejected", topic_id=topic_id, errors=validated.unwrap_error())
            return validated
        return self.repository.log_session(validated.unwrap())

    def guidance(self, topic_id: str) -> SessionLogGuidance | None:
        """Goal, logged and remaining hours for the log form, or None for an unknown topic."""
        topic = self.repository.find_topic(topic_id)
        if topic is None:
            return None
        return ProgressEngine.session_log_guidance(topic, self.repository.get_sessions(topic.id))
