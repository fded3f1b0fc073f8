"""Explicit per-login context replacing any module-level auth state."""

from dataclasses import dataclass, field

import structlog

from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.application.session.session_timer import SessionTimer
from learntrack.domain.identity.entities.user import User

logger = structlog.get_logger(__name__)


@dataclass
class SessionContext:
    """
    Everything that lives exactly as long as one authenticated session.

    Created on successful login or registration and closed on logout or
    when the timer forces the session to end.
    """

    user: User
    repository: LearningRepository
    timer: SessionTimer
    closed: bool = field(default=False, init=False)

    def close(self) -> str:
        """
        Stop the timer and mark the context closed.

        Returns:
            The session summary, or "" if the timer had already stopped
        """
        if self.closed:
            return ""
        summary = self.timer.logout()
        self.closed = True
        logger.info("session_context_closed", user_id=self.user.id.value)
        return summary
