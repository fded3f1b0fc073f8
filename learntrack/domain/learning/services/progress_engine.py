"""
Domain service deriving progress and logging eligibility from raw sessions.

Everything here is a pure function of a topic, its sessions and the
current instant. Nothing is cached; callers recompute on demand.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from learntrack.domain.common.exceptions import BusinessRuleViolationError
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.domain.learning.exceptions import (
    DeadlinePassedError,
    GoalExceededError,
    InvalidDurationError,
    NoTopicSelectedError,
)


@dataclass(frozen=True)
class TopicProgress:
    """Derived progress of one topic. Never persisted."""

    total_minutes: int
    total_hours: float
    session_count: int
    percent_complete: float
    is_completed: bool
    is_deadline_exceeded: bool
    is_active: bool

    @property
    def can_log_session(self) -> bool:
        """Completed and overdue topics no longer accept sessions."""
        return self.is_active

    @property
    def status(self) -> str:
        """Chart status: completion wins over an exceeded deadline."""
        if self.is_completed:
            return "complete"
        if self.is_deadline_exceeded:
            return "deadline"
        return "normal"


@dataclass(frozen=True)
class SessionLogGuidance:
    """Figures shown next to the log-session form."""

    goal_hours: float | None
    logged_hours: float
    remaining_hours: float | None

    @property
    def remaining_label(self) -> str:
        return "∞" if self.remaining_hours is None else f"{self.remaining_hours:.1f}h"


def _total_minutes(sessions: Iterable[StudySession]) -> int:
    return sum(session.duration for session in sessions)


class ProgressEngine:
    """Stateless domain service for topic progress."""

    @staticmethod
    def compute_progress(
        topic: Topic, sessions: Iterable[StudySession], now: datetime
    ) -> TopicProgress:
        """
        Derive completion, deadline and activity state for a topic.

        Args:
            topic: The topic to evaluate
            sessions: Sessions logged against this topic
            now: Current instant (timezone-aware)

        Returns:
            TopicProgress with hours rounded for display; the percentage
            is computed from the unrounded total
        """
        session_list = [s for s in sessions if s.topic_id == topic.id]
        total_minutes = _total_minutes(session_list)
        hours = total_minutes / 60

        if topic.has_goal:
            percent = min(100.0, hours / topic.goal_hours * 100)
        else:
            percent = 0.0

        is_completed = topic.has_goal and hours >= topic.goal_hours
        is_deadline_exceeded = ProgressEngine.is_deadline_exceeded(topic, now)

        return TopicProgress(
            total_minutes=total_minutes,
            total_hours=round(hours, 1),
            session_count=len(session_list),
            percent_complete=percent,
            is_completed=is_completed,
            is_deadline_exceeded=is_deadline_exceeded,
            is_active=not is_completed and not is_deadline_exceeded,
        )

    @staticmethod
    def is_deadline_exceeded(topic: Topic, now: datetime) -> bool:
        """Deadline is exceeded once the start of the target date lies before now."""
        deadline = topic.deadline
        return deadline is not None and deadline < now

    @staticmethod
    def remaining_minutes(topic: Topic, sessions: Iterable[StudySession]) -> float | None:
        """Minutes still loggable before the goal, or None when the topic has no goal."""
        if not topic.has_goal:
            return None
        return max(0.0, topic.goal_minutes - _total_minutes(sessions))

    @staticmethod
    def parse_duration(candidate: object) -> int | InvalidDurationError:
        """
        Read a candidate duration the way the log form does.

        Numbers and numeric strings are truncated to whole minutes.
        """
        if candidate is None or isinstance(candidate, bool):
            return InvalidDurationError()
        if isinstance(candidate, str):
            candidate = candidate.strip()
            if not candidate:
                return InvalidDurationError()
        try:
            value = float(candidate)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return InvalidDurationError()
        if math.isnan(value) or math.isinf(value):
            return InvalidDurationError()

        minutes = int(value)
        if minutes <= 0:
            return InvalidDurationError("Duration must be at least 1 minute")
        return minutes

    @staticmethod
    def validate_session_log(
        topic: Topic | None,
        past_sessions: Iterable[StudySession],
        candidate_duration: object,
        now: datetime,
    ) -> BusinessRuleViolationError | None:
        """
        Pre-submission check for logging a session.

        Checks run in order: topic selected, deadline not passed, duration
        valid, goal not exceeded. An approaching deadline never blocks.

        Args:
            topic: Selected topic, or None when nothing is selected
            past_sessions: Sessions already logged for the topic
            candidate_duration: Raw duration input in minutes
            now: Current instant (timezone-aware)

        Returns:
            None when the session may be logged, otherwise the violated rule
        """
        if topic is None:
            return NoTopicSelectedError()

        if ProgressEngine.is_deadline_exceeded(topic, now):
            return DeadlinePassedError()

        parsed = ProgressEngine.parse_duration(candidate_duration)
        if isinstance(parsed, InvalidDurationError):
            return parsed

        if topic.has_goal:
            past_minutes = _total_minutes(s for s in past_sessions if s.topic_id == topic.id)
            goal_minutes = topic.goal_minutes
            if past_minutes + parsed > goal_minutes:
                return GoalExceededError(
                    past_minutes=past_minutes,
                    goal_minutes=goal_minutes,
                    remaining_minutes=max(0.0, goal_minutes - past_minutes),
                )

        return None

    @staticmethod
    def session_log_guidance(
        topic: Topic, past_sessions: Iterable[StudySession]
    ) -> SessionLogGuidance:
        """Goal, logged and remaining hours for a topic's log form."""
        sessions = [s for s in past_sessions if s.topic_id == topic.id]
        remaining = ProgressEngine.remaining_minutes(topic, sessions)
        return SessionLogGuidance(
            goal_hours=topic.goal_hours if topic.has_goal else None,
            logged_hours=round(_total_minutes(sessions) / 60, 1),
            remaining_hours=None if remaining is None else round(remaining / 60, 1),
        )
