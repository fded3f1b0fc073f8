"""Tests for ProgressEngine domain service."""

from datetime import UTC, date, datetime, timedelta

import pytest

from learntrack.domain.common.value_objects.ids import StudySessionId, TopicId
from learntrack.domain.learning.entities.study_session import StudySession
from learntrack.domain.learning.entities.topic import Topic
from learntrack.domain.learning.exceptions import (
    DeadlinePassedError,
    GoalExceededError,
    InvalidDurationError,
    NoTopicSelectedError,
)
from learntrack.domain.learning.services.progress_engine import ProgressEngine

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _make_topic(
    id: str = "t1", goal_hours: float = 10, target_date: date | None = None
) -> Topic:
    return Topic.create(
        id=TopicId(id),
        name=f"Topic {id}",
        created_at=NOW - timedelta(days=30),
        category="Science",
        goal_hours=goal_hours,
        target_date=target_date,
    )


def _make_sessions(topic_id: str, *durations: int) -> list[StudySession]:
    return [
        StudySession.create(
            id=StudySessionId(f"{topic_id}-s{index}"),
            topic_id=TopicId(topic_id),
            duration=duration,
            on_date=date(2024, 5, 1),
        )
        for index, duration in enumerate(durations)
    ]


class TestComputeProgress:
    @pytest.mark.parametrize("minutes", [[], [30], [600, 600, 6000]])
    def test_goal_zero_never_completes(self, minutes: list[int]) -> None:
        topic = _make_topic(goal_hours=0)
        progress = ProgressEngine.compute_progress(topic, _make_sessions("t1", *minutes), NOW)
        assert progress.percent_complete == 0
        assert progress.is_completed is False
        assert progress.is_active is True

    def test_totals_and_unrounded_percentage(self) -> None:
        topic = _make_topic(goal_hours=3)
        progress = ProgressEngine.compute_progress(topic, _make_sessions("t1", 60, 40), NOW)
        assert progress.total_minutes == 100
        assert progress.total_hours == 1.7
        assert progress.session_count == 2
        assert progress.percent_complete == pytest.approx(100 / 180 * 100)

    def test_percentage_is_capped(self) -> None:
        topic = _make_topic(goal_hours=1)
        progress = ProgressEngine.compute_progress(topic, _make_sessions("t1", 200), NOW)
        assert progress.percent_complete == 100
        assert progress.is_completed is True
        assert progress.is_active is False
        assert progress.can_log_session is False

    def test_completion_is_sticky(self) -> None:
        topic = _make_topic(goal_hours=1)
        sessions = _make_sessions("t1", 60)
        assert ProgressEngine.compute_progress(topic, sessions, NOW).is_completed

        # Any further session is rejected, and completion holds
        rejected = ProgressEngine.validate_session_log(topic, sessions, 10, NOW)
        assert isinstance(rejected, GoalExceededError)
        assert rejected.remaining_minutes == 0
        later = ProgressEngine.compute_progress(topic, sessions, NOW + timedelta(days=365))
        assert later.is_completed is True

    def test_sessions_of_other_topics_are_ignored(self) -> None:
        topic = _make_topic("t1", goal_hours=1)
        sessions = _make_sessions("t1", 30) + _make_sessions("t2", 600)
        progress = ProgressEngine.compute_progress(topic, sessions, NOW)
        assert progress.total_minutes == 30
        assert progress.session_count == 1

    def test_target_date_today_is_already_exceeded(self) -> None:
        topic = _make_topic(target_date=NOW.date())
        progress = ProgressEngine.compute_progress(topic, [], NOW)
        assert progress.is_deadline_exceeded is True
        assert progress.is_active is False
        assert progress.status == "deadline"

    def test_target_date_tomorrow_is_not_exceeded(self) -> None:
        topic = _make_topic(target_date=NOW.date() + timedelta(days=1))
        progress = ProgressEngine.compute_progress(topic, [], NOW)
        assert progress.is_deadline_exceeded is False
        assert progress.status == "normal"

    def test_complete_status_wins_over_deadline(self) -> None:
        topic = _make_topic(goal_hours=1, target_date=date(2024, 1, 1))
        progress = ProgressEngine.compute_progress(topic, _make_sessions("t1", 60), NOW)
        assert progress.status == "complete"


class TestValidateSessionLog:
    def test_no_topic_selected(self) -> None:
        error = ProgressEngine.validate_session_log(None, [], 30, NOW)
        assert isinstance(error, NoTopicSelectedError)
        assert error.message == "No topic selected"

    def test_deadline_checked_before_duration(self) -> None:
        topic = _make_topic(target_date=date(2024, 5, 1))
        error = ProgressEngine.validate_session_log(topic, [], "abc", NOW)
        assert isinstance(error, DeadlinePassedError)
        assert error.message == "Cannot log session - deadline has passed"

    @pytest.mark.parametrize("raw", ["abc", "", None, float("nan")])
    def test_non_numeric_duration(self, raw: object) -> None:
        error = ProgressEngine.validate_session_log(_make_topic(), [], raw, NOW)
        assert isinstance(error, InvalidDurationError)
        assert error.message == "Please enter a valid duration"

    @pytest.mark.parametrize(
        ("raw", "minutes"), [("1e2", 100), ("12.9", 12), (" 45 ", 45), (30.7, 30)]
    )
    def test_decimal_notation_is_truncated(self, raw: object, minutes: int) -> None:
        assert ProgressEngine.parse_duration(raw) == minutes

    @pytest.mark.parametrize("raw", ["0x10", "12abc"])
    def test_hex_and_trailing_garbage_are_rejected(self, raw: object) -> None:
        assert isinstance(ProgressEngine.parse_duration(raw), InvalidDurationError)

    @pytest.mark.parametrize("raw", [0, "-5", 0.5])
    def test_duration_truncating_to_zero_or_less(self, raw: object) -> None:
        error = ProgressEngine.validate_session_log(_make_topic(), [], raw, NOW)
        assert isinstance(error, InvalidDurationError)
        assert error.message == "Duration must be at least 1 minute"

    def test_goal_exceeded_reports_remaining_minutes(self) -> None:
        error = ProgressEngine.validate_session_log(_make_topic(goal_hours=10), [], 700, NOW)
        assert isinstance(error, GoalExceededError)
        assert error.past_minutes == 0
        assert error.goal_minutes == 600
        assert error.remaining_minutes == 600
        assert "You can log up to 600 more minutes." in error.message

    def test_goal_exceeded_counts_past_sessions(self) -> None:
        topic = _make_topic(goal_hours=2)
        error = ProgressEngine.validate_session_log(
            topic, _make_sessions("t1", 90), 31, NOW
        )
        assert isinstance(error, GoalExceededError)
        assert error.remaining_minutes == 30

    def test_reaching_goal_exactly_is_accepted(self) -> None:
        topic = _make_topic(goal_hours=10)
        assert ProgressEngine.validate_session_log(topic, [], 600, NOW) is None

    @pytest.mark.parametrize("duration", [1, 700, 100_000])
    def test_goal_zero_always_accepts(self, duration: int) -> None:
        topic = _make_topic(goal_hours=0)
        past = _make_sessions("t1", 5000, 5000)
        assert ProgressEngine.validate_session_log(topic, past, duration, NOW) is None

    def test_approaching_deadline_does_not_block(self) -> None:
        topic = _make_topic(target_date=NOW.date() + timedelta(days=1))
        assert ProgressEngine.validate_session_log(topic, [], 30, NOW) is None


class TestRemainingAndGuidance:
    def test_remaining_is_unbounded_without_goal(self) -> None:
        assert ProgressEngine.remaining_minutes(_make_topic(goal_hours=0), []) is None

    def test_remaining_never_negative(self) -> None:
        topic = _make_topic(goal_hours=1)
        assert ProgressEngine.remaining_minutes(topic, _make_sessions("t1", 90)) == 0

    def test_guidance_for_goal_topic(self) -> None:
        topic = _make_topic(goal_hours=2)
        guidance = ProgressEngine.session_log_guidance(topic, _make_sessions("t1", 50))
        assert guidance.goal_hours == 2
        assert guidance.logged_hours == 0.8
        assert guidance.remaining_hours == 1.2
        assert guidance.remaining_label == "1.2h"

    def test_guidance_without_goal_shows_infinity(self) -> None:
        guidance = ProgressEngine.session_log_guidance(_make_topic(goal_hours=0), [])
        assert guidance.goal_hours is None
        assert guidance.remaining_label == "∞"
