"""Tests for the StudySession entity."""

from datetime import date

import pytest

from learntrack.domain.common.exceptions import DomainError
from learntrack.domain.common.value_objects.ids import StudySessionId, TopicId
from learntrack.domain.learning.entities.study_session import StudySession, coerce_duration


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (45, 45),
        ("45", 45),
        ("45.9", 45),
        (0, 1),
        (-10, 1),
        ("abc", 1),
        (None, 1),
        ("1e2", 100),
    ],
)
def test_coerce_duration(raw: object, expected: int) -> None:
    assert coerce_duration(raw) == expected


def test_create_defaults_notes_to_empty() -> None:
    session = StudySession.create(
        id=StudySessionId("s1"),
        topic_id=TopicId("t1"),
        duration="30",
        on_date=date(2024, 6, 1),
        notes=None,
    )
    assert session.duration == 30
    assert session.notes == ""
    assert session.belongs_to(TopicId("t1"))
    assert not session.belongs_to(TopicId("t2"))


def test_duration_below_one_minute_is_rejected() -> None:
    with pytest.raises(DomainError):
        StudySession(
            id=StudySessionId("s1"),
            topic_id=TopicId("t1"),
            duration=0,
            date=date(2024, 6, 1),
        )
