"""Tests for DashboardService."""

from learntrack.application.learning.inputs import AddTopicInput, LogSessionInput
from learntrack.application.learning.services.dashboard_service import DashboardService
from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.domain.learning.entities.topic import Topic


def _add(repository: LearningRepository, name: str, **fields: object) -> Topic:
    return repository.add_topic(AddTopicInput(name=name, **fields))  # type: ignore[arg-type]


def _log(repository: LearningRepository, topic: Topic, minutes: int) -> None:
    repository.log_session(LogSessionInput(topic_id=topic.id.value, duration=minutes))


class TestUpcomingDeadlines:
    def test_soonest_unfinished_future_deadlines(self, repository: LearningRepository) -> None:
        _add(repository, "Later", target_date="2024-06-20", goal_hours=5)
        _add(repository, "Soon", target_date="2024-06-03", goal_hours=5)
        _add(repository, "Tomorrow", target_date="2024-06-02", goal_hours=5)
        _add(repository, "Next week", target_date="2024-06-08", goal_hours=5)
        _add(repository, "Past", target_date="2024-05-01", goal_hours=5)
        finished = _add(repository, "Finished", target_date="2024-06-04", goal_hours=1)
        _log(repository, finished, 60)

        upcoming = DashboardService(repository).upcoming_deadlines()

        assert [item.topic.name for item in upcoming] == ["Tomorrow", "Soon", "Next week"]
        assert [item.days_left for item in upcoming] == [1, 2, 7]

    def test_limit_is_configurable(self, repository: LearningRepository) -> None:
        _add(repository, "A", target_date="2024-06-10")
        _add(repository, "B", target_date="2024-06-11")
        assert len(DashboardService(repository, upcoming_limit=1).upcoming_deadlines()) == 1


def test_category_hours_cover_active_topics_only(repository: LearningRepository) -> None:
    first = _add(repository, "Rust", category="Programming", goal_hours=10)
    second = _add(repository, "Go", category="Programming", goal_hours=10)
    done = _add(repository, "Figma", category="Design", goal_hours=1)
    loose = _add(repository, "Misc", goal_hours=10)
    _log(repository, first, 90)
    _log(repository, second, 30)
    _log(repository, done, 60)
    _log(repository, loose, 60)

    assert DashboardService(repository).category_hours() == {"Programming": 2.0}


def test_summary(repository: LearningRepository) -> None:
    topics = [_add(repository, f"Topic {n}", category="Science", goal_hours=2) for n in range(4)]
    _log(repository, topics[0], 120)
    _log(repository, topics[1], 30)

    summary = DashboardService(repository).summary()

    assert summary.total_topics == 4
    assert summary.active_topic_count == 3
    assert summary.total_study_hours == 2.5
    assert summary.total_sessions == 2
    assert summary.upcoming_deadlines == []
    assert [t.name for t in summary.active_topics] == ["Topic 1", "Topic 2", "Topic 3"]
    assert summary.category_hours == {"Science": 0.5}


def test_chart_rows(repository: LearningRepository) -> None:
    done = _add(repository, "Done", goal_hours=1)
    _add(repository, "Overdue", goal_hours=3, target_date="2024-05-01")
    _add(repository, "Open", goal_hours=0)
    _log(repository, done, 75)

    rows = DashboardService(repository).chart_rows()

    assert [(r.name, r.hours, r.goal_hours, r.status) for r in rows] == [
        ("Done", 1.2, 1.0, "complete"),
        ("Overdue", 0.0, 3.0, "deadline"),
        ("Open", 0.0, 0.0, "normal"),
    ]
