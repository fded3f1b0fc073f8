"""Dashboard summary and progress chart data derived from the repository."""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta

from learntrack.application.learning.services.learning_repository import LearningRepository
from learntrack.domain.learning.entities.topic import Topic
from learntrack.domain.learning.services.progress_engine import ProgressEngine

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class UpcomingDeadline:
    """A topic whose target date is still ahead."""

    topic: Topic
    target_date: date
    days_left: int


@dataclass(frozen=True)
class ProgressChartRow:
    """One bar of the progress chart."""

    name: str
    hours: float
    goal_hours: float
    status: str


@dataclass(frozen=True)
class DashboardSummary:
    total_topics: int
    active_topic_count: int
    total_study_hours: float
    total_sessions: int
    upcoming_deadlines: list[UpcomingDeadline] = field(default_factory=list)
    category_hours: dict[str, float] = field(default_factory=dict)
    active_topics: list[Topic] = field(default_factory=list)


class DashboardService:
    """Read-only views over the current user's topics and sessions."""

    def __init__(
        self, repository: LearningRepository, upcoming_limit: int = 3, preview_limit: int = 3
    ) -> None:
        self.repository = repository
        self.upcoming_limit = upcoming_limit
        self.preview_limit = preview_limit

    def summary(self) -> DashboardSummary:
        """
        Build the dashboard figures.

        Returns:
            DashboardSummary with totals, the soonest upcoming deadlines,
            hours per category over active topics and the first active topics
        """
        active_topics = self.repository.get_active_topics()
        return DashboardSummary(
            total_topics=len(self.repository.topics),
            active_topic_count=len(active_topics),
            total_study_hours=self.repository.get_total_study_time(),
            total_sessions=len(self.repository.sessions),
            upcoming_deadlines=self.upcoming_deadlines(),
            category_hours=self.category_hours(active_topics),
            active_topics=active_topics[: self.preview_limit],
        )

    def upcoming_deadlines(self) -> list[UpcomingDeadline]:
        """Unfinished topics whose deadline lies ahead, soonest first."""
        now = self.repository.clock.now()
        sessions = self.repository.sessions
        upcoming = []
        for topic in self.repository.topics:
            deadline = topic.deadline
            if deadline is None or topic.target_date is None or deadline <= now:
                continue
            if ProgressEngine.compute_progress(topic, sessions, now).is_completed:
                continue
            upcoming.append(
                UpcomingDeadline(
                    topic=topic,
                    target_date=topic.target_date,
                    days_left=math.ceil((deadline - now) / ONE_DAY),
                )
            )
        upcoming.sort(key=lambda item: item.target_date)
        return upcoming[: self.upcoming_limit]

    def category_hours(self, active_topics: list[Topic] | None = None) -> dict[str, float]:
        """Hours studied per category, counting only active topics with a category."""
        if active_topics is None:
            active_topics = self.repository.get_active_topics()
        now = self.repository.clock.now()
        sessions = self.repository.sessions
        hours: dict[str, float] = {}
        for topic in active_topics:
            if topic.category is None:
                continue
            progress = ProgressEngine.compute_progress(topic, sessions, now)
            key = topic.category.value
            hours[key] = round(hours.get(key, 0.0) + progress.total_hours, 1)
        return hours

    def chart_rows(self) -> list[ProgressChartRow]:
        """Hours against goal for every topic, with its chart status."""
        now = self.repository.clock.now()
        sessions = self.repository.sessions
        rows = []
        for topic in self.repository.topics:
            progress = ProgressEngine.compute_progress(topic, sessions, now)
            rows.append(
                ProgressChartRow(
                    name=topic.name,
                    hours=progress.total_hours,
                    goal_hours=topic.goal_hours,
                    status=progress.status,
                )
            )
        return rows
