from .dashboard_service import (
    DashboardService,
    DashboardSummary,
    ProgressChartRow,
    UpcomingDeadline,
)
from .learning_repository import LearningRepository
from .topic_filter import ALL_CATEGORIES, TopicFilter

__all__ = [
    "ALL_CATEGORIES",
    "DashboardService",
    "DashboardSummary",
    "LearningRepository",
    "ProgressChartRow",
    "TopicFilter",
    "UpcomingDeadline",
]
