from .study_session import StudySession
from .topic import Topic

__all__ = ["StudySession", "Topic"]
