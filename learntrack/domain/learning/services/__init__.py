from .progress_engine import ProgressEngine, SessionLogGuidance, TopicProgress

__all__ = [
    "ProgressEngine",
    "SessionLogGuidance",
    "TopicProgress",
]
