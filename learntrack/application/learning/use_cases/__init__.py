from .add_topic_use_case import AddTopicUseCase
from .log_session_use_case import LogSessionUseCase

__all__ = ["AddTopicUseCase", "LogSessionUseCase"]
