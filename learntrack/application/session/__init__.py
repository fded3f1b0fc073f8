from .session_context import SessionContext
from .session_timer import SessionTimer, TimerState, format_duration

__all__ = ["SessionContext", "SessionTimer", "TimerState", "format_duration"]
