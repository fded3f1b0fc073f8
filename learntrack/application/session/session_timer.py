"""
Session timer: elapsed time since login with a forced logout ceiling.

The timer has two states. start() enters Active with the login instant;
an explicit logout() or the ceiling being reached returns it to LoggedOut
and produces the duration summary. Only a fresh start() leaves LoggedOut.
"""

import asyncio
import contextlib
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum

import structlog

from learntrack.application.common.clock import ClockProtocol

logger = structlog.get_logger(__name__)

DEFAULT_MAX_SECONDS = 3 * 60 * 60


class TimerState(StrEnum):
    LOGGED_OUT = "LoggedOut"
    ACTIVE = "Active"


def format_duration(seconds: int) -> str:
    """Format whole seconds as HH:MM:SS; hours are not wrapped."""
    seconds = max(0, seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class SessionTimer:
    """Tracks one authenticated session's wall-clock duration."""

    def __init__(
        self,
        clock: ClockProtocol,
        max_seconds: int = DEFAULT_MAX_SECONDS,
        on_expire: Callable[[str], None] | None = None,
        tick_seconds: float = 1.0,
    ) -> None:
        self.clock = clock
        self.max_seconds = max_seconds
        self.on_expire = on_expire
        self.tick_seconds = tick_seconds
        self.state = TimerState.LOGGED_OUT
        self.started_at: datetime | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_active(self) -> bool:
        return self.state is TimerState.ACTIVE

    def start(self, login_time: datetime | None = None) -> None:
        """Enter Active from the login instant, or from now when none is given."""
        self.started_at = login_time or self.clock.now()
        self.state = TimerState.ACTIVE
        logger.debug("session_timer_started", started_at=self.started_at.isoformat())

    def elapsed_seconds(self, now: datetime | None = None) -> int:
        if not self.is_active or self.started_at is None:
            return 0
        now = now or self.clock.now()
        return max(0, int((now - self.started_at).total_seconds()))

    def elapsed_display(self, now: datetime | None = None) -> str:
        return format_duration(self.elapsed_seconds(now))

    def logout(self, now: datetime | None = None) -> str:
        """
        Leave Active on user request.

        Returns:
            The HH:MM:SS summary of the session, or "" when not active
        """
        if not self.is_active:
            return ""
        summary = self._finish(now)
        self._cancel_ticker()
        logger.info("session_timer_stopped", duration=summary)
        return summary

    def tick(self, now: datetime | None = None) -> str | None:
        """
        Check the ceiling once.

        Returns:
            The summary when this tick forced the logout, otherwise None.
            A timer that already expired returns None on later ticks.
        """
        if not self.is_active:
            return None
        if self.elapsed_seconds(now) < self.max_seconds:
            return None

        summary = self._finish(now)
        logger.info("session_expired", duration=summary, max_seconds=self.max_seconds)
        if self.on_expire is not None:
            self.on_expire(summary)
        return summary

    async def run(self) -> None:
        """Tick every tick_seconds until the session ends."""
        while self.is_active:
            await asyncio.sleep(self.tick_seconds)
            if self.tick() is not None:
                break

    def start_ticking(self) -> "asyncio.Task[None]":
        """Schedule run() on the running event loop, replacing any previous ticker."""
        self._cancel_ticker()
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop_ticking(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def _finish(self, now: datetime | None) -> str:
        summary = format_duration(self.elapsed_seconds(now))
        self.state = TimerState.LOGGED_OUT
        self.started_at = None
        return summary

    def _cancel_ticker(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
        self._task = None
