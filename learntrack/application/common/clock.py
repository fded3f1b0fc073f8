"""Clock abstraction so time-dependent rules can be tested deterministically."""

from datetime import UTC, date, datetime
from typing import Protocol


class ClockProtocol(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now().date()
