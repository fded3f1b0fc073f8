"""Time-derived identifiers for topics, sessions and accounts."""

from collections.abc import Container

from learntrack.application.common.clock import ClockProtocol


class TimeOrderedIdGenerator:
    """
    Issues identifiers made of the current epoch milliseconds.

    Two IDs requested within the same millisecond, or an ID colliding with
    one already present in a document, are bumped forward until unique.
    IDs issued by one generator are strictly increasing.
    """

    def __init__(self, clock: ClockProtocol) -> None:
        self.clock = clock
        self._last_issued = 0

    def next_id(self, taken: Container[str] = frozenset()) -> str:
        """
        Return a fresh identifier.

        Args:
            taken: Identifiers already in use in the owner's document

        Returns:
            Decimal string of a millisecond timestamp
        """
        candidate = max(int(self.clock.now().timestamp() * 1000), self._last_issued + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_issued = candidate
        return str(candidate)
