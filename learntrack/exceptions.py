"""Exception hierarchy for infrastructure failures in LearnTrack."""


class LearnTrackError(Exception):
    """Base exception for all non-domain LearnTrack errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception with message."""
        self.message = message
        super().__init__(self.message)


class PersistenceError(LearnTrackError):
    """Reading or writing the local keyed store failed."""

    def __init__(self, operation: str, key: str | None = None, reason: str | None = None) -> None:
        """Initialize with the failed operation, the key involved and the cause."""
        self.operation = operation
        self.key = key
        self.reason = reason
        message = f"Storage {operation} failed"
        if key:
            message += f" for key '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
