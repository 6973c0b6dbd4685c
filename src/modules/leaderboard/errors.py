# src/modules/leaderboard/errors.py


class LeaderboardError(Exception):
    """Base class for errors raised by the leaderboard core."""

    retryable = False


class NotFound(LeaderboardError):
    """The requested member has no entry in the ordered set."""

    def __init__(self, member: str):
        self.member = member
        super().__init__(f"No record found for {member}")


class BackingStoreError(LeaderboardError):
    """
    The backing store could not execute a command or transaction.

    The failed transaction either fully applied or not at all, so callers
    may retry the whole operation.
    """

    retryable = True

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)
