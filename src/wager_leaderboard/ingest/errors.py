class AcquisitionError(Exception):
    """Base error for a leaderboard source that could not produce a table.

    Attributes:
        message: Human-readable error description.
        cause: Optional underlying exception that caused this error.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class TransportFailure(AcquisitionError):
    """No relay delivered a successful response."""


class MalformedPayload(AcquisitionError):
    """A response body could not be turned into a sheet table."""
