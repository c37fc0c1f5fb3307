"""Error taxonomy shared by the journal store, the relay and the API."""


class MindMateError(Exception):
    """Base exception for MindMate Relay errors."""


class ValidationError(MindMateError):
    """Raised when the caller supplied insufficient input."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConfigurationError(MindMateError):
    """Raised when the service is missing a required setting."""


class UpstreamError(MindMateError):
    """Raised when the completion service call failed."""

    def __init__(self, message: str = "LLM unavailable", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(MindMateError):
    """Raised when the key-value store failed."""
