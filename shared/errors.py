"""Error types shared by the services and the HTTP layer."""
from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an API response."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class NotFoundError(AppError):
    """Referenced article, user or stats record does not exist."""

    status_code = 404


class ValidationError(AppError):
    """Malformed or incomplete input."""

    status_code = 400


class UpstreamUnavailableError(AppError):
    """The news API could not be reached or answered with an error."""


class StoreError(AppError):
    """MongoDB operation failed. The driver exception is kept as __cause__."""

    @classmethod
    def wrap(cls, message: str, exc: Exception) -> "StoreError":
        return cls(message, error=str(exc))
