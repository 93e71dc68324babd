"""Error taxonomy shared by the synchronization core and its adapters."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures the synchronization core knows how to classify."""


class AuthError(SyncError):
    """Raised when credentials are missing or rejected by a provider."""


class QuotaExceededError(SyncError):
    """Raised when the translation provider's character quota is used up."""


class NetworkError(SyncError):
    """Raised on transport failures and unexpected provider responses."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(NetworkError):
    """Raised when a provider answers with HTTP 429."""


class ValidationError(SyncError, ValueError):
    """Raised when a synonym set or request payload would be rejected."""


class UnknownSessionError(SyncError, LookupError):
    """Raised when a session id was never issued by the controller."""
