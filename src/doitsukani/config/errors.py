"""Configuration error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from doitsukani.domain.errors import AuthError

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Raised when a setting has an unusable value."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class MissingCredentialsError(MissingConfigurationError, AuthError):
    """Raised when an API token or key is not configured.

    It is both a configuration problem for the CLI and an :class:`AuthError`
    for the synchronization core.
    """
