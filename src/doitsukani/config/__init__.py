"""Application configuration helpers."""

from __future__ import annotations

from .deepl import DeepLConfig, get_deepl_config, get_optional_deepl_config
from .env import env_flag, require_credentials, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, MissingCredentialsError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config
from .wanikani import WaniKaniConfig, get_wanikani_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DeepLConfig",
    "MissingConfigurationError",
    "MissingCredentialsError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "WaniKaniConfig",
    "configure_logging",
    "env_flag",
    "get_deepl_config",
    "get_optional_deepl_config",
    "get_storage_config",
    "get_sync_config",
    "get_wanikani_config",
    "require_credentials",
    "require_env_vars",
]
