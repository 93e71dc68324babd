"""Synchronization defaults for synonym runs."""

from __future__ import annotations

from dataclasses import dataclass

from doitsukani.domain.batching import (
    DEFAULT_BATCH_DELAY_SECONDS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_ITEM_DELAY_SECONDS,
)

from .errors import ConfigurationError

DEFAULT_TARGET_LANGUAGE = "DE"
DEFAULT_TRANSLATION_RETRIES = 3
# WaniKani rejects study materials with more than eight meaning synonyms.
MAX_MEANING_SYNONYMS = 8


@dataclass(frozen=True, slots=True)
class SyncConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    item_delay_seconds: float = DEFAULT_ITEM_DELAY_SECONDS
    batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS
    target_language: str = DEFAULT_TARGET_LANGUAGE
    translation_retries: int = DEFAULT_TRANSLATION_RETRIES
    max_synonyms: int = MAX_MEANING_SYNONYMS

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be at least 1")
        if self.item_delay_seconds < 0 or self.batch_delay_seconds < 0:
            raise ConfigurationError("delays must not be negative")
        if self.translation_retries < 1:
            raise ConfigurationError("translation_retries must be at least 1")
        if self.max_synonyms < 1:
            raise ConfigurationError("max_synonyms must be at least 1")


def get_sync_config(
    *,
    batch_size: int | None = None,
    item_delay_seconds: float | None = None,
    batch_delay_seconds: float | None = None,
    target_language: str | None = None,
) -> SyncConfig:
    return SyncConfig(
        batch_size=DEFAULT_BATCH_SIZE if batch_size is None else batch_size,
        item_delay_seconds=(
            DEFAULT_ITEM_DELAY_SECONDS if item_delay_seconds is None else item_delay_seconds
        ),
        batch_delay_seconds=(
            DEFAULT_BATCH_DELAY_SECONDS if batch_delay_seconds is None else batch_delay_seconds
        ),
        target_language=(target_language or DEFAULT_TARGET_LANGUAGE).upper(),
    )
