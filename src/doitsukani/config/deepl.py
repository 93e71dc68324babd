"""DeepL configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from doitsukani.domain.model import TranslationTier

from .env import env_flag, require_credentials
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEEPL_FREE_BASE_URL = "https://api-free.deepl.com/v2/"
DEEPL_PRO_BASE_URL = "https://api.deepl.com/v2/"
DEEPL_TIMEOUT_SECONDS = 15.0


def deepl_base_url(tier: TranslationTier) -> str:
    return DEEPL_PRO_BASE_URL if tier is TranslationTier.PRO else DEEPL_FREE_BASE_URL


@dataclass(frozen=True)
class DeepLConfig:
    """Holds DeepL API configuration values."""

    api_key: str
    tier: TranslationTier
    resilience: ResilienceConfig


def default_deepl_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="deepl",
        timeout_seconds=DEEPL_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        # Transport failures are retried by the translator itself.
        retry=RetryPolicy(total=2, exceptions=()),
    )


def get_deepl_config(*, resilience: ResilienceConfig | None = None) -> DeepLConfig:
    values = require_credentials(("DEEPL_API_KEY",))
    tier = TranslationTier.PRO if env_flag("DEEPL_PRO") else TranslationTier.FREE
    return DeepLConfig(
        api_key=values["DEEPL_API_KEY"],
        tier=tier,
        resilience=resilience or default_deepl_resilience(),
    )


def get_optional_deepl_config(*, resilience: ResilienceConfig | None = None) -> DeepLConfig | None:
    """Return the DeepL configuration, or ``None`` when no key is configured."""

    value = os.getenv("DEEPL_API_KEY")
    if value is None or not value.strip():
        return None
    return get_deepl_config(resilience=resilience)
