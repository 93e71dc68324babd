"""WaniKani configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_credentials
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook

WANIKANI_BASE_URL = "https://api.wanikani.com/v2/"
WANIKANI_REVISION = "20170710"
WANIKANI_TIMEOUT_SECONDS = 15.0
# Radical listings only; see is_radical_collection.
RADICAL_CACHE_TTL_SECONDS = 7 * 24 * 60 * 60


@dataclass(frozen=True)
class WaniKaniConfig:
    """Holds WaniKani API configuration values."""

    api_token: str
    resilience: ResilienceConfig


def get_wanikani_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> WaniKaniConfig:
    values = require_credentials(("WANIKANI_API_TOKEN",))
    return WaniKaniConfig(
        api_token=values["WANIKANI_API_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="wanikani",
            base_url=WANIKANI_BASE_URL,
            timeout_seconds=WANIKANI_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=60, per_seconds=60.0),
            cache=(
                CacheConfig(should_cache=cache_predicate, ttl_seconds=RADICAL_CACHE_TTL_SECONDS)
                if cache_predicate is not None
                else None
            ),
            default_headers={"Wanikani-Revision": WANIKANI_REVISION},
        ),
    )
