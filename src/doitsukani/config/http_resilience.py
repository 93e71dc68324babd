"""Knobs for the per-service HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Status and transport retries performed by the ``httpx-retries`` transport."""

    total: int = 4
    backoff_factor: float = 0.5
    methods: frozenset[str] = frozenset({"GET", "POST", "PUT"})
    statuses: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; only JSON bodies accepted by ``should_cache`` are stored."""

    should_cache: ShouldCacheHook
    ttl_seconds: float | None = None
    # Defaults to the HTTP cache file in the data directory.
    path: Path | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict[str, str])
