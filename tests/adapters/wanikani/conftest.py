from __future__ import annotations

import pytest

from doitsukani.config.http_resilience import ResilienceConfig
from doitsukani.config.wanikani import WANIKANI_BASE_URL, WANIKANI_REVISION, WaniKaniConfig


@pytest.fixture
def wanikani_config() -> WaniKaniConfig:
    return WaniKaniConfig(
        api_token="wk-token",
        resilience=ResilienceConfig(
            name="wanikani",
            base_url=WANIKANI_BASE_URL,
            default_headers={"Wanikani-Revision": WANIKANI_REVISION},
        ),
    )
