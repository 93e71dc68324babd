from __future__ import annotations

import pytest

from doitsukani.config.deepl import DeepLConfig, default_deepl_resilience
from doitsukani.domain.model import TranslationTier


@pytest.fixture
def deepl_config() -> DeepLConfig:
    return DeepLConfig(
        api_key="deepl-key",
        tier=TranslationTier.FREE,
        resilience=default_deepl_resilience(),
    )
