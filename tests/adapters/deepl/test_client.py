from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from typing import TYPE_CHECKING

import httpx
import pytest

from doitsukani.adapters.deepl import DeepLClient, TranslationAPIError, UsageResponse
from doitsukani.domain.errors import (
    AuthError,
    NetworkError,
    QuotaExceededError,
    RateLimitedError,
    ValidationError,
)
from doitsukani.domain.model import TranslationTier
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable

    from doitsukani.config.deepl import DeepLConfig


def _client(
    config: DeepLConfig, handler: Callable[[httpx.Request], httpx.Response]
) -> DeepLClient:
    return DeepLClient(config=config, client_factory=make_client_factory(handler))


def _translated(text: str) -> httpx.Response:
    return httpx.Response(
        200, json={"translations": [{"detected_source_language": "EN", "text": text}]}
    )


def _translate(client: DeepLClient, text: str, **kwargs: object) -> str:
    async def scenario() -> str:
        async with client:
            return await client.translate(text, target_language="de", **kwargs)  # type: ignore[arg-type]

    return asyncio.run(scenario())


def test_translate_sends_lowercased_text_with_context(deepl_config: DeepLConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _translated("Bambus")

    result = _translate(
        _client(deepl_config, handler), "Bamboo", context="A bamboo forest in the rain."
    )

    assert result == "Bambus"
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://api-free.deepl.com/v2/translate"
    assert request.headers["Authorization"] == "DeepL-Auth-Key deepl-key"
    assert json.loads(request.content) == {
        "text": ["bamboo"],
        "target_lang": "DE",
        "source_lang": "EN",
        "context": "A bamboo forest in the rain.",
    }


def test_translate_omits_missing_context(deepl_config: DeepLConfig) -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return _translated("Boden")

    _translate(_client(deepl_config, handler), "Ground")

    assert "context" not in bodies[0]


def test_pro_tier_uses_pro_endpoint(deepl_config: DeepLConfig) -> None:
    urls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        urls.append(str(request.url))
        return _translated("Boden")

    pro_config = replace(deepl_config, tier=TranslationTier.PRO)
    client = _client(pro_config, handler)
    _translate(client, "Ground")
    _translate(_client(deepl_config, handler), "Ground", tier=TranslationTier.PRO)

    assert client.tier is TranslationTier.PRO
    assert urls == [
        "https://api.deepl.com/v2/translate",
        "https://api.deepl.com/v2/translate",
    ]


@pytest.mark.parametrize(
    ("status", "error"),
    [
        (403, AuthError),
        (456, QuotaExceededError),
        (429, RateLimitedError),
        (500, TranslationAPIError),
    ],
)
def test_error_statuses_are_mapped(
    deepl_config: DeepLConfig, status: int, error: type[Exception]
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "denied"})

    with pytest.raises(error, match="denied"):
        _translate(_client(deepl_config, handler), "Ground")


def test_transport_errors_are_retried_then_reported(deepl_config: DeepLConfig) -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError, match="after 4 attempt"):
        _translate(_client(deepl_config, handler), "Ground", retries=4)

    assert len(attempts) == 4


def test_transport_error_then_success(deepl_config: DeepLConfig) -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return _translated("Boden")

    assert _translate(_client(deepl_config, handler), "Ground") == "Boden"
    assert len(attempts) == 2


def test_empty_translation_list_is_rejected(deepl_config: DeepLConfig) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"translations": []})

    with pytest.raises(TranslationAPIError):
        _translate(_client(deepl_config, handler), "Ground")


def test_blank_text_is_rejected_without_a_request(deepl_config: DeepLConfig) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ValidationError):
        _translate(_client(deepl_config, handler), "   ")


def test_usage_reports_remaining_characters(deepl_config: DeepLConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/v2/usage"
        return httpx.Response(200, json={"character_count": 125000, "character_limit": 500000})

    async def scenario() -> UsageResponse:
        async with _client(deepl_config, handler) as client:
            return await client.usage()

    usage = asyncio.run(scenario())

    assert usage.remaining == 375000
    assert usage.percent_used == pytest.approx(25.0)
