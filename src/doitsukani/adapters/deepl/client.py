"""HTTP client for the DeepL translation API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
import pydantic

from doitsukani.adapters.http_resilience import ResilientClient
from doitsukani.config.deepl import deepl_base_url
from doitsukani.domain.errors import (
    AuthError,
    NetworkError,
    QuotaExceededError,
    RateLimitedError,
    ValidationError,
)

from .schema import ErrorResponse, TranslateResponse, UsageResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from doitsukani.config.deepl import DeepLConfig
    from doitsukani.config.http_resilience import ResilienceConfig
    from doitsukani.domain.model import TranslationTier
    from doitsukani.domain.ports import Translator

log = getLogger(__name__)

DEFAULT_SOURCE_LANGUAGE = "EN"
DEFAULT_TRANSLATION_RETRIES = 3
HTTP_QUOTA_EXCEEDED = 456


class TranslationAPIError(NetworkError):
    """Raised when DeepL answers with an unexpected status or payload."""


class DeepLClient:
    """Translate radical meanings through DeepL.

    Meanings are lower-cased before sending: DeepL passes capitalized words
    through untranslated as proper nouns ("Bamboo" stays "Bamboo").
    """

    def __init__(
        self,
        *,
        config: DeepLConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    @property
    def tier(self) -> TranslationTier:
        return self._config.tier

    async def __aenter__(self) -> DeepLClient:
        self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def translate(
        self,
        text: str,
        *,
        target_language: str,
        tier: TranslationTier | None = None,
        retries: int | None = None,
        context: str | None = None,
    ) -> str:
        if not text or not text.strip():
            raise ValidationError("Text to translate must not be empty")

        body: dict[str, object] = {
            "text": [text.lower()],
            "target_lang": target_language.upper(),
            "source_lang": DEFAULT_SOURCE_LANGUAGE,
        }
        if context:
            body["context"] = context

        url = deepl_base_url(tier or self._config.tier) + "translate"
        attempts = max(1, retries if retries is not None else DEFAULT_TRANSLATION_RETRIES)
        response = await self._send_with_retries("POST", url, attempts=attempts, json=body)
        payload = self._validate(TranslateResponse, response)
        return payload.translations[0].text

    async def usage(self, *, tier: TranslationTier | None = None) -> UsageResponse:
        url = deepl_base_url(tier or self._config.tier) + "usage"
        response = await self._send_with_retries("GET", url, attempts=1)
        return self._validate(UsageResponse, response)

    async def _send_with_retries(
        self,
        method: str,
        url: str,
        *,
        attempts: int,
        json: object = None,
    ) -> httpx.Response:
        client = self._require_client()
        headers = {"Authorization": f"DeepL-Auth-Key {self._config.api_key}"}
        last_error: httpx.TransportError | None = None
        for attempt in range(1, attempts + 1):
            try:
                if json is None:
                    response = await client.request(method, url, headers=headers)
                else:
                    response = await client.request(method, url, headers=headers, json=json)
            except httpx.TransportError as exc:
                last_error = exc
                log.debug("DeepL request attempt %d/%d failed: %s", attempt, attempts, exc)
                continue
            except httpx.HTTPError as exc:
                raise NetworkError(f"DeepL request failed: {exc}") from exc
            _raise_for_status(response)
            return response
        raise NetworkError(f"DeepL unreachable after {attempts} attempt(s): {last_error}")

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise RuntimeError("DeepLClient must be used inside 'async with'")
        return self._client

    @staticmethod
    def _validate[TModel: pydantic.BaseModel](
        model: type[TModel], response: httpx.Response
    ) -> TModel:
        try:
            return model.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            raise TranslationAPIError(
                f"Unexpected DeepL payload: {exc}", status_code=response.status_code
            ) from exc


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    if status == 403:
        raise AuthError(message or "DeepL authorization failure")
    if status == HTTP_QUOTA_EXCEEDED:
        raise QuotaExceededError(message or "DeepL quota exceeded")
    if status == 429:
        raise RateLimitedError(message or "Too many requests to DeepL", status_code=status)
    raise TranslationAPIError(message or f"DeepL API error: {status}", status_code=status)


def _error_message(response: httpx.Response) -> str | None:
    try:
        return ErrorResponse.model_validate(response.json()).message
    except (ValueError, pydantic.ValidationError):
        return None


if TYPE_CHECKING:
    _translator_check: Translator = DeepLClient(config=cast("DeepLConfig", None))
