"""HTTP client for the WaniKani v2 API."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
import pydantic

from doitsukani.adapters.http_resilience import ResilientClient
from doitsukani.domain.batching import chunk
from doitsukani.domain.errors import (
    AuthError,
    NetworkError,
    RateLimitedError,
    ValidationError,
)

from .schema import (
    ErrorResponse,
    StudyMaterialCollection,
    StudyMaterialResource,
    SubjectCollection,
    SubjectResource,
)
from .translator import parse_study_item, parse_study_material

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import TracebackType

    from doitsukani.config.http_resilience import ResilienceConfig
    from doitsukani.config.wanikani import WaniKaniConfig
    from doitsukani.domain.model import StudyItem, StudyMaterialRef
    from doitsukani.domain.ports import ItemSource, StudyMaterialStore

log = getLogger(__name__)

SUBJECT_ID_PAGE_SIZE = 500


class WaniKaniAPIError(NetworkError):
    """Raised when the WaniKani API returns an unexpected response."""


def is_radical_collection(payload: object) -> bool:
    """Cache predicate: only radical subject listings are worth caching."""

    if not isinstance(payload, Mapping):
        return False
    mapping = cast(Mapping[str, object], payload)
    if mapping.get("object") != "collection":
        return False
    data = mapping.get("data")
    if not isinstance(data, list):
        return False
    resources = cast(list[object], data)
    # An empty page carries no type information, e.g. a first run without study materials.
    if not resources:
        return False
    return all(
        isinstance(resource, Mapping)
        and cast(Mapping[str, object], resource).get("object") == "radical"
        for resource in resources
    )


class WaniKaniClient:
    """Radical source and study-material store backed by the WaniKani API.

    Use as an async context manager; one underlying HTTP client is shared by
    every call made inside the ``async with`` block.
    """

    def __init__(
        self,
        *,
        config: WaniKaniConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> WaniKaniClient:
        self._client = self._client_factory(self._resilience)
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

    async def list_items(self, *, levels: Iterable[int] | None = None) -> list[StudyItem]:
        params: dict[str, str] = {"types": "radical"}
        if levels is not None:
            level_values = sorted(set(levels))
            if level_values:
                params["levels"] = ",".join(str(level) for level in level_values)

        subjects: list[SubjectResource] = []
        url: str | None = "subjects"
        query: dict[str, str] | None = params
        while url is not None:
            payload = await self._get_json(url, params=query)
            collection = self._validate(SubjectCollection, payload)
            subjects.extend(collection.data)
            url = collection.pages.next_url
            # next_url already carries the query string
            query = None

        records = await self.list_existing_records(subject.id for subject in subjects)
        items: list[StudyItem] = []
        for subject in subjects:
            record = records.get(subject.id)
            try:
                items.append(
                    parse_study_item(
                        subject,
                        current_synonyms=record.synonyms if record is not None else (),
                    )
                )
            except ValueError:
                log.warning("Skipping subject %d without meanings", subject.id)
        log.info("Fetched %d radicals from WaniKani", len(items))
        return items

    async def list_existing_records(
        self, subject_ids: Iterable[int]
    ) -> dict[int, StudyMaterialRef]:
        ids = sorted(set(subject_ids))
        records: dict[int, StudyMaterialRef] = {}
        for id_batch in chunk(ids, SUBJECT_ID_PAGE_SIZE):
            url: str | None = "study_materials"
            query: dict[str, str] | None = {
                "subject_types": "radical",
                "subject_ids": ",".join(str(subject_id) for subject_id in id_batch),
            }
            while url is not None:
                payload = await self._get_json(url, params=query)
                collection = self._validate(StudyMaterialCollection, payload)
                for resource in collection.data:
                    record = parse_study_material(resource)
                    records[record.subject_id] = record
                url = collection.pages.next_url
                query = None
        return records

    async def create_record(self, subject_id: int, synonyms: Sequence[str]) -> StudyMaterialRef:
        body = {"study_material": {"subject_id": subject_id, "meaning_synonyms": list(synonyms)}}
        response = await self._request("POST", "study_materials", json=body)
        return parse_study_material(self._validate(StudyMaterialResource, _decode_json(response)))

    async def update_record(self, record_id: int, synonyms: Sequence[str]) -> StudyMaterialRef:
        body = {"study_material": {"meaning_synonyms": list(synonyms)}}
        response = await self._request("PUT", f"study_materials/{record_id}", json=body)
        return parse_study_material(self._validate(StudyMaterialResource, _decode_json(response)))

    async def _get_json(self, url: str, *, params: Mapping[str, str] | None) -> object:
        response = await self._request("GET", url, params=params)
        return _decode_json(response)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        client = self._require_client()
        headers = {"Authorization": f"Bearer {self._config.api_token}"}
        try:
            if json is None:
                response = await client.request(method, url, params=params, headers=headers)
            else:
                response = await client.request(
                    method, url, params=params, headers=headers, json=json
                )
        except httpx.HTTPError as exc:
            raise NetworkError(f"WaniKani request failed: {exc}") from exc
        _raise_for_status(response)
        return response

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise RuntimeError("WaniKaniClient must be used inside 'async with'")
        return self._client

    @staticmethod
    def _validate[TModel: pydantic.BaseModel](model: type[TModel], payload: object) -> TModel:
        try:
            return model.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise WaniKaniAPIError(f"Unexpected WaniKani payload: {exc}") from exc


def _decode_json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise WaniKaniAPIError(
            "WaniKani returned a non-JSON response", status_code=response.status_code
        ) from exc


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    if status in {401, 403}:
        raise AuthError(f"WaniKani rejected the API token ({status}): {message}")
    if status == 422:
        raise ValidationError(f"WaniKani rejected the study material: {message}")
    if status == 429:
        raise RateLimitedError("WaniKani rate limit exceeded", status_code=status)
    raise WaniKaniAPIError(f"WaniKani API error {status}: {message}", status_code=status)


def _error_message(response: httpx.Response) -> str:
    try:
        error = ErrorResponse.model_validate(response.json()).error
    except (ValueError, pydantic.ValidationError):
        return response.text or response.reason_phrase
    return error or response.reason_phrase


if TYPE_CHECKING:
    _source_check: ItemSource = WaniKaniClient(config=cast("WaniKaniConfig", None))
    _store_check: StudyMaterialStore = WaniKaniClient(config=cast("WaniKaniConfig", None))
