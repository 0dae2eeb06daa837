"""IMDb suggestion API client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from imdb_suggest.config import ApiSettings
from imdb_suggest.domain.models import CandidateRecord
from imdb_suggest.logging import logger

# Characters encodeURIComponent leaves untouched besides the unreserved set.
URI_COMPONENT_SAFE = "!*'()"


class FetchFailure(str, Enum):
    UNREACHABLE = "unreachable"
    BAD_STATUS = "bad_status"
    EMPTY_BODY = "empty_body"
    MALFORMED_JSON = "malformed_json"
    MISSING_FIELD = "missing_field"


@dataclass(slots=True)
class FetchResult:
    candidates: list[CandidateRecord] = field(default_factory=list)
    failure: FetchFailure | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class SuggestionFetcher:
    """Single-shot client for the suggestion endpoint.

    ``fetch`` never raises for network or payload problems; it returns an
    empty ``FetchResult`` tagged with the failure kind instead.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: ApiSettings | None = None) -> None:
        self._client = http_client
        self._settings = settings or ApiSettings()

    def build_url(self, query: str) -> str:
        base = str(self._settings.base_url).rstrip("/")
        first = quote(query[0], safe="")
        return f"{base}/suggestion/{first}/{quote(query, safe=URI_COMPONENT_SAFE)}.json"

    async def fetch(self, query: str) -> FetchResult:
        if not query:
            return FetchResult()

        url = self.build_url(query)
        try:
            response = await self._client.get(url, timeout=self._settings.request_timeout_seconds)
        except httpx.HTTPError as exc:
            return self._fail(FetchFailure.UNREACHABLE, f"{exc.__class__.__name__}: {exc}", url)

        if response.status_code != 200:
            return self._fail(FetchFailure.BAD_STATUS, f"HTTP {response.status_code}", url)
        if not response.content:
            return self._fail(FetchFailure.EMPTY_BODY, "empty response body", url)

        try:
            payload = response.json()
        except ValueError as exc:
            return self._fail(FetchFailure.MALFORMED_JSON, str(exc), url)
        if not isinstance(payload, dict):
            return self._fail(FetchFailure.MALFORMED_JSON, "response is not a JSON object", url)

        raw_records = payload.get("d")
        if not isinstance(raw_records, list):
            return self._fail(FetchFailure.MISSING_FIELD, "no 'd' list in response", url)

        candidates = [
            record
            for record in (normalize_record(raw) for raw in raw_records)
            if record is not None
        ]
        logger.debug("suggestions_fetched", url=url, count=len(candidates), raw_count=len(raw_records))
        return FetchResult(candidates=candidates)

    @staticmethod
    def _fail(kind: FetchFailure, detail: str, url: str) -> FetchResult:
        logger.warning("suggestion_fetch_failed", failure=kind.value, detail=detail, url=url)
        return FetchResult(failure=kind, detail=detail)


def normalize_record(raw: Any) -> CandidateRecord | None:
    """Map one API record (``id``/``l``/``s``/``i.imageUrl``) to a candidate."""

    if not isinstance(raw, dict):
        return None
    record_id = raw.get("id")
    if not isinstance(record_id, str) or not record_id.strip():
        return None
    record_id = record_id.strip()

    label = raw.get("l")
    subtitle = raw.get("s")
    image = raw.get("i")
    image_url = image.get("imageUrl") if isinstance(image, dict) else None

    try:
        return CandidateRecord(
            id=record_id,
            label=str(label) if label not in (None, "") else record_id,
            subtitle=str(subtitle) if subtitle is not None else "",
            image_url=image_url if isinstance(image_url, str) and image_url else None,
        )
    except ValidationError:
        return None


__all__ = [
    "FetchFailure",
    "FetchResult",
    "SuggestionFetcher",
    "normalize_record",
]
