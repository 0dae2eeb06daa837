"""On-disk thumbnail cache keyed by the image URL's file name."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

import httpx

from imdb_suggest.config import SuggestSettings
from imdb_suggest.domain.models import CandidateRecord
from imdb_suggest.logging import logger
from imdb_suggest.services.exceptions import CacheError
from imdb_suggest.utils.files import ensure_dir, write_atomic

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


class IconFailure(str, Enum):
    INVALID_URL = "invalid_url"
    DOWNLOAD_FAILED = "download_failed"
    EMPTY_PAYLOAD = "empty_payload"
    WRITE_FAILED = "write_failed"


@dataclass(slots=True)
class IconResolution:
    path: str
    source: Literal["default", "cached", "downloaded"]
    failure: IconFailure | None = None


@dataclass(slots=True)
class EvictionReport:
    scanned: int = 0
    kept: int = 0
    deleted: int = 0
    failed: int = 0


class EvictionPolicy:
    """Decides, once per invocation, whether the eviction sweep should run."""

    def __init__(self, probability: float, rng: random.Random | None = None) -> None:
        self.probability = probability
        self._rng = rng or random.Random()

    def __call__(self) -> bool:
        return self._rng.random() < self.probability


class ImageCache:
    def __init__(self, http_client: httpx.AsyncClient, settings: SuggestSettings) -> None:
        self._client = http_client
        self._settings = settings
        self.images_dir = settings.images_dir

    def image_key(self, url: str) -> str | None:
        """Return the cache file name for ``url`` after the size-variant rewrite."""

        rewritten = self.rewrite_url(url)
        key = rewritten.rsplit("/", 1)[-1].split("?", 1)[0]
        if key in ("", ".", ".."):
            return None
        return key

    def rewrite_url(self, url: str) -> str:
        options = self._settings.image_cache
        if not options.size_token:
            return url
        return url.replace(options.size_token, options.size_variant, 1)

    async def resolve_icon(self, candidate: CandidateRecord) -> IconResolution:
        default = self._settings.default_icon
        if not candidate.image_url or not self._settings.show_thumbnails:
            return IconResolution(path=default, source="default")

        key = self.image_key(candidate.image_url)
        if key is None:
            return self._fallback(candidate, IconFailure.INVALID_URL)

        target = self.images_dir / key
        if target.exists():
            return IconResolution(path=str(target), source="cached")

        url = self.rewrite_url(candidate.image_url)
        try:
            response = await self._client.get(
                url, timeout=self._settings.api.request_timeout_seconds
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            return self._fallback(candidate, IconFailure.DOWNLOAD_FAILED, str(exc))

        payload = response.content
        if not payload:
            return self._fallback(candidate, IconFailure.EMPTY_PAYLOAD)

        try:
            ensure_dir(self.images_dir)
            write_atomic(target, payload)
        except CacheError as exc:
            return self._fallback(candidate, IconFailure.WRITE_FAILED, str(exc))

        logger.debug("thumbnail_downloaded", candidate_id=candidate.id, path=str(target), size=len(payload))
        return IconResolution(path=str(target), source="downloaded")

    def _fallback(
        self, candidate: CandidateRecord, failure: IconFailure, detail: str | None = None
    ) -> IconResolution:
        logger.info(
            "thumbnail_unavailable",
            candidate_id=candidate.id,
            failure=failure.value,
            detail=detail,
        )
        return IconResolution(path=self._settings.default_icon, source="default", failure=failure)

    def evict(self, max_files: int | None = None) -> EvictionReport:
        """Delete the least recently modified images beyond ``max_files``.

        Only files with a known image extension are counted or removed.
        A failed deletion is recorded and the sweep continues.
        """

        limit = self._settings.image_cache.max_files if max_files is None else max_files
        report = EvictionReport()
        if not self.images_dir.is_dir():
            return report

        images: list[tuple[float, Path]] = []
        for path in self.images_dir.iterdir():
            if not _is_image(path) or not path.is_file():
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            images.append((stat.st_mtime, path))

        report.scanned = len(images)
        if len(images) <= limit:
            report.kept = len(images)
            return report

        images.sort(key=lambda item: item[0], reverse=True)
        report.kept = limit
        for _, path in images[limit:]:
            try:
                path.unlink()
                report.deleted += 1
            except OSError as exc:
                report.failed += 1
                logger.warning("thumbnail_eviction_failed", path=str(path), error=str(exc))

        logger.info(
            "thumbnail_cache_evicted",
            scanned=report.scanned,
            deleted=report.deleted,
            failed=report.failed,
        )
        return report


def _is_image(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


__all__ = [
    "EvictionPolicy",
    "EvictionReport",
    "IconFailure",
    "IconResolution",
    "ImageCache",
    "IMAGE_EXTENSIONS",
]
