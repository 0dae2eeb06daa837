"""JSON-file cache of rendered documents, with expiry, a size bound and debounce bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from pydantic import ValidationError

from imdb_suggest.config import SuggestSettings
from imdb_suggest.domain.models import CacheEntry, CacheStore, CandidateRecord, ResultDocument
from imdb_suggest.logging import logger
from imdb_suggest.services.exceptions import CacheError
from imdb_suggest.utils.files import read_text, write_atomic


@dataclass(slots=True)
class CacheLoad:
    store: CacheStore
    status: Literal["loaded", "missing", "corrupt"]


@dataclass(slots=True)
class DebounceDecision:
    allowed: bool
    document: ResultDocument | None = None
    replayed: bool = False


class ResultCache:
    """Operations over an explicit ``CacheStore``.

    The store is loaded once per invocation, changed in memory and written
    back as a whole. Nothing here holds state between calls besides settings.
    """

    def __init__(self, settings: SuggestSettings) -> None:
        self._settings = settings
        self._options = settings.result_cache
        self.path = settings.cache_file

    def load(self) -> CacheLoad:
        try:
            text = read_text(self.path)
        except CacheError as exc:
            logger.warning("result_cache_unreadable", path=str(self.path), error=str(exc))
            return CacheLoad(store=CacheStore(), status="corrupt")
        if text is None:
            return CacheLoad(store=CacheStore(), status="missing")

        try:
            store = CacheStore.model_validate_json(text)
        except ValidationError as exc:
            logger.warning(
                "result_cache_corrupt",
                path=str(self.path),
                errors=exc.error_count(),
            )
            return CacheLoad(store=CacheStore(), status="corrupt")
        return CacheLoad(store=store, status="loaded")

    def is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp < self._options.expiry_seconds

    def lookup(self, store: CacheStore, key: str, now: float) -> CacheEntry | None:
        entry = store.entries.get(key)
        if entry is None or not self.is_fresh(entry, now):
            return None
        return entry

    def debounce(
        self, store: CacheStore, key: str, now: float, *, placeholder: ResultDocument
    ) -> DebounceDecision:
        """Deny a fetch that follows the previous one too closely.

        A denied call replays the last document when it was produced for the
        same key, and gets ``placeholder`` otherwise. An allowed call moves
        ``last_request_time`` to ``now`` before any fetch happens.
        """

        last = store.last_request_time
        if last is not None and now - last < self._options.debounce_seconds:
            if store.last_query == key and store.last_document is not None:
                return DebounceDecision(allowed=False, document=store.last_document, replayed=True)
            return DebounceDecision(allowed=False, document=placeholder)

        store.last_request_time = now
        return DebounceDecision(allowed=True)

    def store(
        self,
        store: CacheStore,
        key: str,
        document: ResultDocument,
        candidates: Sequence[CandidateRecord],
        now: float,
        *,
        thumbnails: bool,
    ) -> bool:
        previous = store.entries.get(key)
        timestamp = max(now, previous.timestamp) if previous is not None else now
        store.entries[key] = CacheEntry(
            timestamp=timestamp,
            document=document,
            candidates=list(candidates),
            thumbnails=thumbnails,
        )
        self.remember(store, key, document, now)
        self.prune(store)
        return self.persist(store)

    def remember(self, store: CacheStore, key: str, document: ResultDocument, now: float) -> None:
        store.last_document = document
        store.last_query = key
        store.last_request_time = now

    def prune(self, store: CacheStore) -> int:
        limit = self._options.max_entries
        if len(store.entries) <= limit:
            return 0
        ranked = sorted(store.entries.items(), key=lambda item: item[1].timestamp, reverse=True)
        store.entries = dict(ranked[:limit])
        dropped = len(ranked) - limit
        logger.debug("result_cache_pruned", dropped=dropped, kept=limit)
        return dropped

    def persist(self, store: CacheStore) -> bool:
        payload = store.model_dump_json(exclude_none=True).encode("utf-8")
        try:
            write_atomic(self.path, payload)
        except CacheError as exc:
            logger.warning("result_cache_write_failed", path=str(self.path), error=str(exc))
            return False
        return True


__all__ = ["CacheLoad", "DebounceDecision", "ResultCache"]
