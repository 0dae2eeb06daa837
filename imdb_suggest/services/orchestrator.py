"""Per-invocation flow: validate, look up, debounce, fetch, render, cache."""

from __future__ import annotations

from typing import Callable

from imdb_suggest.config import SuggestSettings
from imdb_suggest.domain.models import CacheEntry, ResultDocument
from imdb_suggest.logging import logger
from imdb_suggest.services.image_cache import EvictionPolicy, ImageCache
from imdb_suggest.services.items import ItemRenderer
from imdb_suggest.services.result_cache import ResultCache
from imdb_suggest.services.suggestions import SuggestionFetcher
from imdb_suggest.utils.datetime import Clock, epoch_now


class SuggestOrchestrator:
    def __init__(
        self,
        *,
        settings: SuggestSettings,
        fetcher: SuggestionFetcher,
        image_cache: ImageCache,
        result_cache: ResultCache | None = None,
        renderer: ItemRenderer | None = None,
        should_evict: Callable[[], bool] | None = None,
        clock: Clock = epoch_now,
    ) -> None:
        self._settings = settings
        self._fetcher = fetcher
        self._image_cache = image_cache
        self._result_cache = result_cache or ResultCache(settings)
        self._renderer = renderer or ItemRenderer(image_cache, settings)
        self._should_evict = should_evict or EvictionPolicy(settings.image_cache.eviction_probability)
        self._clock = clock

    async def run(self, raw_query: str | None) -> ResultDocument:
        query = (raw_query or "").strip()
        if not query:
            return self._renderer.empty()
        if len(query) < self._settings.min_query_length:
            return self._renderer.keep_typing()

        key = query.lower()
        cache = self._result_cache
        store = cache.load().store
        now = self._clock()

        entry = cache.lookup(store, key, now)
        if entry is not None:
            logger.debug("result_cache_hit", key=key)
            try:
                return await self._from_entry(entry)
            except Exception as exc:
                logger.exception("cached_render_failed", key=key)
                return self._renderer.error(str(exc) or exc.__class__.__name__)

        decision = cache.debounce(store, key, now, placeholder=self._renderer.searching())
        if not decision.allowed:
            logger.debug("request_debounced", key=key, replayed=decision.replayed)
            return decision.document

        if self._should_evict():
            self._image_cache.evict()

        try:
            result = await self._fetcher.fetch(query)
            if not result.ok:
                document = self._renderer.no_results(query)
                cache.remember(store, key, document, now)
                cache.persist(store)
                return document

            if result.candidates:
                document = await self._renderer.render(result.candidates)
            else:
                document = self._renderer.no_results(query)
            cache.store(
                store,
                key,
                document,
                result.candidates,
                now,
                thumbnails=self._settings.show_thumbnails,
            )
            return document
        except Exception as exc:
            logger.exception("suggest_pipeline_failed", key=key)
            cache.persist(store)
            return self._renderer.error(str(exc) or exc.__class__.__name__)

    async def _from_entry(self, entry: CacheEntry) -> ResultDocument:
        if entry.thumbnails == self._settings.show_thumbnails or not entry.candidates:
            return entry.document
        # Thumbnail setting changed since the entry was written.
        return await self._renderer.render(entry.candidates)


__all__ = ["SuggestOrchestrator"]
