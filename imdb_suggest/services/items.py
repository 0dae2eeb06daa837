"""Turn candidates into launcher result items and build placeholder documents."""

from __future__ import annotations

from typing import Sequence

from imdb_suggest.config import DEFAULT_ICON, SuggestSettings
from imdb_suggest.domain.models import (
    CacheControl,
    CandidateRecord,
    Icon,
    ModifierAction,
    ResultDocument,
    ResultItem,
)
from imdb_suggest.services.image_cache import ImageCache


def placeholder_document(title: str, subtitle: str, icon: str = DEFAULT_ICON) -> ResultDocument:
    item = ResultItem(title=title, subtitle=subtitle, icon=Icon(path=icon), valid=False)
    return ResultDocument(items=[item])


def error_document(message: str, icon: str = DEFAULT_ICON) -> ResultDocument:
    return placeholder_document("Error", message or "Unknown error", icon)


def build_item(candidate: CandidateRecord, icon_path: str) -> ResultItem:
    return ResultItem(
        uid=candidate.id,
        title=candidate.label,
        subtitle=candidate.subtitle,
        arg=candidate.id,
        icon=Icon(path=icon_path),
        mods={
            "cmd": ModifierAction(
                arg=candidate.id,
                subtitle=f"⌘ Copy IMDb ID: {candidate.id}",
            )
        },
        valid=True,
    )


class ItemRenderer:
    """Renders documents for the host UI, resolving thumbnails on the way."""

    def __init__(self, image_cache: ImageCache, settings: SuggestSettings) -> None:
        self._image_cache = image_cache
        self._settings = settings

    async def render(self, candidates: Sequence[CandidateRecord]) -> ResultDocument:
        items: list[ResultItem] = []
        for candidate in candidates:
            resolution = await self._image_cache.resolve_icon(candidate)
            items.append(build_item(candidate, resolution.path))
        return self._document(items)

    def empty(self) -> ResultDocument:
        return ResultDocument(items=[])

    def keep_typing(self) -> ResultDocument:
        minimum = self._settings.min_query_length
        return self._placeholder(
            "Keep typing...",
            f"Type at least {minimum} characters to search IMDb",
        )

    def searching(self) -> ResultDocument:
        return self._placeholder("Searching IMDb...", "Results loading")

    def no_results(self, query: str) -> ResultDocument:
        return self._placeholder("No results found", f'No IMDb results for "{query}"')

    def error(self, message: str) -> ResultDocument:
        return error_document(message, self._settings.default_icon)

    def _placeholder(self, title: str, subtitle: str) -> ResultDocument:
        return placeholder_document(title, subtitle, self._settings.default_icon)

    def _document(self, items: list[ResultItem]) -> ResultDocument:
        seconds = self._settings.document_cache_seconds
        cache = CacheControl(seconds=seconds) if seconds else None
        return ResultDocument(items=items, cache=cache)


__all__ = ["ItemRenderer", "build_item", "error_document", "placeholder_document"]
