"""Pydantic models shared by the fetch, cache and rendering layers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CandidateRecord(BaseModel):
    """One suggestion returned by the search API."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    label: str
    subtitle: str = ""
    image_url: str | None = None


class Icon(BaseModel):
    path: str


class ModifierAction(BaseModel):
    arg: str
    subtitle: str


class ResultItem(BaseModel):
    uid: str | None = None
    title: str
    subtitle: str = ""
    arg: str | None = None
    icon: Icon
    mods: dict[str, ModifierAction] | None = None
    valid: bool = True


class CacheControl(BaseModel):
    seconds: int
    loosereload: bool = True


class ResultDocument(BaseModel):
    items: list[ResultItem] = Field(default_factory=list)
    cache: CacheControl | None = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class CacheEntry(BaseModel):
    timestamp: float
    document: ResultDocument
    candidates: list[CandidateRecord] = Field(default_factory=list)
    thumbnails: bool = True


class CacheStore(BaseModel):
    """Whole contents of the result cache file.

    ``entries`` holds one record per lower-cased query. The ``last_*`` fields
    are debounce bookkeeping and are never counted against the entry bound.
    """

    entries: dict[str, CacheEntry] = Field(default_factory=dict)
    last_request_time: float | None = None
    last_query: str | None = None
    last_document: ResultDocument | None = None


__all__ = [
    "CacheControl",
    "CacheEntry",
    "CacheStore",
    "CandidateRecord",
    "Icon",
    "ModifierAction",
    "ResultDocument",
    "ResultItem",
]
