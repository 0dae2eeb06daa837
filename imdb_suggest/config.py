"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, AnyHttpUrl, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ICON = "icon.png"


class ApiSettings(BaseModel):
    base_url: AnyHttpUrl = Field(default="https://v2.sg.media-imdb.com")
    request_timeout_seconds: float = Field(default=10, gt=0, le=60)


class ResultCacheSettings(BaseModel):
    filename: str = Field(default="cache.json", min_length=1)
    expiry_seconds: int = Field(default=300, ge=1)
    max_entries: int = Field(default=20, ge=1)
    debounce_seconds: float = Field(default=1.0, ge=1, le=2)


class ImageCacheSettings(BaseModel):
    directory: str = Field(default="images", min_length=1)
    max_files: int = Field(default=300, ge=1)
    eviction_probability: float = Field(default=0.05, ge=0, le=1)
    size_token: str = "_V1_"
    size_variant: str = "_V1_UY100"


class SuggestSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="IMDB_SUGGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )

    cache_dir: Path = Field(
        default=Path("/tmp/alfred-imdb-cache"),
        validation_alias=AliasChoices("alfred_workflow_cache", "imdb_suggest_cache_dir"),
    )
    show_thumbnails: bool = Field(
        default=True,
        validation_alias=AliasChoices("show_thumbnails", "imdb_suggest_show_thumbnails"),
    )
    min_query_length: int = Field(default=3, ge=1)
    default_icon: str = DEFAULT_ICON
    document_cache_seconds: int | None = Field(
        default=None,
        ge=5,
        le=86400,
        description="Optional cache-control hint telling the host how long to reuse a document.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    api: ApiSettings = Field(default_factory=ApiSettings)
    result_cache: ResultCacheSettings = Field(default_factory=ResultCacheSettings)
    image_cache: ImageCacheSettings = Field(default_factory=ImageCacheSettings)

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / self.result_cache.filename

    @property
    def images_dir(self) -> Path:
        return self.cache_dir / self.image_cache.directory


@lru_cache
def get_settings() -> SuggestSettings:
    """Return cached settings instance."""

    return SuggestSettings()


__all__ = [
    "DEFAULT_ICON",
    "ApiSettings",
    "ImageCacheSettings",
    "ResultCacheSettings",
    "SuggestSettings",
    "get_settings",
]
