"""Shared pytest fixtures: isolated settings, a controllable clock and a fake IMDb host."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
import structlog

from imdb_suggest.config import SuggestSettings

MATRIX_IMAGE_URL = "https://m.media-amazon.com/images/M/MV5BNzQzOTk3._V1_.jpg"


def make_settings(cache_dir: Path, **overrides) -> SuggestSettings:
    return SuggestSettings(_env_file=None, alfred_workflow_cache=cache_dir, **overrides)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir: Path) -> SuggestSettings:
    return make_settings(cache_dir, show_thumbnails=False)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@dataclass
class FakeImdb:
    """MockTransport handler serving suggestion JSON and thumbnail bytes."""

    suggestions: dict = field(
        default_factory=lambda: {
            "d": [
                {
                    "id": "tt0133093",
                    "l": "The Matrix",
                    "s": "1999",
                    "i": {"imageUrl": MATRIX_IMAGE_URL, "height": 1000, "width": 675},
                }
            ]
        }
    )
    image_bytes: bytes = b"\xff\xd8\xff fake jpeg"
    unreachable: bool = False
    requests: list[httpx.Request] = field(default_factory=list)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("network unreachable", request=request)
        if request.url.path.startswith("/suggestion/"):
            return httpx.Response(200, json=self.suggestions)
        return httpx.Response(200, content=self.image_bytes, headers={"Content-Type": "image/jpeg"})

    @property
    def suggestion_calls(self) -> int:
        return sum(1 for req in self.requests if req.url.path.startswith("/suggestion/"))

    @property
    def image_calls(self) -> int:
        return len(self.requests) - self.suggestion_calls


@pytest.fixture
def imdb() -> FakeImdb:
    return FakeImdb()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
