"""Small filesystem helpers shared by the result and image caches."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from imdb_suggest.services.exceptions import CacheError


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if missing."""

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CacheError(f"Cannot create directory {path}: {exc}") from exc
    return path


def write_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then rename it over ``path``."""

    ensure_dir(path.parent)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "wb") as fp:
            fp.write(data)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise CacheError(f"Cannot write {path}: {exc}") from exc


def read_text(path: Path) -> str | None:
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CacheError(f"Cannot read {path}: {exc}") from exc


__all__ = ["ensure_dir", "read_text", "write_atomic"]
