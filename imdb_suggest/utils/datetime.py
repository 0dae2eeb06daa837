"""Time utilities."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def epoch_now() -> float:
    """Return seconds since the Unix epoch."""

    return time.time()


__all__ = ["Clock", "epoch_now"]
