"""
Panel feed: turns scheduler selections into display updates.

The panel asks for the next animation, receives a URI plus a timing hint, and
rearms its own timer. The URI carries a ``?t=<epoch ms>`` query so the panel
reloads the image from its first frame even when the same asset repeats.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loopreel.scheduling.playback_scheduler import PlaybackScheduler, RandomSource

ClockMsFn = Callable[[], int]

DISPLAY_FALLBACK_MIN_MS = 5000
DISPLAY_FALLBACK_MAX_MS = 10000


@runtime_checkable
class UriResolver(Protocol):
    """Converts an asset name into a URI the display surface can load."""

    def resolve(self, name: str) -> str:
        """Return a displayable URI for ``name``."""


class DirectoryUriResolver:
    """Resolves names to absolute ``file://`` URIs under one directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    def resolve(self, name: str) -> str:
        return (self._root / name).as_uri()


@dataclass(frozen=True)
class PanelUpdate:
    uri: str
    is_rare: bool
    duration_ms: int | None

    def to_message(self) -> dict[str, Any]:
        """Message shape posted to the panel."""
        return {
            "type": "updateGif",
            "uri": self.uri,
            "isSpecial": self.is_rare,
            "duration": self.duration_ms,
        }


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class PanelFeed:
    """Serves one PanelUpdate per request from a PlaybackScheduler."""

    def __init__(
        self,
        scheduler: PlaybackScheduler,
        resolver: UriResolver,
        clock_ms: ClockMsFn | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._resolver = resolver
        self._clock_ms = clock_ms or _epoch_ms

    @property
    def scheduler(self) -> PlaybackScheduler:
        return self._scheduler

    def next_update(self) -> PanelUpdate:
        selection = self._scheduler.select_next()
        uri = self._resolver.resolve(selection.name)
        return PanelUpdate(
            uri=f"{uri}?t={self._clock_ms()}",
            is_rare=selection.is_rare,
            duration_ms=selection.duration_ms,
        )


def resolve_display_delay_ms(
    duration_ms: object,
    rng: RandomSource,
    low: int = DISPLAY_FALLBACK_MIN_MS,
    high: int = DISPLAY_FALLBACK_MAX_MS,
) -> int:
    """Delay before the panel asks again.

    A positive integer duration is used as is. Anything else (None, bool,
    non-positive, non-integer) draws a uniform delay in [low, high).
    """
    if isinstance(duration_ms, int) and not isinstance(duration_ms, bool) and duration_ms > 0:
        return duration_ms
    if high <= low:
        return low
    return low + rng.randrange(high - low)
