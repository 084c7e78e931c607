"""Timer-driven playback loop.

The loop plays the role of the panel's timer: it requests one update, hands
it to a sink, waits for the advised delay and only then requests again. There
is never more than one outstanding request.

- Real-time mode (``sleep_fn=None``) waits on an internal event so
  :meth:`PlaybackLoop.stop` interrupts the current wait.
- Tests pass a recording ``sleep_fn`` and never block.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from threading import Event
from typing import Callable

from loopreel.infra.logging import get_logger
from loopreel.scheduling.playback_scheduler import RandomSource

from .panel_feed import (
    DISPLAY_FALLBACK_MAX_MS,
    DISPLAY_FALLBACK_MIN_MS,
    PanelFeed,
    PanelUpdate,
    resolve_display_delay_ms,
)

_log = get_logger(__name__)

SleepFn = Callable[[float], None]
UpdateSink = Callable[[PanelUpdate], None]


@dataclass
class PlaybackLoop:
    """Drive a PanelFeed at the cadence of the advised durations.

    Parameters
    ----------
    feed:
        Source of panel updates.
    sink:
        Receives every update, e.g. a function posting to the display.
    rng:
        Random source for the display fallback delay.
    sleep_fn:
        Optional sleep function taking seconds. When ``None`` the loop waits
        on its stop event instead.
    """

    feed: PanelFeed
    sink: UpdateSink
    rng: RandomSource = field(default_factory=random.Random)
    sleep_fn: SleepFn | None = None
    fallback_min_ms: int = DISPLAY_FALLBACK_MIN_MS
    fallback_max_ms: int = DISPLAY_FALLBACK_MAX_MS
    _stop_event: Event = field(default_factory=Event, init=False)
    _cycles: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.fallback_min_ms <= 0:
            raise ValueError("fallback_min_ms must be greater than zero")
        if self.fallback_max_ms < self.fallback_min_ms:
            raise ValueError("fallback_max_ms must not be below fallback_min_ms")

    @property
    def cycles(self) -> int:
        """Updates delivered since construction."""
        return self._cycles

    def run_once(self) -> int:
        """Deliver one update and return the delay (ms) before the next."""
        update = self.feed.next_update()
        self.sink(update)
        delay_ms = resolve_display_delay_ms(
            update.duration_ms,
            self.rng,
            low=self.fallback_min_ms,
            high=self.fallback_max_ms,
        )
        self._cycles += 1
        _log.info(
            "playback_cycle",
            cycle=self._cycles,
            uri=update.uri,
            is_rare=update.is_rare,
            delay_ms=delay_ms,
        )
        return delay_ms

    def run(self, cycles: int | None = None) -> int:
        """Serve updates until ``cycles`` are delivered or :meth:`stop` is called.

        Each update is followed by its full delay. Returns the number of
        updates delivered by this call.
        """
        if cycles is not None and cycles < 0:
            raise ValueError("cycles must be non-negative")

        self._stop_event.clear()
        served = 0
        while not self._stop_event.is_set():
            if cycles is not None and served >= cycles:
                break
            delay_ms = self.run_once()
            served += 1
            self._wait(delay_ms / 1000.0)
        return served

    def stop(self) -> None:
        """Signal the loop to stop after the current wait."""
        self._stop_event.set()

    def _wait(self, seconds: float) -> None:
        if self.sleep_fn is None:
            self._stop_event.wait(seconds)
        else:
            self.sleep_fn(seconds)
