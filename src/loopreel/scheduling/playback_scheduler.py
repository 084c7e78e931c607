"""
PlaybackScheduler: picks the next animation from a Catalog.

Selection rules, in priority order:

1. Forced common: the previous pick was rare, or the common pool is empty.
2. Forced rare: ``forced_rare_streak`` commons in a row and a rare exists.
3. Weighted: common with probability ``common_weight``, otherwise rare
   (common whenever the rare pool is empty).

Consequences:

- Two rare picks are never adjacent.
- A non-empty rare pool is never starved for more than
  ``forced_rare_streak`` picks.

Randomness is injected so tests can script every branch. Any object with
``random()`` and ``randrange(n)`` works; ``random.Random`` is the default.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from threading import Lock
from typing import Protocol, runtime_checkable

from loopreel.catalog.asset_library import Catalog
from loopreel.infra.logging import get_logger

_log = get_logger(__name__)

DEFAULT_COMMON_WEIGHT = 0.7
DEFAULT_FORCED_RARE_STREAK = 10


@runtime_checkable
class RandomSource(Protocol):
    """Source of uniform fractions and indices."""

    def random(self) -> float:
        """Return a float in [0, 1)."""

    def randrange(self, stop: int) -> int:
        """Return an int in [0, stop)."""


@dataclass
class SchedulerState:
    last_was_rare: bool = False
    common_streak: int = 0


@dataclass(frozen=True)
class Selection:
    """One scheduler outcome.

    duration_ms is None only when the catalog is empty; callers apply their
    own timing fallback then.
    """

    name: str
    is_rare: bool
    duration_ms: int | None


class PlaybackScheduler:
    """Stateful weighted selector over one Catalog."""

    def __init__(
        self,
        catalog: Catalog,
        rng: RandomSource | None = None,
        common_weight: float = DEFAULT_COMMON_WEIGHT,
        forced_rare_streak: int = DEFAULT_FORCED_RARE_STREAK,
        state: SchedulerState | None = None,
    ) -> None:
        if not 0.0 <= common_weight <= 1.0:
            raise ValueError("common_weight must be within [0, 1]")
        if forced_rare_streak < 1:
            raise ValueError("forced_rare_streak must be at least 1")
        self._catalog = catalog
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._common_weight = common_weight
        self._forced_rare_streak = forced_rare_streak
        self._state = state if state is not None else SchedulerState()
        self._lock = Lock()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def state(self) -> SchedulerState:
        """Snapshot of the current state."""
        with self._lock:
            return replace(self._state)

    def select_next(self) -> Selection:
        """Choose the next animation and advance the scheduler state."""
        catalog = self._catalog
        if catalog.is_empty:
            return Selection(name=catalog.default_name, is_rare=False, duration_ms=None)

        with self._lock:
            state = self._state
            if state.last_was_rare or not catalog.common:
                name, is_rare = self._pick_common(), False
            elif state.common_streak >= self._forced_rare_streak and catalog.rare:
                name, is_rare = self._pick(catalog.rare), True
            elif self._rng.random() < self._common_weight or not catalog.rare:
                name, is_rare = self._pick_common(), False
            else:
                name, is_rare = self._pick(catalog.rare), True

            state.last_was_rare = is_rare
            if is_rare:
                state.common_streak = 0
            else:
                state.common_streak += 1
            streak = state.common_streak

        duration_ms = catalog.durations.get_duration_ms(name)
        _log.debug(
            "selection_made",
            asset=name,
            is_rare=is_rare,
            duration_ms=duration_ms,
            common_streak=streak,
        )
        return Selection(name=name, is_rare=is_rare, duration_ms=duration_ms)

    def _pick(self, pool: tuple[str, ...]) -> str:
        return pool[self._rng.randrange(len(pool))]

    def _pick_common(self) -> str:
        if not self._catalog.common:
            return self._catalog.default_name
        return self._pick(self._catalog.common)
