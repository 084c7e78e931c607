"""
Animation catalog: immutable assets, cached durations and the common/rare
pool partition consumed by the playback scheduler.

Durations are decoded once when the catalog is built. Scheduling reads the
cache; it never opens files or re-parses bytes.

Usage:
    from loopreel.catalog import DirectoryAssetSource, build_catalog
    catalog = build_catalog(DirectoryAssetSource("assets/gifs"), ["lain-headbop.gif"])
    catalog.durations.get_duration_ms("lain-headbop.gif")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from functools import partial

from loopreel.catalog.sources import AssetSource
from loopreel.infra.exceptions import AssetSourceError
from loopreel.infra.logging import get_logger
from loopreel.media.gif_timing import FALLBACK_DURATION_MS, compute_duration

_log = get_logger(__name__)

DurationDecoder = Callable[[bytes], int]


@dataclass(frozen=True)
class AnimationAsset:
    """One discovered animation. Immutable.

    duration_ms is decoded once at catalog build and must be positive.
    """

    name: str
    duration_ms: int

    def __post_init__(self) -> None:
        if self.duration_ms <= 0:
            raise ValueError("duration_ms must be positive")


class DurationCache:
    """Read-only name -> duration map with a fixed fallback for unknown names."""

    def __init__(
        self,
        assets: Iterable[AnimationAsset] = (),
        fallback_ms: int = FALLBACK_DURATION_MS,
    ) -> None:
        self._durations: dict[str, int] = {a.name: a.duration_ms for a in assets}
        self._fallback_ms = fallback_ms

    @property
    def fallback_ms(self) -> int:
        return self._fallback_ms

    def get_duration_ms(self, name: str) -> int:
        return self._durations.get(name, self._fallback_ms)

    def lookup(self, name: str) -> int | None:
        return self._durations.get(name)

    def as_dict(self) -> dict[str, int]:
        return dict(self._durations)

    def __contains__(self, name: object) -> bool:
        return name in self._durations

    def __len__(self) -> int:
        return len(self._durations)


@dataclass(frozen=True)
class Catalog:
    """Disjoint common/rare pools over every discovered animation.

    common: allowlisted names that were found, in allowlist order.
    rare: every other found name, in discovery order.
    default_name: first allowlist entry, served when nothing was found.
    """

    common: tuple[str, ...]
    rare: tuple[str, ...]
    default_name: str
    durations: DurationCache = field(default_factory=DurationCache)

    @classmethod
    def empty(cls, default_name: str, fallback_ms: int = FALLBACK_DURATION_MS) -> Catalog:
        return cls(
            common=(),
            rare=(),
            default_name=default_name,
            durations=DurationCache(fallback_ms=fallback_ms),
        )

    @classmethod
    def partition(
        cls,
        assets: Sequence[AnimationAsset],
        common_names: Sequence[str],
        fallback_ms: int = FALLBACK_DURATION_MS,
    ) -> Catalog:
        found = list(dict.fromkeys(a.name for a in assets))
        found_set = set(found)
        common = tuple(n for n in dict.fromkeys(common_names) if n in found_set)
        common_set = set(common)
        rare = tuple(n for n in found if n not in common_set)
        return cls(
            common=common,
            rare=rare,
            default_name=common_names[0] if common_names else "",
            durations=DurationCache(assets, fallback_ms=fallback_ms),
        )

    @property
    def names(self) -> tuple[str, ...]:
        return self.common + self.rare

    @property
    def is_empty(self) -> bool:
        return not self.common and not self.rare

    def is_rare(self, name: str) -> bool:
        return name in self.rare


def build_catalog(
    source: AssetSource,
    common_names: Sequence[str],
    decoder: DurationDecoder | None = None,
    fallback_ms: int = FALLBACK_DURATION_MS,
) -> Catalog:
    """Enumerate, decode and partition every asset exposed by ``source``.

    ``decoder`` defaults to :func:`compute_duration` falling back to
    ``fallback_ms``, so malformed files and unknown names share one fallback.

    A source failure while listing or reading any asset yields an empty
    catalog; the scheduler still serves the default name in that case.
    """
    if fallback_ms <= 0:
        raise ValueError("fallback_ms must be positive")
    if decoder is None:
        decoder = partial(compute_duration, fallback_ms=fallback_ms)
    default_name = common_names[0] if common_names else ""
    try:
        names = source.list_names()
        assets = [AnimationAsset(name=n, duration_ms=decoder(source.read_bytes(n))) for n in names]
    except (AssetSourceError, OSError) as e:
        _log.warning("catalog_build_failed", error=str(e))
        return Catalog.empty(default_name, fallback_ms=fallback_ms)

    catalog = Catalog.partition(assets, common_names, fallback_ms=fallback_ms)
    _log.info(
        "catalog_built",
        assets=len(assets),
        common=len(catalog.common),
        rare=len(catalog.rare),
    )
    return catalog
