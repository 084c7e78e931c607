"""Tests for PanelFeed, URI resolution and the display fallback delay."""

from __future__ import annotations

import pytest

from fakes import ScriptedRandom
from loopreel.catalog import AnimationAsset, Catalog
from loopreel.runtime import DirectoryUriResolver, PanelFeed, PanelUpdate, UriResolver, resolve_display_delay_ms
from loopreel.scheduling import PlaybackScheduler


class _PrefixResolver:
    def __init__(self) -> None:
        self.resolved: list[str] = []

    def resolve(self, name: str) -> str:
        self.resolved.append(name)
        return f"vscode-resource:/assets/gifs/{name}"


def _feed(catalog: Catalog, rng: ScriptedRandom, clock_ms: int = 1_700_000_000_000):
    resolver = _PrefixResolver()
    feed = PanelFeed(PlaybackScheduler(catalog, rng=rng), resolver, clock_ms=lambda: clock_ms)
    return feed, resolver


def test_update_carries_cache_busting_uri():
    catalog = Catalog.partition([AnimationAsset("base.gif", 1200)], ["base.gif"])
    feed, resolver = _feed(catalog, ScriptedRandom([0.0], [0]))

    update = feed.next_update()

    assert update == PanelUpdate(
        uri="vscode-resource:/assets/gifs/base.gif?t=1700000000000",
        is_rare=False,
        duration_ms=1200,
    )
    assert resolver.resolved == ["base.gif"]


def test_message_shape():
    update = PanelUpdate(uri="file:///x.gif?t=1", is_rare=True, duration_ms=500)
    assert update.to_message() == {
        "type": "updateGif",
        "uri": "file:///x.gif?t=1",
        "isSpecial": True,
        "duration": 500,
    }


def test_empty_catalog_update_has_no_duration():
    feed, _ = _feed(Catalog.empty("base.gif"), ScriptedRandom())
    update = feed.next_update()
    assert update.uri.startswith("vscode-resource:/assets/gifs/base.gif?t=")
    assert update.duration_ms is None
    assert update.to_message()["duration"] is None


def test_default_clock_is_epoch_ms():
    catalog = Catalog.partition([AnimationAsset("base.gif", 10)], ["base.gif"])
    feed = PanelFeed(PlaybackScheduler(catalog, rng=ScriptedRandom([0.0], [0])), _PrefixResolver())
    stamp = int(feed.next_update().uri.rsplit("?t=", 1)[1])
    assert stamp > 1_600_000_000_000


def test_directory_resolver(tmp_path):
    resolver = DirectoryUriResolver(tmp_path)
    assert isinstance(resolver, UriResolver)
    uri = resolver.resolve("spin.gif")
    assert uri == (tmp_path.resolve() / "spin.gif").as_uri()
    assert uri.startswith("file://")


class TestDisplayDelay:
    @pytest.mark.parametrize("duration", [1, 1000, 3000, 60_000])
    def test_positive_duration_is_used(self, duration):
        assert resolve_display_delay_ms(duration, ScriptedRandom()) == duration

    @pytest.mark.parametrize("duration", [None, 0, -5, True, 2.5, "1000"])
    def test_invalid_duration_draws_fallback(self, duration):
        rng = ScriptedRandom(indices=[1234])
        assert resolve_display_delay_ms(duration, rng) == 6234
        assert rng.calls == [("randrange", 5000)]

    def test_fallback_range_bounds(self):
        assert resolve_display_delay_ms(None, ScriptedRandom(indices=[0])) == 5000
        assert resolve_display_delay_ms(None, ScriptedRandom(indices=[4999])) == 9999

    def test_degenerate_range(self):
        assert resolve_display_delay_ms(None, ScriptedRandom(), low=4000, high=4000) == 4000
