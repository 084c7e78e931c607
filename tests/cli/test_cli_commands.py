"""
CLI tests for loopreel.

Uses Typer's CliRunner against the real app. Settings are patched per test so
the allowlist matches the fixture directory.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from loopreel.cli.main import app
from loopreel.infra.settings import settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _allowlist(monkeypatch):
    monkeypatch.setattr(settings, "common_names", ["base.gif", "alt.gif"])


def _invoke(*args: str):
    return runner.invoke(app, ["--log-level", "ERROR", *args])


class TestScan:
    def test_json_report(self, gif_dir):
        result = _invoke("scan", str(gif_dir), "--json")
        assert result.exit_code == 0, result.output

        payload = json.loads(result.stdout)
        rows = {row["name"]: row for row in payload["assets"]}
        assert list(rows) == ["base.gif", "alt.gif", "broken.gif", "spin.gif"]
        assert rows["base.gif"] == {
            "name": "base.gif",
            "pool": "common",
            "duration_ms": 1000,
            "frames": 2,
            "complete": True,
        }
        assert rows["spin.gif"]["pool"] == "rare"
        assert rows["spin.gif"]["frames"] == 3
        assert rows["broken.gif"]["duration_ms"] == 3000
        assert rows["broken.gif"]["complete"] is False

    def test_human_report(self, gif_dir):
        result = _invoke("scan", str(gif_dir))
        assert result.exit_code == 0
        assert "base.gif  common  frames=2  duration=1000ms" in result.stdout
        assert "broken.gif  rare  frames=0  duration=3000ms  (incomplete)" in result.stdout

    def test_empty_directory(self, tmp_path):
        result = _invoke("scan", str(tmp_path))
        assert result.exit_code == 0
        assert "No animations found" in result.stdout

    def test_defaults_to_configured_directory(self, gif_dir, monkeypatch):
        monkeypatch.setattr(settings, "assets_dir", str(gif_dir))
        result = _invoke("scan", "--json")
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["assets"]) == 4

    def test_configured_fallback_reaches_decoder(self, gif_dir, monkeypatch):
        monkeypatch.setattr(settings, "fallback_duration_ms", 4000)
        result = _invoke("scan", str(gif_dir), "--json")
        assert result.exit_code == 0, result.output

        rows = {row["name"]: row for row in json.loads(result.stdout)["assets"]}
        assert rows["broken.gif"]["duration_ms"] == 4000
        assert rows["base.gif"]["duration_ms"] == 1000

    def test_unreadable_timing_is_logged(self, gif_dir):
        result = runner.invoke(app, ["--log-level", "DEBUG", "scan", str(gif_dir)])
        assert result.exit_code == 0, result.output

        events = [line for line in result.output.splitlines() if "scan_timing_unavailable" in line]
        assert len(events) == 1
        assert '"asset": "broken.gif"' in events[0]


class TestSimulate:
    def test_seeded_sequence_obeys_rules(self, gif_dir):
        result = _invoke("simulate", str(gif_dir), "--count", "60", "--seed", "7", "--json")
        assert result.exit_code == 0, result.output

        selections = json.loads(result.stdout)["selections"]
        assert len(selections) == 60
        for prev, cur in zip(selections, selections[1:]):
            assert not (prev["is_rare"] and cur["is_rare"])
        rare_names = {s["name"] for s in selections if s["is_rare"]}
        assert rare_names <= {"broken.gif", "spin.gif"}

    def test_seed_is_reproducible(self, gif_dir):
        first = _invoke("simulate", str(gif_dir), "--seed", "3", "--json")
        second = _invoke("simulate", str(gif_dir), "--seed", "3", "--json")
        assert first.stdout == second.stdout

    def test_missing_directory_serves_default(self, tmp_path):
        result = _invoke("simulate", str(tmp_path / "nope"), "--count", "3")
        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 3
        assert all("base.gif  common  -" in line for line in lines)


class TestPlay:
    def test_emits_panel_messages(self, gif_dir):
        result = _invoke("play", str(gif_dir), "--cycles", "4", "--seed", "1", "--no-wait")
        assert result.exit_code == 0, result.output

        messages = [json.loads(line) for line in result.stdout.strip().splitlines()]
        assert len(messages) == 4
        for message in messages:
            assert message["type"] == "updateGif"
            assert message["uri"].startswith("file://")
            assert "?t=" in message["uri"]
            assert isinstance(message["isSpecial"], bool)
            assert message["duration"] in {1000, 250, 300, 3000}
