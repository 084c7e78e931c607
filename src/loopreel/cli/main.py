"""
Main CLI application using Typer.

Commands build a catalog from an asset directory and either report decoded
durations, print a simulated selection sequence, or run the playback loop
emitting one panel message per cycle. ``--json`` switches to machine-readable
output.
"""

from __future__ import annotations

import json
import random
from pathlib import Path

import typer

from ..catalog import Catalog, DirectoryAssetSource, build_catalog
from ..infra.exceptions import AssetSourceError, GifFormatError
from ..infra.logging import configure_logging, get_logger
from ..infra.settings import settings
from ..media.gif_timing import scan_gif_timing
from ..runtime import DirectoryUriResolver, PanelFeed, PanelUpdate, PlaybackLoop
from ..scheduling import PlaybackScheduler

app = typer.Typer(help="loopreel operator CLI")

_log = get_logger(__name__)


def _resolve_dir(directory: str | None) -> Path:
    return Path(directory or settings.assets_dir)


def _load_catalog(source: DirectoryAssetSource) -> Catalog:
    return build_catalog(
        source,
        settings.common_names,
        fallback_ms=settings.fallback_duration_ms,
    )


def _make_scheduler(catalog: Catalog, seed: int | None) -> PlaybackScheduler:
    return PlaybackScheduler(
        catalog,
        rng=random.Random(seed),
        common_weight=settings.common_weight,
        forced_rare_streak=settings.forced_rare_streak,
    )


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this run"),
):
    """loopreel - duration-aware rotation of looping GIF animations."""
    configure_logging(log_level)


@app.command("scan")
def scan(
    directory: str = typer.Argument(None, help="Asset directory (defaults to LOOPREEL_ASSETS_DIR)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Decode every animation and report its pool, frame count and duration."""
    root = _resolve_dir(directory)
    source = DirectoryAssetSource(root)
    catalog = _load_catalog(source)

    rows = []
    for name in catalog.names:
        row = {
            "name": name,
            "pool": "rare" if catalog.is_rare(name) else "common",
            "duration_ms": catalog.durations.get_duration_ms(name),
            "frames": 0,
            "complete": False,
        }
        try:
            timing = scan_gif_timing(source.read_bytes(name))
            row["frames"] = timing.frame_count
            row["complete"] = timing.complete
        except (GifFormatError, AssetSourceError) as e:
            _log.debug("scan_timing_unavailable", asset=name, error=str(e))
        rows.append(row)

    if json_output:
        typer.echo(json.dumps({"directory": str(root), "assets": rows}, indent=2))
        return

    if not rows:
        typer.echo(f"No animations found in {root}")
        return

    typer.echo(f"Animations in {root}:")
    for row in rows:
        suffix = "" if row["complete"] else "  (incomplete)"
        typer.echo(
            f"  {row['name']}  {row['pool']}  frames={row['frames']}  "
            f"duration={row['duration_ms']}ms{suffix}"
        )


@app.command("simulate")
def simulate(
    directory: str = typer.Argument(None, help="Asset directory (defaults to LOOPREEL_ASSETS_DIR)"),
    count: int = typer.Option(20, "--count", "-n", min=1, help="Number of selections"),
    seed: int = typer.Option(None, "--seed", help="Random seed for a reproducible sequence"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Print a sequence of scheduler selections without playing anything."""
    catalog = _load_catalog(DirectoryAssetSource(_resolve_dir(directory)))
    scheduler = _make_scheduler(catalog, seed)

    selections = [scheduler.select_next() for _ in range(count)]

    if json_output:
        payload = [
            {"name": s.name, "is_rare": s.is_rare, "duration_ms": s.duration_ms}
            for s in selections
        ]
        typer.echo(json.dumps({"selections": payload}, indent=2))
        return

    for i, s in enumerate(selections, start=1):
        marker = "rare" if s.is_rare else "common"
        duration = f"{s.duration_ms}ms" if s.duration_ms is not None else "-"
        typer.echo(f"{i:>4}. {s.name}  {marker}  {duration}")


@app.command("play")
def play(
    directory: str = typer.Argument(None, help="Asset directory (defaults to LOOPREEL_ASSETS_DIR)"),
    cycles: int = typer.Option(None, "--cycles", min=0, help="Stop after this many updates (default: run forever)"),
    seed: int = typer.Option(None, "--seed", help="Random seed for a reproducible sequence"),
    no_wait: bool = typer.Option(False, "--no-wait", help="Emit updates back to back without waiting"),
):
    """Run the playback loop, printing one panel message (JSON) per cycle."""
    root = _resolve_dir(directory)
    catalog = _load_catalog(DirectoryAssetSource(root))
    feed = PanelFeed(_make_scheduler(catalog, seed), DirectoryUriResolver(root))

    def _emit(update: PanelUpdate) -> None:
        typer.echo(json.dumps(update.to_message()))

    loop = PlaybackLoop(
        feed=feed,
        sink=_emit,
        rng=random.Random(seed),
        sleep_fn=(lambda _seconds: None) if no_wait else None,
        fallback_min_ms=settings.display_fallback_min_ms,
        fallback_max_ms=settings.display_fallback_max_ms,
    )
    try:
        loop.run(cycles)
    except KeyboardInterrupt:
        loop.stop()


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
