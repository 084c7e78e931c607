"""
Global test configuration for loopreel.

This module provides global pytest configuration and fixtures.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project src directory and shared fixtures are importable without
# relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
for _path in (PROJECT_ROOT / "src", PROJECT_ROOT / "tests" / "fixtures"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from gif_builder import build_gif, frame  # noqa: E402


@pytest.fixture
def gif_dir(tmp_path: Path) -> Path:
    """Directory with two common-eligible and two rare animations.

    base.gif: 2 frames, 40 + 60 cs  -> 1000 ms
    alt.gif:  1 frame,  25 cs       ->  250 ms
    spin.gif: 3 frames, 10 cs each  ->  300 ms
    broken.gif: not a GIF           -> fallback 3000 ms
    """
    (tmp_path / "base.gif").write_bytes(build_gif(frame(40), frame(60)))
    (tmp_path / "alt.gif").write_bytes(build_gif(frame(25)))
    (tmp_path / "spin.gif").write_bytes(build_gif(frame(10), frame(10), frame(10)))
    (tmp_path / "broken.gif").write_bytes(b"not really a gif at all")
    (tmp_path / "notes.txt").write_text("ignored")
    return tmp_path
