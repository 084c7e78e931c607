"""
Asset sources: where animation names and their raw bytes come from.

The catalog builder only needs the AssetSource protocol. DirectoryAssetSource
is the on-disk implementation used by the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from loopreel.infra.exceptions import AssetSourceError

GIF_SUFFIX = ".gif"


@runtime_checkable
class AssetSource(Protocol):
    """Enumerates animation names and reads their bytes."""

    def list_names(self) -> list[str]:
        """Return every available asset name."""

    def read_bytes(self, name: str) -> bytes:
        """Return the raw bytes for ``name``."""


class DirectoryAssetSource:
    """AssetSource over the regular files directly under one directory.

    Only names ending in ``suffix`` are listed; the match is case-sensitive.
    Names are returned sorted so catalog order does not depend on the
    filesystem.
    """

    def __init__(self, root: str | Path, suffix: str = GIF_SUFFIX) -> None:
        self._root = Path(root)
        self._suffix = suffix

    @property
    def root(self) -> Path:
        return self._root

    def list_names(self) -> list[str]:
        try:
            entries = list(self._root.iterdir())
        except OSError as e:
            raise AssetSourceError(f"cannot list {self._root}: {e}") from e
        return sorted(
            p.name for p in entries if p.is_file() and p.name.endswith(self._suffix)
        )

    def read_bytes(self, name: str) -> bytes:
        path = self._root / name
        try:
            return path.read_bytes()
        except OSError as e:
            raise AssetSourceError(f"cannot read {path}: {e}") from e
