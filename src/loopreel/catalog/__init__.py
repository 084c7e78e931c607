"""
Catalog layer - asset sources, cached durations and pool partitioning.
"""

from .asset_library import AnimationAsset, Catalog, DurationCache, build_catalog
from .sources import AssetSource, DirectoryAssetSource

__all__ = [
    "AnimationAsset",
    "AssetSource",
    "Catalog",
    "DirectoryAssetSource",
    "DurationCache",
    "build_catalog",
]
