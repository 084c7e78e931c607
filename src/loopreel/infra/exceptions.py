"""
Custom exceptions for loopreel operations.

Nothing in loopreel is fatal: decoder and catalog errors are caught at their
boundaries and degrade to default durations or an empty catalog.
"""


class LoopReelError(Exception):
    """Base exception for all loopreel errors."""

    pass


class ValidationError(LoopReelError):
    """Raised when input validation fails."""

    pass


class GifFormatError(ValidationError):
    """Raised when bytes are too short or do not carry a GIF signature."""

    pass


class ResourceError(LoopReelError):
    """Raised when resource is not available."""

    pass


class AssetSourceError(ResourceError):
    """Raised when assets cannot be enumerated or read."""

    pass
