"""
Runtime layer - panel updates and the timer-driven playback loop.
"""

from .panel_feed import DirectoryUriResolver, PanelFeed, PanelUpdate, UriResolver, resolve_display_delay_ms
from .playback_loop import PlaybackLoop

__all__ = [
    "DirectoryUriResolver",
    "PanelFeed",
    "PanelUpdate",
    "PlaybackLoop",
    "UriResolver",
    "resolve_display_delay_ms",
]
