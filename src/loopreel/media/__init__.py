"""
Media inspection - container-level inspection without pixel decoding.
"""

from .gif_timing import FALLBACK_DURATION_MS, GifTiming, compute_duration, scan_gif_timing

__all__ = ["FALLBACK_DURATION_MS", "GifTiming", "compute_duration", "scan_gif_timing"]
