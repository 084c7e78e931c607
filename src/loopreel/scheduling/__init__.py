"""
Scheduling layer - weighted selection of the next animation.
"""

from .playback_scheduler import PlaybackScheduler, RandomSource, SchedulerState, Selection

__all__ = ["PlaybackScheduler", "RandomSource", "SchedulerState", "Selection"]
