"""
loopreel - duration-aware rotation of looping GIF animations.

Assets are decoded once for timing, partitioned into common and rare pools,
and served one at a time by a weighted scheduler.
"""

__version__ = "0.1.0"
