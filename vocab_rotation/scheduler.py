"""Rotation timing: interval from preferences and the index-for-time function.

Everything here is pure. The widget reconstructs the current word from a
published base index, base timestamp and interval, so ``index_for_time`` must
give the same answer for the same inputs in every process.
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from .config import FALLBACK_INTERVAL_SECONDS
from .models import WindowBounds
from .window import active_hours, is_in_window, time_until_window_start, window_start_for


def calculate_rotation_interval(frequency_min: int, frequency_max: int,
                                start_24: int, end_24: int) -> float:
    """Seconds between rotations, spreading the average word count over the active hours."""
    if frequency_min <= 0 or frequency_max <= 0 or frequency_min > frequency_max:
        return FALLBACK_INTERVAL_SECONDS

    hours = active_hours(start_24, end_24)
    if hours <= 0:
        return FALLBACK_INTERVAL_SECONDS

    avg_frequency = (frequency_min + frequency_max) / 2.0
    return hours * 3600.0 / avg_frequency


def _interval_valid(interval_seconds: float) -> bool:
    return interval_seconds is not None and math.isfinite(interval_seconds) and interval_seconds > 0


def steps_since(now: datetime, base_timestamp: datetime, interval_seconds: float) -> int:
    """Whole intervals elapsed since ``base_timestamp``; 0 if the clock went backwards."""
    if not _interval_valid(interval_seconds):
        return 0
    elapsed = (now - base_timestamp).total_seconds()
    return max(0, math.floor(elapsed / interval_seconds))


def index_for_time(now: datetime, base_index: int, base_timestamp: datetime,
                   interval_seconds: float, total_count: int) -> int:
    if not _interval_valid(interval_seconds) or total_count <= 0:
        return base_index % max(1, total_count)
    steps = steps_since(now, base_timestamp, interval_seconds)
    return (base_index + steps) % total_count


def next_rotation_at(now: datetime, base_timestamp: datetime, interval_seconds: float) -> Optional[datetime]:
    """Next grid point ``base_timestamp + k * interval`` strictly after ``now``."""
    if not _interval_valid(interval_seconds):
        return None
    return base_timestamp + timedelta(seconds=(steps_since(now, base_timestamp, interval_seconds) + 1) * interval_seconds)


def time_until_next_rotation(now: datetime, interval_seconds: float,
                             window: Optional[WindowBounds]) -> Optional[timedelta]:
    """Countdown to the next rotation, anchored at the start of the active window.

    Returns None when the interval is unusable or no window is configured.
    Outside the window the countdown runs to the next window start.
    """
    if window is None or not _interval_valid(interval_seconds):
        return None

    start_24, end_24 = window.start_24, window.end_24
    if not is_in_window(now, start_24, end_24):
        return time_until_window_start(now, start_24)

    session_start = window_start_for(now, start_24, end_24)
    elapsed = (now - session_start).total_seconds()
    rotations = math.floor(elapsed / interval_seconds)
    next_at = session_start + timedelta(seconds=(rotations + 1) * interval_seconds)
    return max(timedelta(0), next_at - now)
