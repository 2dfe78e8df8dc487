"""Daily active window arithmetic.

The window is expressed in whole hours on a 24-hour clock. A window whose
start is after its end wraps past midnight (e.g. 22 -> 6). A window whose
start equals its end has zero active hours and never contains any time.
Minutes configured by the user are display-only and ignored here.
"""

from datetime import datetime, timedelta
from typing import Optional


def to_24_hour(hour: int, is_pm: bool) -> int:
    """Convert a 12-hour clock hour (1-12) plus meridiem to 0-23."""
    if hour == 12:
        return 12 if is_pm else 0
    return hour + 12 if is_pm else hour


def active_hours(start_24: int, end_24: int) -> int:
    if start_24 <= end_24:
        return end_24 - start_24
    return 24 - start_24 + end_24


def is_in_window(now: datetime, start_24: int, end_24: int) -> bool:
    hour = now.hour
    if start_24 <= end_24:
        return start_24 <= hour < end_24
    # Crosses midnight
    return hour >= start_24 or hour < end_24


def _at_hour(day: datetime, hour: int) -> datetime:
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


def time_until_window_start(now: datetime, start_24: int) -> timedelta:
    """Time from ``now`` until the next occurrence of ``start_24``:00:00."""
    if now.hour < start_24:
        target = _at_hour(now, start_24)
    else:
        target = _at_hour(now + timedelta(days=1), start_24)
    return max(timedelta(0), target - now)


def window_start_for(now: datetime, start_24: int, end_24: int) -> Optional[datetime]:
    """Start of the window session that contains ``now``, or None if outside."""
    if not is_in_window(now, start_24, end_24):
        return None
    if start_24 > end_24 and now.hour < end_24:
        # After midnight in a wrapping window: the session began yesterday.
        return _at_hour(now - timedelta(days=1), start_24)
    return _at_hour(now, start_24)


def time_until_window_end(now: datetime, start_24: int, end_24: int) -> Optional[timedelta]:
    session_start = window_start_for(now, start_24, end_24)
    if session_start is None:
        return None
    session_end = session_start + timedelta(hours=active_hours(start_24, end_24))
    return max(timedelta(0), session_end - now)
