"""
Date helpers for the stats window.
"""

from datetime import datetime, timedelta

STATS_DATE_FORMAT = "%Y-%m-%d"


def stats_window_date(now: datetime | None = None) -> datetime:
    """
    Return the moment 24 hours before `now` (local wall clock if omitted).

    Example:
        >>> stats_window_date(datetime(2025, 3, 1, 9, 30))
        datetime.datetime(2025, 2, 28, 9, 30)
    """
    if now is None:
        now = datetime.now()
    return now - timedelta(hours=24)


def format_stats_date(dt: datetime) -> str:
    """Format a datetime as the YYYY-MM-DD string the stats API expects."""
    return dt.strftime(STATS_DATE_FORMAT)
