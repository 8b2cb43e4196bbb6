"""
Utility modules for the SendGrid plugin.
"""

from mackerel_sendgrid.utils.dates import (
    STATS_DATE_FORMAT,
    stats_window_date,
    format_stats_date,
)
from mackerel_sendgrid.utils.text import title_case

__all__ = [
    "STATS_DATE_FORMAT",
    "stats_window_date",
    "format_stats_date",
    "title_case",
]
