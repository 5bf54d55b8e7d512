"""Analytics domain: pure aggregations over normalized detections.

This module turns a flat snapshot of detections into display-ready structures:
- Grouping and ranking primitives
- Per-day species tables
- Hour-of-day histograms
- Dense, zero-filled day series
- Rolling-window species rollups and per-species totals
"""

from birbs.analytics.daily import aggregate_by_day, format_compact
from birbs.analytics.date_range import daily_series, days_between, fill_date_range
from birbs.analytics.files import order_files_for_display
from birbs.analytics.grouping import SortDirection, group_by, order_by, reverse, take
from birbs.analytics.hourly import histogram_from_counts, hourly_counts, hourly_histogram
from birbs.analytics.summaries import summarize_recent, summarize_species

__all__ = [
    "SortDirection",
    "aggregate_by_day",
    "daily_series",
    "days_between",
    "fill_date_range",
    "format_compact",
    "group_by",
    "histogram_from_counts",
    "hourly_counts",
    "hourly_histogram",
    "order_by",
    "order_files_for_display",
    "reverse",
    "summarize_recent",
    "summarize_species",
    "take",
]
