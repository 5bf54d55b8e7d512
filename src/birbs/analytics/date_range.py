"""Dense date-range filling so charts show gaps instead of compressed axes."""

from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import TypeVar

from birbs.analytics.daily import day_of
from birbs.analytics.models import DailyCount
from birbs.detections.exceptions import InvalidRange
from birbs.detections.models import Detection

T = TypeVar("T")


def _as_date(value: date) -> date:
    # datetime is a date subclass but would never match date keys
    return value.date() if isinstance(value, datetime) else value


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end."""
    return (_as_date(end) - _as_date(start)).days


def fill_date_range(
    sparse: Mapping[date, T],
    start: date,
    end: date,
    default: T,
    descending: bool = False,
) -> list[tuple[date, T]]:
    """Expand a sparse day -> value mapping into one entry per day.

    Args:
        sparse: Values for the days that have one
        start: First day, inclusive
        end: Last day, inclusive
        default: Value for days missing from ``sparse``
        descending: Produce the days from ``end`` back to ``start``

    Returns:
        ``days_between(start, end) + 1`` (day, value) pairs, one day apart

    Raises:
        InvalidRange: If end is before start
    """
    start, end = _as_date(start), _as_date(end)
    if end < start:
        raise InvalidRange(start, end)

    days = [start + timedelta(days=offset) for offset in range(days_between(start, end) + 1)]
    if descending:
        days.reverse()
    return [(day, sparse.get(day, default)) for day in days]


def daily_series(
    detections: Iterable[Detection],
    start: date | None = None,
    end: date | None = None,
    tz: tzinfo = UTC,
) -> list[DailyCount]:
    """Zero-filled detection counts per day.

    Bounds default to the first and last day with detections; without detections
    and bounds the series is empty.
    """
    sparse: dict[date, int] = {}
    for detection in detections:
        day = day_of(detection, tz)
        sparse[day] = sparse.get(day, 0) + detection.count

    if start is None or end is None:
        if not sparse:
            return []
        start = start if start is not None else min(sparse)
        end = end if end is not None else max(sparse)

    return [
        DailyCount(date=day, detections=count)
        for day, count in fill_date_range(sparse, start, end, 0)
    ]
