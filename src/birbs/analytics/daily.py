"""Daily/species aggregation: one ranked species table per calendar day."""

import math
from collections.abc import Callable, Iterable
from datetime import UTC, date, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from operator import attrgetter

from birbs.analytics.grouping import SortDirection, group_by, order_by, take
from birbs.analytics.models import DayBucket, SpeciesDayEntry
from birbs.analytics.summaries import average_confidence
from birbs.detections.models import Detection

_COMPACT_SUFFIXES = ("", "K", "M", "B", "T")


def day_of(detection: Detection, tz: tzinfo = UTC) -> date:
    """Calendar day of a detection in the given timezone."""
    return detection.when.astimezone(tz).date()


def _round_compact(number: Decimal) -> Decimal:
    if number == 0:
        return Decimal(0)
    if abs(number) >= 10:
        return number.quantize(Decimal(1), rounding=ROUND_HALF_UP)
    # Two significant digits below ten
    return number.quantize(Decimal(1).scaleb(number.adjusted() - 1), rounding=ROUND_HALF_UP)


def format_compact(value: float) -> str:
    """Format a number in short English compact notation.

    >>> format_compact(0.875)
    '0.88'
    >>> format_compact(1234)
    '1.2K'
    """
    if not math.isfinite(value):
        return str(value)

    number = Decimal(str(value))
    suffix = 0
    while abs(number) >= 1000 and suffix < len(_COMPACT_SUFFIXES) - 1:
        number /= 1000
        suffix += 1

    rounded = _round_compact(number)
    if abs(rounded) >= 1000 and suffix < len(_COMPACT_SUFFIXES) - 1:
        rounded = _round_compact(rounded / 1000)
        suffix += 1

    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}{_COMPACT_SUFFIXES[suffix]}"


def _species_entry(common_name: str, detections: list[Detection]) -> SpeciesDayEntry:
    mean = average_confidence(detections)
    return SpeciesDayEntry(
        common_name=common_name,
        total=sum(d.count for d in detections),
        average_confidence=mean,
        confidence_display=format_compact(mean) if mean is not None else "",
    )


def aggregate_by_day(
    detections: Iterable[Detection],
    limit_days: int | None = None,
    tz: tzinfo = UTC,
    histogram_url: Callable[[date], str] | None = None,
) -> list[DayBucket]:
    """Group detections into per-day species tables.

    Rows for the same day and species are summed, never deduplicated. Species are
    ranked by total, most detected first, keeping input order on ties. Days run from
    most recent to oldest, and only days with detections appear.

    Args:
        detections: Normalized detections or pre-aggregated rows
        limit_days: Keep only this many most recent days
        tz: Timezone whose calendar defines a day
        histogram_url: Builds the chart image URL for a day

    Returns:
        DayBuckets, most recent day first
    """
    buckets = []
    for day, day_detections in group_by(detections, lambda d: day_of(d, tz)).items():
        entries = [
            _species_entry(common_name, group)
            for common_name, group in group_by(day_detections, attrgetter("common_name")).items()
        ]
        buckets.append(
            DayBucket(
                date=day,
                birds=tuple(order_by(entries, attrgetter("total"), SortDirection.DESC)),
                histogram_url=histogram_url(day) if histogram_url else None,
            )
        )

    buckets = order_by(buckets, attrgetter("date"), SortDirection.DESC)
    if limit_days is not None:
        buckets = take(buckets, limit_days)
    return buckets
