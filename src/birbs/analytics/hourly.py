"""Hour-of-day histograms.

Hours from every day collapse into the same 24 buckets. Fractions sum to 1.0 when
there is at least one detection and are all zero otherwise.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, tzinfo

from birbs.analytics.grouping import group_by
from birbs.analytics.models import HourlyCount
from birbs.detections.models import Detection

HOURS_PER_DAY = 24


def hour_of(detection: Detection, tz: tzinfo = UTC) -> int:
    """Hour of day (0-23) of a detection in the given timezone."""
    return detection.when.astimezone(tz).hour


def hourly_counts(detections: Iterable[Detection], tz: tzinfo = UTC) -> list[int]:
    """Dense 24-entry detection counts indexed by hour."""
    counts = [0] * HOURS_PER_DAY
    for hour, group in group_by(detections, lambda d: hour_of(d, tz)).items():
        counts[hour] = sum(d.count for d in group)
    return counts


def histogram_from_counts(counts: Mapping[int, int] | Sequence[int]) -> list[float]:
    """Normalize hour counts to fractions of the total.

    Args:
        counts: Sparse hour -> count mapping, or a dense 24-entry sequence

    Returns:
        24 fractions indexed by hour

    Raises:
        ValueError: If an hour is outside 0-23 or a sequence is not 24 long
    """
    if isinstance(counts, Mapping):
        dense = [0] * HOURS_PER_DAY
        for hour, count in counts.items():
            if not 0 <= hour < HOURS_PER_DAY:
                raise ValueError(f"Hour out of range: {hour}")
            dense[hour] += count
    else:
        if len(counts) != HOURS_PER_DAY:
            raise ValueError(f"Expected {HOURS_PER_DAY} hourly counts, got {len(counts)}")
        dense = list(counts)

    total = sum(dense)
    if total == 0:
        return [0.0] * HOURS_PER_DAY
    return [count / total for count in dense]


def counts_from_rows(rows: Iterable[HourlyCount]) -> list[int]:
    """Dense 24-entry counts from rows already counted per hour by the data service."""
    counts = [0] * HOURS_PER_DAY
    for row in rows:
        counts[row.hour] += row.detections
    return counts


def hourly_histogram(detections: Iterable[Detection], tz: tzinfo = UTC) -> list[float]:
    """Fraction of detections falling in each hour of the day."""
    return histogram_from_counts(hourly_counts(detections, tz))


def peak_hour(counts: Sequence[int] | Sequence[float]) -> int | None:
    """Busiest hour, earliest on ties; None when there are no detections."""
    if not counts or max(counts) <= 0:
        return None
    return list(counts).index(max(counts))
