"""Ordering of a species' recording files for display."""

from collections.abc import Iterable
from operator import attrgetter

from birbs.analytics.grouping import SortDirection, order_by, take
from birbs.detections.models import Detection


def order_files_for_display(
    detections: Iterable[Detection], limit: int | None = None
) -> list[Detection]:
    """Most recent recordings first, optionally capped at ``limit``."""
    files = order_by(detections, attrgetter("when"), SortDirection.DESC)
    if limit is not None:
        files = take(files, limit)
    return files
