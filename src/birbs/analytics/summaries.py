"""Per-species summaries: rolling-window rollups and all-time totals."""

import math
from collections.abc import Iterable
from operator import attrgetter

from birbs.analytics.grouping import SortDirection, group_by, order_by
from birbs.analytics.models import SpeciesRollup, SpeciesTotal
from birbs.detections.models import Detection


def _score_key(detection: Detection) -> float:
    score = detection.score
    return score if score is not None else -math.inf


def average_confidence(detections: Iterable[Detection]) -> float | None:
    """Count-weighted mean confidence of the detections that carry a score."""
    weighted_sum = 0.0
    weight = 0
    for detection in detections:
        if detection.score is None:
            continue
        weighted_sum += detection.score * detection.count
        weight += detection.count
    if weight == 0:
        return None
    return weighted_sum / weight


def summarize_recent(detections: Iterable[Detection]) -> list[SpeciesRollup]:
    """Summarize a window of detections per species.

    The window itself is chosen by the caller; every detection given is counted.
    ``last`` is the most recent detection and ``best`` the highest scoring one; on
    ties the first one in input order wins. Species appear in order of first
    occurrence. An empty window gives an empty list.
    """
    rollups = []
    for common_name, group in group_by(detections, attrgetter("common_name")).items():
        # max() keeps the first maximal element
        rollups.append(
            SpeciesRollup(
                common_name=common_name,
                total_in_window=len(group),
                last=max(group, key=attrgetter("when")),
                best=max(group, key=_score_key),
            )
        )
    return rollups


def summarize_species(detections: Iterable[Detection]) -> list[SpeciesTotal]:
    """Total detections, mean confidence and last detection per species, busiest first."""
    totals = [
        SpeciesTotal(
            common_name=common_name,
            total=sum(d.count for d in group),
            average_confidence=average_confidence(group),
            last_detection=max(d.when for d in group),
        )
        for common_name, group in group_by(detections, attrgetter("common_name")).items()
    ]
    return order_by(totals, attrgetter("total"), SortDirection.DESC)
