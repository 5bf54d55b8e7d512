"""Detections domain: the Detection entity, its normalizer and error taxonomy."""

from birbs.detections.exceptions import (
    BirbsError,
    DataSourceUnavailable,
    InvalidRange,
    MalformedField,
    MalformedRecord,
    MalformedTimestamp,
    MissingRequiredField,
)
from birbs.detections.models import Detection
from birbs.detections.normalizer import NormalizationResult, normalize_record, normalize_records

__all__ = [
    "BirbsError",
    "DataSourceUnavailable",
    "Detection",
    "InvalidRange",
    "MalformedField",
    "MalformedRecord",
    "MalformedTimestamp",
    "MissingRequiredField",
    "NormalizationResult",
    "normalize_record",
    "normalize_records",
]
