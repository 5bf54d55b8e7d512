"""Event normalizer: the parse/validate boundary between raw JSON rows and Detections.

Raw rows come from the detection-data service as loosely typed mappings. Each row is
either turned into a Detection or rejected with a MalformedRecord, which
``normalize_records`` counts and skips so that one bad row cannot blank a whole chart.
A row without a species name is a structural problem and fails the batch.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from typing import Any

from dateutil import parser as date_parser

from birbs.detections.exceptions import (
    MalformedField,
    MalformedRecord,
    MalformedTimestamp,
    MissingRequiredField,
)
from birbs.detections.models import Detection

logger = logging.getLogger(__name__)

# Aggregate endpoints name the instant and the count differently
WHEN_KEYS = ("when", "date", "timestamp", "last_detection")
COUNT_KEYS = ("total", "detections")

# Differ in year, month and day; a string parsing differently under each lacks one
_DEFAULT_DAYS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


@dataclass(frozen=True)
class NormalizationResult:
    """Detections that survived normalization plus the records that were skipped."""

    detections: tuple[Detection, ...] = ()
    errors: tuple[MalformedRecord, ...] = field(default_factory=tuple)

    @property
    def skipped(self) -> int:
        """Number of records excluded from the output."""
        return len(self.errors)


def parse_when(value: Any) -> datetime:
    """Parse a timestamp value into a UTC-aware datetime.

    Naive values are taken to be UTC so that day and hour bucketing always uses a
    single calendar. Strings must carry a full calendar date: partial values such as
    ``"10:00"`` or ``"April"`` are rejected instead of being completed from today.

    Args:
        value: ISO-like string, datetime, date, or epoch seconds

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        MalformedTimestamp: If the value is missing or cannot be parsed
    """
    if value is None or isinstance(value, bool):
        raise MalformedTimestamp(f"Unparsable timestamp: {value!r}")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, int | float):
        try:
            parsed = datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise MalformedTimestamp(f"Unparsable timestamp: {value!r}") from e
    elif isinstance(value, str) and value.strip():
        try:
            parsed, other = (
                date_parser.parse(value.strip(), default=default) for default in _DEFAULT_DAYS
            )
        except (ValueError, OverflowError) as e:
            raise MalformedTimestamp(f"Unparsable timestamp: {value!r}") from e
        if parsed != other:
            raise MalformedTimestamp(f"Incomplete date in timestamp: {value!r}")
    else:
        raise MalformedTimestamp(f"Unparsable timestamp: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _first_present(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _coerce_float(name: str, value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedField(name, value)
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as e:
            raise MalformedField(name, value) from e
    else:
        raise MalformedField(name, value)
    if not math.isfinite(number):
        raise MalformedField(name, value)
    return number


def _coerce_int(name: str, value: Any) -> int | None:
    number = _coerce_float(name, value)
    if number is None:
        return None
    if not number.is_integer():
        raise MalformedField(name, value)
    return int(number)


def _coerce_bool(name: str, value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
        return value.strip().lower() in _TRUE_STRINGS
    raise MalformedField(name, value)


def _coerce_str(name: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise MalformedField(name, value)


def normalize_record(record: Mapping[str, Any], index: int | None = None) -> Detection:
    """Turn one raw record into a Detection.

    Args:
        record: Raw key-value mapping as decoded from JSON
        index: Position of the record in its batch, used in error messages

    Returns:
        Normalized, immutable Detection

    Raises:
        MissingRequiredField: If the record has no ``common_name``
        MalformedTimestamp: If the record's time value cannot be parsed
        MalformedField: If another present field cannot be coerced
    """
    if not isinstance(record, Mapping):
        raise MalformedRecord(f"Record is not a mapping: {type(record).__name__}", record)

    common_name = record.get("common_name")
    if common_name is None or common_name == "":
        raise MissingRequiredField("common_name", index)

    try:
        when = parse_when(_first_present(record, WHEN_KEYS))
        return Detection(
            when=when,
            common_name=_coerce_str("common_name", common_name),
            scientific_name=_coerce_str("scientific_name", record.get("scientific_name")),
            confidence=_coerce_float("confidence", record.get("confidence")),
            average_confidence=_coerce_float(
                "average_confidence", record.get("average_confidence")
            ),
            total=_coerce_int("total", _first_present(record, COUNT_KEYS)),
            file_name=_coerce_str("file_name", record.get("file_name")),
            spectrogram_url=_coerce_str("spectrogram_url", record.get("spectrogram_url")),
            audio_url=_coerce_str("audio_url", record.get("audio_url")),
            available=_coerce_bool("available", record.get("available")),
        )
    except MalformedRecord as e:
        e.record = record
        raise


def normalize_records(records: Iterable[Mapping[str, Any]]) -> NormalizationResult:
    """Normalize a batch of raw records, skipping the malformed ones.

    Args:
        records: Raw records from one fetched snapshot

    Returns:
        NormalizationResult with detections in input order and the skipped errors

    Raises:
        MissingRequiredField: If any record lacks ``common_name``
    """
    detections: list[Detection] = []
    errors: list[MalformedRecord] = []

    for index, record in enumerate(records):
        try:
            detections.append(normalize_record(record, index))
        except MalformedRecord as e:
            logger.debug("Skipping record %d: %s", index, e)
            errors.append(e)

    if errors:
        logger.warning(
            "Skipped %d malformed record(s) out of %d",
            len(errors),
            len(errors) + len(detections),
        )

    return NormalizationResult(detections=tuple(detections), errors=tuple(errors))
