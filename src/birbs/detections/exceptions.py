"""Error taxonomy for detection processing."""

from typing import Any


class BirbsError(Exception):
    """Base class for all errors raised by birbs."""


class MalformedRecord(BirbsError, ValueError):
    """A single raw record could not be turned into a Detection.

    Per-record errors are isolated: the normalizer skips the record and counts it.
    """

    def __init__(self, message: str, record: Any = None):
        super().__init__(message)
        self.record = record


class MalformedTimestamp(MalformedRecord):
    """The record's ``when`` value is absent or cannot be parsed."""


class MalformedField(MalformedRecord):
    """A present field cannot be coerced to its expected type."""

    def __init__(self, field: str, value: Any, record: Any = None):
        super().__init__(f"Field '{field}' has an invalid value: {value!r}", record)
        self.field = field
        self.value = value


class MissingRequiredField(BirbsError):
    """A record lacks a field every record must have; fatal to the whole batch."""

    def __init__(self, field: str, index: int | None = None):
        location = f" (record {index})" if index is not None else ""
        super().__init__(f"Required field '{field}' is missing{location}")
        self.field = field
        self.index = index


class InvalidRange(BirbsError, ValueError):
    """A date range whose end precedes its start."""

    def __init__(self, start: Any, end: Any):
        super().__init__(f"Invalid range: end {end} is before start {start}")
        self.start = start
        self.end = end


class DataSourceUnavailable(BirbsError):
    """The detection-data service could not be reached or answered with an error."""

    def __init__(self, url: str, status_code: int | None = None, reason: str = ""):
        detail = f"HTTP {status_code}" if status_code is not None else reason or "unreachable"
        super().__init__(f"Detection data source unavailable at {url}: {detail}")
        self.url = url
        self.status_code = status_code
        self.reason = reason
