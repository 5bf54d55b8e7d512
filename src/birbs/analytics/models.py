"""Read-only result shapes handed to the presentation layer."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from birbs.detections.models import Detection


class SpeciesDayEntry(BaseModel):
    """One species' line in a day's table."""

    model_config = ConfigDict(frozen=True)

    common_name: str
    total: int
    average_confidence: float | None = None
    confidence_display: str = ""


class DayBucket(BaseModel):
    """All species seen on one calendar day, most detected first."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    birds: tuple[SpeciesDayEntry, ...] = ()
    histogram_url: str | None = None

    @property
    def total(self) -> int:
        return sum(bird.total for bird in self.birds)


class DailyCount(BaseModel):
    """Detections on one day of a dense series."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    detections: int


class HourlyCount(BaseModel):
    """Detections in one hour-of-day bucket, as served by the hourly endpoint."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(ge=0, le=23)
    detections: int = Field(ge=0)


class SpeciesRollup(BaseModel):
    """Rolling-window summary for one species."""

    model_config = ConfigDict(frozen=True)

    common_name: str
    total_in_window: int
    last: Detection
    best: Detection


class SpeciesTotal(BaseModel):
    """All-time summary for one species."""

    model_config = ConfigDict(frozen=True)

    common_name: str
    total: int
    average_confidence: float | None = None
    last_detection: datetime.datetime
