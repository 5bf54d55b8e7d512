"""View contracts handed to the rendering layer."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

from birbs.analytics.models import DailyCount, SpeciesRollup
from birbs.detections.exceptions import BirbsError
from birbs.detections.models import Detection

T = TypeVar("T")


class ViewState(str, Enum):
    """Outcome of building a view.

    Keeps "nothing detected" apart from "the data could not be used".
    """

    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class ViewOptions(BaseModel):
    """Per-view settings passed down explicitly instead of toggled globally."""

    view: str
    theme: str = "default"


class RecentActivity(BaseModel):
    """Rolling-window activity for the "today" page."""

    summarized: list[SpeciesRollup]
    detections: list[Detection]


class BirdPage(BaseModel):
    """Everything the species page shows."""

    common_name: str
    scientific_name: str | None = None
    photo_url: str
    total: int
    files: list[Detection]
    hourly_distribution: list[float]  # 24 fractions indexed by hour
    peak_hour: int | None = None
    daily: list[DailyCount]


class ViewResult(BaseModel, Generic[T]):
    """A view's data together with its state and options."""

    state: ViewState
    options: ViewOptions
    data: T | None = None
    error: str | None = None
    skipped: int = 0  # Malformed records left out of the data

    @classmethod
    def built(
        cls, options: ViewOptions, data: T, empty: bool, skipped: int = 0
    ) -> "ViewResult[T]":
        """Result for a successfully built view."""
        return cls(
            state=ViewState.EMPTY if empty else ViewState.READY,
            options=options,
            data=data,
            skipped=skipped,
        )

    @classmethod
    def failed(cls, options: ViewOptions, error: BirbsError) -> "ViewResult[T]":
        """Result for a view whose data could not be fetched or was unusable."""
        return cls(state=ViewState.ERROR, options=options, error=str(error))
