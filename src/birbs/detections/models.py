"""Detection entity produced by the normalizer."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Detection(BaseModel):
    """One classified observation of a species at an instant.

    Aggregate endpoints deliver pre-summed rows, in which case ``total`` holds the
    number of detections the row stands for. Media fields are passed through
    untouched; the aggregation code never looks at them.
    """

    model_config = ConfigDict(frozen=True)

    when: datetime  # always timezone-aware, UTC
    common_name: str
    scientific_name: str | None = None

    # Unnormalized score, larger is more confident; not bounded to [0, 1]
    confidence: float | None = None
    average_confidence: float | None = None

    # Only present on already-aggregated rows
    total: int | None = None

    # Media
    file_name: str | None = None
    spectrogram_url: str | None = None
    audio_url: str | None = None
    available: bool | None = None

    @property
    def count(self) -> int:
        """Number of detections this record stands for."""
        return self.total if self.total is not None else 1

    @property
    def score(self) -> float | None:
        """Best available confidence value for this record."""
        return self.confidence if self.confidence is not None else self.average_confidence
