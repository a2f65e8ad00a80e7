"""
Domain Models - Data structures for time series, scores and analysis records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TimeSeries:
    """
    An ordered, immutable sequence of numeric samples.

    Samples are addressed by 1-based position. ``labels`` carries the first
    CSV column (usually a timestamp) verbatim and is never used for ordering.
    """

    values: tuple[float, ...]
    labels: tuple[str, ...] | None = None

    def __post_init__(self):
        if self.labels is not None and len(self.labels) != len(self.values):
            raise ValueError("labels must be parallel to values")

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class ScoreLine:
    """One scorer output line, aligned with a sample of the input series."""

    index: int
    divergence: float  # non-negative
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class AnomalyFlag:
    """A flagged sample: 1-based index and confidence in [0, 1]."""

    index: int
    confidence: float


@dataclass(frozen=True)
class ScorerConfig:
    """Parameters handed to the external scorer on every call."""

    seed: int = 42
    threshold: float = 0.25
    window: int = 25
    smoothing: float | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "threshold": self.threshold,
            "window": self.window,
            "smoothing": self.smoothing,
        }


@dataclass(frozen=True)
class AnalysisRecord:
    """The persisted, write-once outcome of one upload-and-score run."""

    record_id: str
    owner: str
    filename: str
    series: TimeSeries
    flags: tuple[AnomalyFlag, ...]
    created_at: datetime
    parameters: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def anomaly_count(self) -> int:
        return len(self.flags)

    @property
    def anomaly_indices(self) -> list[int]:
        return [flag.index for flag in self.flags]

    @property
    def confidence_scores(self) -> list[float]:
        return [flag.confidence for flag in self.flags]


@dataclass(frozen=True)
class RecordSummary:
    """History entry for a record. Omits the series and flags."""

    record_id: str
    filename: str
    anomaly_count: int
    created_at: datetime


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result returned to the caller of a completed upload."""

    record_id: str
    filename: str
    anomaly_indices: list[int]
    confidence_scores: list[float]

    @property
    def anomaly_count(self) -> int:
        return len(self.anomaly_indices)
