"""Exercise statistics and personal record models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MetricType(str, Enum):
    """Metric a personal record is kept for."""

    REPS = "reps"  # Total reps across completed sets
    WEIGHT = "weight"  # Heaviest completed set
    DISTANCE = "distance"  # Total distance
    DURATION = "duration"  # Total duration

    @property
    def unit(self) -> str:
        return METRIC_UNITS[self]


METRIC_UNITS = {
    MetricType.REPS: "reps",
    MetricType.WEIGHT: "lbs",
    MetricType.DISTANCE: "mi",
    MetricType.DURATION: "min",
}


def format_number(value: float | int) -> str:
    """Format a measurement without a trailing ``.0`` for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_metric(metric: MetricType, value: float | int) -> str:
    """Format a value with its unit, e.g. ``105 lbs``."""
    return f"{format_number(value)} {metric.unit}"


@dataclass(frozen=True)
class ExerciseStats:
    """Per-exercise aggregate over completed sets.

    A metric is None when nothing positive contributed to it.
    """

    total_reps: int | None = None
    max_weight: float | None = None
    total_distance: float | None = None
    total_duration: float | None = None

    def value_for(self, metric: MetricType) -> float | int | None:
        """Get the aggregated value for one metric type."""
        return {
            MetricType.REPS: self.total_reps,
            MetricType.WEIGHT: self.max_weight,
            MetricType.DISTANCE: self.total_distance,
            MetricType.DURATION: self.total_duration,
        }[metric]

    def items(self) -> list[tuple[MetricType, float | int | None]]:
        """Metric/value pairs in canonical order."""
        return [(metric, self.value_for(metric)) for metric in MetricType]

    def merge(self, other: "ExerciseStats") -> "ExerciseStats":
        """Combine two partial aggregates: sums add, weight takes the max."""

        def add(a, b):
            total = (a or 0) + (b or 0)
            return total if total > 0 else None

        weight = max(self.max_weight or 0, other.max_weight or 0)
        return ExerciseStats(
            total_reps=add(self.total_reps, other.total_reps),
            max_weight=weight if weight > 0 else None,
            total_distance=add(self.total_distance, other.total_distance),
            total_duration=add(self.total_duration, other.total_duration),
        )

    @property
    def is_empty(self) -> bool:
        return all(value is None for _, value in self.items())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_reps": self.total_reps,
            "max_weight": self.max_weight,
            "total_distance": self.total_distance,
            "total_duration": self.total_duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseStats":
        """Create from dictionary."""
        return cls(
            total_reps=data.get("total_reps"),
            max_weight=data.get("max_weight"),
            total_distance=data.get("total_distance"),
            total_duration=data.get("total_duration"),
        )


@dataclass
class PersonalRecord:
    """Best known value for one (user, exercise name, metric) key."""

    user_id: str
    exercise_name: str
    record_type: MetricType
    value: float
    workout_id: int | None
    achieved_at: datetime
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "exercise_name": self.exercise_name,
            "record_type": self.record_type.value,
            "value": self.value,
            "workout_id": self.workout_id,
            "achieved_at": self.achieved_at.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def get_display(self) -> str:
        """Get a human-readable record string."""
        return f"{self.exercise_name}: {format_metric(self.record_type, self.value)}"


@dataclass
class RecordDecision:
    """Which metrics of a fresh aggregate beat the stored bests."""

    exercise_name: str
    new_records: list[MetricType] = field(default_factory=list)

    @property
    def is_record(self) -> bool:
        return bool(self.new_records)


@dataclass
class RecordResult:
    """Outcome of checking and storing records for one exercise."""

    exercise_name: str
    record_types: list[MetricType] = field(default_factory=list)
    error: Exception | None = None

    @property
    def is_record(self) -> bool:
        return bool(self.record_types)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_name": self.exercise_name,
            "is_record": self.is_record,
            "record_types": [m.value for m in self.record_types],
            "error": str(self.error) if self.error else None,
        }
