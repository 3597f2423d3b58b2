"""Data models for PRify."""

from .library import ExerciseCategory, ExerciseTemplate
from .records import ExerciseStats, MetricType, PersonalRecord, RecordDecision, RecordResult
from .workout import Exercise, Workout, WorkoutSet

__all__ = [
    "Exercise",
    "ExerciseCategory",
    "ExerciseStats",
    "ExerciseTemplate",
    "MetricType",
    "PersonalRecord",
    "RecordDecision",
    "RecordResult",
    "Workout",
    "WorkoutSet",
]
