"""Application services for PRify."""

from .library import LibraryService
from .listing import WorkoutListService
from .records import PersonalRecordService, evaluate_records, matching_metrics
from .statistics import StatisticsService
from .stats import compute_exercise_stats
from .workouts import WorkoutService

__all__ = [
    "compute_exercise_stats",
    "evaluate_records",
    "LibraryService",
    "matching_metrics",
    "PersonalRecordService",
    "StatisticsService",
    "WorkoutListService",
    "WorkoutService",
]
