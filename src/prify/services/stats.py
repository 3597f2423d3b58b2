"""Per-exercise statistics over completed sets."""

from collections.abc import Iterable

from ..models.records import ExerciseStats
from ..models.workout import Exercise, WorkoutSet


def compute_exercise_stats(sets: Iterable[WorkoutSet]) -> ExerciseStats:
    """Reduce the completed sets of one exercise to summary metrics.

    Reps, distance and duration are summed; weight is the maximum. Missing
    measurements count as zero and a metric that ends at zero is reported
    as None. Incomplete sets are ignored.
    """
    total_reps = 0
    max_weight = 0.0
    total_distance = 0.0
    total_duration = 0.0

    for workout_set in sets:
        if not workout_set.completed:
            continue
        total_reps += workout_set.reps or 0
        max_weight = max(max_weight, workout_set.weight or 0)
        total_distance += workout_set.distance or 0
        total_duration += workout_set.duration or 0

    return ExerciseStats(
        total_reps=total_reps if total_reps > 0 else None,
        max_weight=max_weight if max_weight > 0 else None,
        total_distance=total_distance if total_distance > 0 else None,
        total_duration=total_duration if total_duration > 0 else None,
    )


def stats_for_exercise(exercise: Exercise) -> ExerciseStats:
    """Shortcut for ``compute_exercise_stats(exercise.sets)``."""
    return compute_exercise_stats(exercise.sets)
