"""Training statistics over a calendar period."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from ..db.repositories import WorkoutRepository
from ..models.records import MetricType
from ..models.workout import Exercise
from ..session import Session
from .periods import days_in_range, period_range

CHART_METRICS = (MetricType.REPS, MetricType.WEIGHT, MetricType.DISTANCE)


@dataclass
class ExerciseSeries:
    """Daily values of one metric for one exercise."""

    name: str
    points: list[tuple[date, float]] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return any(value > 0 for _, value in self.points)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "data": [{"date": day.isoformat(), "value": value} for day, value in self.points],
        }


@dataclass
class PeriodStatistics:
    """Summary of a period's training."""

    period: str
    metric: MetricType
    start: datetime
    end: datetime
    total_workouts: int
    total_exercises: int
    completion_rate: int  # Percent of sets completed
    series: list[ExerciseSeries] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "metric": self.metric.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_workouts": self.total_workouts,
            "total_exercises": self.total_exercises,
            "completion_rate": self.completion_rate,
            "series": [s.to_dict() for s in self.series],
        }


def daily_value(exercise: Exercise, metric: MetricType) -> float:
    """One exercise's value for a chart: reps/distance summed, weight maxed."""
    value = 0
    for workout_set in exercise.completed_sets:
        if metric == MetricType.REPS and workout_set.reps:
            value += workout_set.reps
        elif metric == MetricType.WEIGHT and workout_set.weight:
            value = max(value, workout_set.weight)
        elif metric == MetricType.DISTANCE and workout_set.distance:
            value += workout_set.distance
    return value


class StatisticsService:
    """Computes period statistics for the signed-in user."""

    def __init__(self, session: Session, db_path: Path | None = None):
        self.session = session
        self.workouts = WorkoutRepository(db_path)

    async def compute(
        self,
        period: str = "week",
        metric: MetricType | str = MetricType.REPS,
        now: datetime | None = None,
    ) -> PeriodStatistics:
        """Compute statistics for the period containing ``now``.

        Exercises without any positive value in the period are left out of
        the series and of the exercise count.
        """
        metric = MetricType(metric)
        if metric not in CHART_METRICS:
            raise ValueError(f"Metric '{metric.value}' is not charted")

        user_id = self.session.require_user()
        start, end = period_range(period, now)
        workouts = await self.workouts.list_for_user(
            user_id, start=start, end=end, newest_first=False
        )

        days = days_in_range(start, end)
        index = {day: i for i, day in enumerate(days)}
        series: dict[str, ExerciseSeries] = {}
        total_sets = 0
        completed_sets = 0

        for workout in workouts:
            day_index = index.get(workout.date.date())
            for exercise in workout.exercises:
                total_sets += len(exercise.sets)
                completed_sets += len(exercise.completed_sets)

                if exercise.name not in series:
                    series[exercise.name] = ExerciseSeries(
                        name=exercise.name, points=[(day, 0) for day in days]
                    )
                if day_index is None:
                    continue
                value = daily_value(exercise, metric)
                if value > 0:
                    # Later workouts on the same day replace earlier values
                    series[exercise.name].points[day_index] = (days[day_index], value)

        with_data = [s for s in series.values() if s.has_data]
        completion = math.floor(completed_sets / total_sets * 100 + 0.5) if total_sets else 0

        return PeriodStatistics(
            period=period,
            metric=metric,
            start=start,
            end=end,
            total_workouts=len(workouts),
            total_exercises=len(with_data),
            completion_rate=completion,
            series=with_data,
        )
