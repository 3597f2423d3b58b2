"""Tests for period boundaries and training statistics."""

from datetime import date, datetime

import pytest

from prify.exceptions import NotAuthenticatedError
from prify.models.records import MetricType
from prify.models.workout import Exercise, Workout, WorkoutSet
from prify.services.periods import days_in_range, period_range
from prify.services.statistics import StatisticsService, daily_value
from prify.services.workouts import WorkoutService

NOW = datetime(2024, 3, 14, 12, 0)  # A Thursday


class TestPeriodRange:
    """Tests for period_range."""

    def test_today(self):
        start, end = period_range("today", NOW)
        assert start == datetime(2024, 3, 14, 0, 0)
        assert end.date() == date(2024, 3, 14)
        assert end.hour == 23

    def test_week_starts_monday(self):
        start, end = period_range("week", NOW)
        assert start.date() == date(2024, 3, 11)
        assert end.date() == date(2024, 3, 17)

    def test_week_on_sunday(self):
        start, _ = period_range("week", datetime(2024, 3, 17, 20, 0))
        assert start.date() == date(2024, 3, 11)

    def test_month(self):
        start, end = period_range("month", datetime(2024, 2, 10))
        assert start.date() == date(2024, 2, 1)
        assert end.date() == date(2024, 2, 29)

    def test_december(self):
        _, end = period_range("month", datetime(2023, 12, 5))
        assert end.date() == date(2023, 12, 31)

    def test_quarter(self):
        start, end = period_range("quarter", datetime(2024, 8, 20))
        assert start.date() == date(2024, 7, 1)
        assert end.date() == date(2024, 9, 30)

    def test_year(self):
        start, end = period_range("year", NOW)
        assert start.date() == date(2024, 1, 1)
        assert end.date() == date(2024, 12, 31)

    def test_unknown(self):
        with pytest.raises(ValueError):
            period_range("fortnight", NOW)

    def test_days_in_range(self):
        days = days_in_range(*period_range("week", NOW))
        assert len(days) == 7
        assert days[0] == date(2024, 3, 11)
        assert days[-1] == date(2024, 3, 17)


class TestDailyValue:
    def test_reps_summed_weight_maxed(self):
        exercise = Exercise(
            name="Squats",
            sets=[
                WorkoutSet(reps=5, weight=200, completed=True),
                WorkoutSet(reps=5, weight=220, completed=True),
                WorkoutSet(reps=5, weight=300, completed=False),
            ],
        )
        assert daily_value(exercise, MetricType.REPS) == 10
        assert daily_value(exercise, MetricType.WEIGHT) == 220
        assert daily_value(exercise, MetricType.DISTANCE) == 0


class TestStatisticsService:
    """Tests for StatisticsService.compute."""

    async def _seed(self, db_path, session):
        service = WorkoutService(session, db_path)
        workouts = [
            Workout(
                name="Monday",
                date=datetime(2024, 3, 11, 18, 0),
                exercises=[
                    Exercise(
                        name="Squats",
                        sets=[
                            WorkoutSet(reps=8, weight=225, completed=True),
                            WorkoutSet(reps=8, weight=245, completed=False),
                        ],
                    )
                ],
            ),
            Workout(
                name="Wednesday",
                date=datetime(2024, 3, 13, 7, 0),
                exercises=[
                    Exercise(name="Squats", sets=[WorkoutSet(reps=10, weight=235, completed=True)]),
                    Exercise(name="Running", sets=[WorkoutSet(distance=3.1, completed=True)]),
                ],
            ),
            Workout(
                name="Last week",
                date=datetime(2024, 3, 6, 18, 0),
                exercises=[
                    Exercise(name="Squats", sets=[WorkoutSet(reps=20, weight=300, completed=True)])
                ],
            ),
        ]
        for workout in workouts:
            await service.save_workout(workout)

    async def test_reps(self, db_path, session):
        await self._seed(db_path, session)
        stats = await StatisticsService(session, db_path).compute("week", "reps", now=NOW)

        assert stats.total_workouts == 2
        assert stats.total_exercises == 1
        assert stats.completion_rate == 75
        assert [s.name for s in stats.series] == ["Squats"]
        values = dict(stats.series[0].points)
        assert values[date(2024, 3, 11)] == 8
        assert values[date(2024, 3, 13)] == 10
        assert values[date(2024, 3, 12)] == 0
        assert len(values) == 7

    async def test_weight_ignores_incomplete(self, db_path, session):
        await self._seed(db_path, session)
        stats = await StatisticsService(session, db_path).compute("week", MetricType.WEIGHT, now=NOW)

        values = dict(stats.series[0].points)
        assert values[date(2024, 3, 11)] == 225
        assert values[date(2024, 3, 13)] == 235

    async def test_distance(self, db_path, session):
        await self._seed(db_path, session)
        stats = await StatisticsService(session, db_path).compute("week", "distance", now=NOW)

        assert [s.name for s in stats.series] == ["Running"]
        assert stats.total_exercises == 1

    async def test_month_includes_earlier_week(self, db_path, session):
        await self._seed(db_path, session)
        stats = await StatisticsService(session, db_path).compute("month", "reps", now=NOW)

        assert stats.total_workouts == 3
        assert len(stats.series[0].points) == 31

    async def test_completion_rate_rounds_half_up(self, db_path, session):
        """One completed set out of eight is 12.5%, shown as 13%."""
        sets = [WorkoutSet(reps=1, completed=i == 0) for i in range(8)]
        await WorkoutService(session, db_path).save_workout(
            Workout(name="Mostly skipped", date=NOW, exercises=[Exercise(name="Pullups", sets=sets)])
        )
        stats = await StatisticsService(session, db_path).compute("today", "reps", now=NOW)

        assert stats.completion_rate == 13

    async def test_empty_period(self, db_path, session):
        stats = await StatisticsService(session, db_path).compute("today", "reps", now=NOW)

        assert stats.total_workouts == 0
        assert stats.completion_rate == 0
        assert stats.series == []
        assert stats.to_dict()["metric"] == "reps"

    async def test_duration_not_charted(self, db_path, session):
        with pytest.raises(ValueError):
            await StatisticsService(session, db_path).compute("week", "duration", now=NOW)

    async def test_signed_out(self, db_path, signed_out):
        with pytest.raises(NotAuthenticatedError):
            await StatisticsService(signed_out, db_path).compute("week", "reps", now=NOW)
