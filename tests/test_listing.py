"""Tests for the workout history listing."""

from datetime import datetime, timedelta

import pytest

from prify.exceptions import NotAuthenticatedError
from prify.models.records import MetricType
from prify.models.workout import Exercise, Workout, WorkoutSet
from prify.services.listing import (
    WorkoutListService,
    compute_global_records,
    matches_search,
    sort_for_display,
)
from prify.services.workouts import WorkoutService
from prify.session import Session

NOW = datetime(2024, 3, 14, 12, 0)  # A Thursday


def squat_workout(day: datetime, weight: float, reps: int = 5, name: str = "Legs") -> Workout:
    return Workout(
        name=name,
        date=day,
        exercises=[
            Exercise(name="Squats", sets=[WorkoutSet(reps=reps, weight=weight, completed=True)])
        ],
    )


class TestMatchesSearch:
    """Tests for workout search."""

    def test_name_and_notes(self, bench_workout):
        assert matches_search(bench_workout, "push")
        assert matches_search(bench_workout, "STRONG")
        assert not matches_search(bench_workout, "pull")

    def test_exercise_name(self, bench_workout):
        assert matches_search(bench_workout, "bench")

    def test_set_values(self, bench_workout):
        """Set values are matched in their display form."""
        assert matches_search(bench_workout, "105 lbs")
        assert matches_search(bench_workout, "5 reps")
        assert not matches_search(bench_workout, "110 lbs")

    def test_exercise_totals(self, bench_workout):
        assert matches_search(bench_workout, "15 reps")

    def test_distance_and_duration(self, cardio_workout):
        assert matches_search(cardio_workout, "3.1 mi")
        assert matches_search(cardio_workout, "30 min")


class TestSortForDisplay:
    def test_exercises_alphabetical(self, cardio_workout):
        cardio_workout.exercises.append(Exercise(name="bicep curls"))
        sort_for_display(cardio_workout)

        assert [e.name for e in cardio_workout.exercises] == ["bicep curls", "Running", "Squats"]


class TestGlobalRecords:
    """Tests for finding the workouts holding all-time bests."""

    def test_single_holder(self):
        old = squat_workout(NOW - timedelta(days=7), 225)
        new = squat_workout(NOW, 245, reps=6)
        old.id, new.id = 1, 2

        records = compute_global_records([old, new])

        assert records["Squats"].workout_id == 2
        assert records["Squats"].record_types == [MetricType.REPS, MetricType.WEIGHT]

    def test_metrics_split_between_workouts(self):
        """The newest holder is reported with the metrics it holds."""
        heavy = squat_workout(NOW - timedelta(days=2), 275, reps=3)
        volume = squat_workout(NOW, 185, reps=12)
        heavy.id, volume.id = 1, 2

        record = compute_global_records([heavy, volume])["Squats"]

        assert record.workout_id == 2
        assert record.record_types == [MetricType.REPS]

    def test_ties_go_to_newest(self):
        first = squat_workout(NOW - timedelta(days=3), 225)
        repeat = squat_workout(NOW, 225)
        first.id, repeat.id = 1, 2

        record = compute_global_records([first, repeat])["Squats"]

        assert record.workout_id == 2
        assert record.record_types == [MetricType.REPS, MetricType.WEIGHT]

    def test_incomplete_exercise_has_no_record(self):
        workout = squat_workout(NOW, 225)
        workout.id = 1
        workout.exercises[0].sets[0].completed = False

        assert compute_global_records([workout]) == {}


class TestWorkoutListService:
    """Tests for listing pages of workouts."""

    async def _seed(self, db_path, session, count: int) -> list[Workout]:
        service = WorkoutService(session, db_path)
        saved = []
        for i in range(count):
            workout = squat_workout(NOW - timedelta(days=i), 100 + i, name=f"Workout {i}")
            saved.append((await service.save_workout(workout)).workout)
        return saved

    async def test_pagination(self, db_path, session):
        await self._seed(db_path, session, 12)
        service = WorkoutListService(session, db_path, page_size=10)

        first = await service.list_workouts(page=1, now=NOW)
        second = await service.list_workouts(page=2, now=NOW)

        assert first.total_count == 12
        assert first.total_pages == 2
        assert len(first.workouts) == 10
        assert first.workouts[0].name == "Workout 0"
        assert first.has_next and not first.has_previous
        assert [w.name for w in second.workouts] == ["Workout 10", "Workout 11"]
        assert second.has_previous and not second.has_next

    async def test_date_filters(self, db_path, session):
        await self._seed(db_path, session, 20)
        service = WorkoutListService(session, db_path, page_size=50)

        today = await service.list_workouts(filter="today", now=NOW)
        week = await service.list_workouts(filter="week", now=NOW)
        month = await service.list_workouts(filter="month", now=NOW)

        assert [w.name for w in today.workouts] == ["Workout 0"]
        # Monday 11 March to Thursday 14 March
        assert week.total_count == 4
        # 1 March to 14 March
        assert month.total_count == 14

    async def test_global_records_ignore_filter(self, db_path, session):
        """Record badges consider every workout, not just the filtered page."""
        workouts = WorkoutService(session, db_path)
        best = (await workouts.save_workout(squat_workout(NOW - timedelta(days=40), 315, reps=20))).workout
        await workouts.save_workout(squat_workout(NOW, 225))

        page = await WorkoutListService(session, db_path).list_workouts(filter="today", now=NOW)

        assert len(page.workouts) == 1
        assert page.workouts[0].id != best.id
        holder = page.global_records["Squats"]
        assert holder.workout_id == best.id
        assert holder.record_types == [MetricType.REPS, MetricType.WEIGHT]

    async def test_search(self, db_path, session):
        await self._seed(db_path, session, 3)
        service = WorkoutListService(session, db_path)

        result = await service.list_workouts(search="101 lbs", now=NOW)

        assert [w.name for w in result.workouts] == ["Workout 1"]
        assert result.search == "101 lbs"

    async def test_other_users_hidden(self, db_path, session):
        await self._seed(db_path, session, 2)

        result = await WorkoutListService(Session("bob"), db_path).list_workouts(now=NOW)

        assert result.workouts == []
        assert result.total_count == 0
        assert result.total_pages == 0

    async def test_invalid_arguments(self, db_path, session):
        service = WorkoutListService(session, db_path)
        with pytest.raises(ValueError):
            await service.list_workouts(filter="decade")
        with pytest.raises(ValueError):
            await service.list_workouts(page=0)

    async def test_signed_out(self, db_path, signed_out):
        with pytest.raises(NotAuthenticatedError):
            await WorkoutListService(signed_out, db_path).list_workouts()

    async def test_to_dict(self, db_path, session):
        await self._seed(db_path, session, 1)
        data = (await WorkoutListService(session, db_path).list_workouts(now=NOW)).to_dict()

        assert data["total_pages"] == 1
        assert data["global_records"]["Squats"]["record_types"] == ["reps", "weight"]
