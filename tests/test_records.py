"""Tests for personal record evaluation and storage."""

from datetime import datetime

import aiosqlite
import pytest

from prify.db import PersonalRecordRepository, connect
from prify.exceptions import NotAuthenticatedError, RecordSyncError
from prify.models.records import ExerciseStats, MetricType, PersonalRecord
from prify.models.workout import Exercise, Workout, WorkoutSet
from prify.services.records import (
    PersonalRecordService,
    best_values,
    evaluate_records,
    is_new_record,
    matching_metrics,
)
from prify.services.workouts import WorkoutService
from prify.session import Session


def bench(reps_weights, date=datetime(2024, 3, 12, 18, 0), name="Bench Press"):
    return Workout(
        name="Push Day",
        date=date,
        exercises=[
            Exercise(
                name=name,
                sets=[WorkoutSet(reps=r, weight=w, completed=True) for r, w in reps_weights],
            )
        ],
    )


class TestEvaluateRecords:
    """Tests for the pure record decision."""

    def test_no_prior_record_flags_positive_values(self):
        stats = ExerciseStats(total_reps=15, max_weight=105.0)
        decision = evaluate_records("Bench Press", stats, {})

        assert decision.new_records == [MetricType.REPS, MetricType.WEIGHT]
        assert decision.is_record

    def test_equal_value_not_flagged(self):
        stats = ExerciseStats(total_reps=15, max_weight=105.0)
        current = {MetricType.REPS: 15, MetricType.WEIGHT: 105.0}

        assert evaluate_records("Bench Press", stats, current).new_records == []

    def test_lower_value_never_flagged(self):
        stats = ExerciseStats(total_reps=10, max_weight=100.0)
        current = {MetricType.REPS: 15, MetricType.WEIGHT: 105.0}

        assert not evaluate_records("Bench Press", stats, current).is_record

    def test_only_beaten_metrics_flagged(self):
        stats = ExerciseStats(total_reps=15, max_weight=110.0)
        current = {MetricType.REPS: 15, MetricType.WEIGHT: 105.0}

        assert evaluate_records("Bench Press", stats, current).new_records == [MetricType.WEIGHT]

    def test_metrics_restriction(self):
        stats = ExerciseStats(total_reps=15, max_weight=105.0)
        decision = evaluate_records("Bench Press", stats, {}, metrics=[MetricType.WEIGHT])

        assert decision.new_records == [MetricType.WEIGHT]

    @pytest.mark.parametrize(
        "value,stored,expected",
        [
            (None, None, False),
            (0, None, False),
            (1, None, True),
            (5, 5, False),
            (6, 5, True),
            (4, 5, False),
        ],
    )
    def test_is_new_record(self, value, stored, expected):
        assert is_new_record(value, stored) is expected


class TestMatchingMetrics:
    """Tests for the trophy equality check."""

    def test_equal_values_match(self):
        stats = ExerciseStats(total_reps=15, max_weight=105.0)
        current = {MetricType.REPS: 15.0, MetricType.WEIGHT: 105.0}

        assert matching_metrics(stats, current) == [MetricType.REPS, MetricType.WEIGHT]

    def test_lower_or_missing_do_not_match(self):
        stats = ExerciseStats(total_reps=10, max_weight=105.0, total_distance=2.0)
        current = {MetricType.REPS: 15.0, MetricType.WEIGHT: 105.0}

        assert matching_metrics(stats, current) == [MetricType.WEIGHT]

    def test_best_values(self):
        records = [
            PersonalRecord("alice", "Squats", MetricType.REPS, 24, 1, datetime(2024, 1, 1)),
            PersonalRecord("alice", "Squats", MetricType.WEIGHT, 225, 1, datetime(2024, 1, 1)),
        ]
        assert best_values(records) == {MetricType.REPS: 24, MetricType.WEIGHT: 225}


class TestRecordSync:
    """Tests for storing records when a workout is saved."""

    async def test_first_save_writes_records(self, db_path, session):
        """Bench press with 3x5 at 100/105/95 sets a reps and a weight record."""
        service = WorkoutService(session, db_path)
        result = await service.save_workout(bench([(5, 100), (5, 105), (5, 95)]))

        assert len(result.new_records) == 1
        assert result.new_records[0].record_types == [MetricType.REPS, MetricType.WEIGHT]

        stored = await PersonalRecordRepository(db_path).list_for_exercise("alice", "Bench Press")
        values = {r.record_type: r.value for r in stored}
        assert values == {MetricType.REPS: 15, MetricType.WEIGHT: 105}
        assert all(r.workout_id == result.workout.id for r in stored)

    async def test_equal_save_keeps_records(self, db_path, session):
        """Repeating the same numbers sets no record but still earns trophies."""
        service = WorkoutService(session, db_path)
        first = await service.save_workout(bench([(5, 100), (5, 105), (5, 95)]))
        second = await service.save_workout(
            bench([(5, 105), (5, 100), (5, 95)], date=datetime(2024, 3, 19, 18, 0))
        )

        assert second.new_records == []

        repo = PersonalRecordRepository(db_path)
        stored = await repo.list_for_exercise("alice", "Bench Press")
        assert len(stored) == 2
        assert all(r.workout_id == first.workout.id for r in stored)
        assert all(r.achieved_at == datetime(2024, 3, 12, 18, 0) for r in stored)

        records = PersonalRecordService(session, db_path)
        matches = await records.matching_records(
            "Bench Press", ExerciseStats(total_reps=15, max_weight=105.0)
        )
        assert matches == [MetricType.REPS, MetricType.WEIGHT]

    async def test_records_shared_across_workouts(self, db_path, session):
        """The same exercise name in another workout compares against the same key."""
        service = WorkoutService(session, db_path)
        await service.save_workout(bench([(5, 100), (5, 105), (5, 95)]))
        heavier = await service.save_workout(
            bench([(3, 115), (3, 110)], date=datetime(2024, 3, 15, 18, 0))
        )

        assert heavier.new_records[0].record_types == [MetricType.WEIGHT]

        stored = {
            r.record_type: r
            for r in await PersonalRecordRepository(db_path).list_for_exercise("alice", "Bench Press")
        }
        assert stored[MetricType.WEIGHT].value == 115
        assert stored[MetricType.WEIGHT].workout_id == heavier.workout.id
        assert stored[MetricType.REPS].value == 15

    async def test_records_are_per_user(self, db_path, session):
        await WorkoutService(session, db_path).save_workout(bench([(5, 200)]))
        bob = Workout(
            name="Bob's day",
            date=datetime(2024, 3, 13),
            exercises=[Exercise(name="Bench Press", sets=[WorkoutSet(reps=5, weight=100, completed=True)])],
        )

        result = await WorkoutService(Session("bob"), db_path).save_workout(bob)
        assert result.new_records[0].record_types == [MetricType.REPS, MetricType.WEIGHT]

    async def test_incomplete_exercise_skipped(self, db_path, session):
        workout = bench([(5, 100)])
        workout.exercises[0].sets[0].completed = False
        result = await WorkoutService(session, db_path).save_workout(workout)

        assert result.records == []
        assert await PersonalRecordRepository(db_path).list_for_user("alice") == []

    async def test_upsert_is_idempotent(self, db_path):
        repo = PersonalRecordRepository(db_path)
        record = PersonalRecord(
            user_id="alice",
            exercise_name="Squats",
            record_type=MetricType.WEIGHT,
            value=225.0,
            workout_id=None,
            achieved_at=datetime(2024, 3, 1, 8, 0),
        )
        await repo.upsert(record)
        once = await repo.list_for_user("alice")
        await repo.upsert(record)
        twice = await repo.list_for_user("alice")

        assert len(twice) == 1
        assert [r.to_dict() for r in once] == [r.to_dict() for r in twice]

    async def test_signed_out_raises_before_writing(self, db_path, signed_out):
        service = PersonalRecordService(signed_out, db_path)
        workout = bench([(5, 100)])
        workout.id = 1

        with pytest.raises(NotAuthenticatedError):
            await service.sync_workout(workout)
        with pytest.raises(NotAuthenticatedError):
            await service.check_and_update(
                "Bench Press", ExerciseStats(total_reps=5), 1, datetime(2024, 3, 12)
            )

        async with connect(db_path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM personal_records")
            assert (await cursor.fetchone())[0] == 0

    async def test_unsaved_workout_rejected(self, db_path, session):
        with pytest.raises(ValueError):
            await PersonalRecordService(session, db_path).sync_workout(bench([(5, 100)]))

    async def test_partial_failure_keeps_earlier_writes(self, db_path, session, monkeypatch):
        """A failed weight write keeps the reps record and the other exercises."""
        service = WorkoutService(session, db_path)
        repo = service.records.records
        real_upsert = repo.upsert

        async def flaky_upsert(record):
            if record.exercise_name == "Bench Press" and record.record_type == MetricType.WEIGHT:
                raise aiosqlite.OperationalError("database is locked")
            await real_upsert(record)

        monkeypatch.setattr(repo, "upsert", flaky_upsert)

        workout = bench([(5, 100), (5, 105)])
        workout.exercises.append(
            Exercise(name="Pullups", sets=[WorkoutSet(reps=10, completed=True)])
        )

        with pytest.raises(RecordSyncError) as exc_info:
            await service.save_workout(workout)

        assert isinstance(exc_info.value.cause, aiosqlite.OperationalError)
        by_name = {r.exercise_name: r for r in exc_info.value.results}
        assert by_name["Bench Press"].record_types == [MetricType.REPS]
        assert by_name["Bench Press"].error is not None
        assert by_name["Pullups"].record_types == [MetricType.REPS]

        stored = await PersonalRecordRepository(db_path).list_for_user("alice")
        assert sorted((r.exercise_name, r.record_type.value) for r in stored) == [
            ("Bench Press", "reps"),
            ("Pullups", "reps"),
        ]

        # The workout itself was saved
        assert workout.id is not None
        assert (await service.get_workout(workout.id)).name == "Push Day"


class TestRecordReads:
    """Tests for record read paths."""

    async def test_matching_records_signed_out(self, db_path, signed_out):
        service = PersonalRecordService(signed_out, db_path)
        assert await service.matching_records("Bench Press", ExerciseStats(total_reps=5)) == []

    async def test_matching_records_read_failure(self, db_path, session, monkeypatch):
        service = PersonalRecordService(session, db_path)

        async def broken(*args, **kwargs):
            raise aiosqlite.OperationalError("disk I/O error")

        monkeypatch.setattr(service.records, "list_for_exercise", broken)
        assert await service.matching_records("Bench Press", ExerciseStats(total_reps=5)) == []

    async def test_records_for_workout(self, db_path, session):
        result = await WorkoutService(session, db_path).save_workout(bench([(5, 100)]))
        records = PersonalRecordService(session, db_path)

        assert await records.records_for_workout(result.workout.id) == {
            "Bench Press": [MetricType.REPS, MetricType.WEIGHT]
        }

    async def test_user_records_signed_out(self, db_path, signed_out):
        with pytest.raises(NotAuthenticatedError):
            await PersonalRecordService(signed_out, db_path).user_records()

    async def test_record_keeps_value_after_workout_deleted(self, db_path, session):
        service = WorkoutService(session, db_path)
        result = await service.save_workout(bench([(5, 100)]))
        await service.delete_workout(result.workout.id)

        stored = await PersonalRecordRepository(db_path).list_for_user("alice")
        assert {r.record_type: r.value for r in stored} == {
            MetricType.REPS: 5,
            MetricType.WEIGHT: 100,
        }
        assert all(r.workout_id is None for r in stored)
