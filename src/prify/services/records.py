"""Personal record detection and storage.

The write path runs in two steps per exercise: ``evaluate_records`` decides
which metrics beat the stored bests (strictly greater, or nothing stored
yet), then ``PersonalRecordService.persist_decision`` upserts one row per
flagged metric. Each metric is an independent unit; a failed write does not
undo the others.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

import aiosqlite

from ..db.repositories import PersonalRecordRepository
from ..exceptions import RecordSyncError
from ..models.records import (
    ExerciseStats,
    MetricType,
    PersonalRecord,
    RecordDecision,
    RecordResult,
)
from ..models.workout import Workout
from ..session import Session
from .stats import stats_for_exercise

logger = logging.getLogger(__name__)


def best_values(records: list[PersonalRecord]) -> dict[MetricType, float]:
    """Index stored records of one exercise by metric type."""
    return {record.record_type: record.value for record in records}


def is_new_record(value: float | int | None, stored: float | None) -> bool:
    """Whether a fresh value should replace the stored best."""
    if value is None or value <= 0:
        return False
    return stored is None or value > stored


def evaluate_records(
    exercise_name: str,
    stats: ExerciseStats,
    current: Mapping[MetricType, float],
    metrics: list[MetricType] | None = None,
) -> RecordDecision:
    """Decide which metrics of ``stats`` are new personal records.

    Args:
        exercise_name: Exercise the stats belong to
        stats: Freshly computed aggregate
        current: Stored best value per metric (missing key = no record yet)
        metrics: Restrict the check to these metrics (default: all four)

    Returns:
        The flagged metrics in canonical order
    """
    decision = RecordDecision(exercise_name=exercise_name)
    for metric, value in stats.items():
        if metrics is not None and metric not in metrics:
            continue
        if is_new_record(value, current.get(metric)):
            decision.new_records.append(metric)
    return decision


def matching_metrics(
    stats: ExerciseStats, current: Mapping[MetricType, float]
) -> list[MetricType]:
    """Metrics whose value equals the stored record (trophy display)."""
    matches = []
    for metric, value in stats.items():
        if value is None or value <= 0:
            continue
        stored = current.get(metric)
        if stored is not None and value == stored:
            matches.append(metric)
    return matches


class PersonalRecordService:
    """Reads and writes personal records for the signed-in user."""

    def __init__(self, session: Session, db_path: Path | None = None):
        self.session = session
        self.records = PersonalRecordRepository(db_path)

    async def check_and_update(
        self,
        exercise_name: str,
        stats: ExerciseStats,
        workout_id: int,
        workout_date: datetime,
    ) -> RecordResult:
        """Compare an exercise's stats with stored bests and store new ones.

        Raises NotAuthenticatedError before touching storage when nobody is
        signed in. Persistence errors do not raise here: the first one is
        kept on the result and the remaining metrics are still attempted.
        """
        user_id = self.session.require_user()
        result = RecordResult(exercise_name=exercise_name)

        current: dict[MetricType, float] = {}
        checked: list[MetricType] = []
        for metric, value in stats.items():
            if value is None or value <= 0:
                continue
            try:
                stored = await self.records.get(user_id, exercise_name, metric)
            except aiosqlite.Error as e:
                logger.warning(
                    "Could not read %s record for %s: %s", metric.value, exercise_name, e
                )
                if result.error is None:
                    result.error = e
                continue
            if stored is not None:
                current[metric] = stored.value
            checked.append(metric)

        decision = evaluate_records(exercise_name, stats, current, metrics=checked)
        written, error = await self.persist_decision(
            user_id, decision, stats, workout_id, workout_date
        )
        result.record_types = written
        if result.error is None:
            result.error = error
        return result

    async def persist_decision(
        self,
        user_id: str,
        decision: RecordDecision,
        stats: ExerciseStats,
        workout_id: int,
        workout_date: datetime,
    ) -> tuple[list[MetricType], Exception | None]:
        """Upsert one record row per flagged metric.

        Returns the metrics written and the first error, if any.
        """
        written: list[MetricType] = []
        first_error: Exception | None = None

        for metric in decision.new_records:
            record = PersonalRecord(
                user_id=user_id,
                exercise_name=decision.exercise_name,
                record_type=metric,
                value=stats.value_for(metric),
                workout_id=workout_id,
                achieved_at=workout_date,
            )
            try:
                await self.records.upsert(record)
            except aiosqlite.Error as e:
                logger.error(
                    "Failed to store %s record for %s: %s",
                    metric.value,
                    decision.exercise_name,
                    e,
                )
                if first_error is None:
                    first_error = e
                continue
            logger.info("New %s", record.get_display())
            written.append(metric)

        return written, first_error

    async def sync_workout(self, workout: Workout) -> list[RecordResult]:
        """Run the record check for every exercise of a saved workout.

        Exercises are processed in order. When any of them hit a persistence
        error, RecordSyncError is raised after all were attempted; records
        already written stay in place.
        """
        if workout.id is None:
            raise ValueError("Workout must be saved before checking records")
        self.session.require_user()

        results = []
        for exercise in workout.exercises:
            stats = stats_for_exercise(exercise)
            if stats.is_empty:
                continue
            results.append(
                await self.check_and_update(exercise.name, stats, workout.id, workout.date)
            )

        errors = [r.error for r in results if r.error is not None]
        if errors:
            raise RecordSyncError(
                f"Failed to update personal records for workout {workout.id}: {errors[0]}",
                cause=errors[0],
                results=results,
            )
        return results

    async def matching_records(
        self, exercise_name: str, stats: ExerciseStats
    ) -> list[MetricType]:
        """Metrics where ``stats`` equals the stored record.

        Read-only and never raises: a signed-out session or a failed read
        yields an empty list.
        """
        user_id = self.session.get_user()
        if user_id is None:
            return []
        try:
            records = await self.records.list_for_exercise(user_id, exercise_name)
        except aiosqlite.Error as e:
            logger.warning("Record check for %s failed: %s", exercise_name, e)
            return []
        return matching_metrics(stats, best_values(records))

    async def records_for_workout(self, workout_id: int) -> dict[str, list[MetricType]]:
        """Record types achieved in a workout, grouped by exercise name."""
        records = await self.records.list_for_workout(workout_id)
        record_map: dict[str, list[MetricType]] = {}
        for record in records:
            record_map.setdefault(record.exercise_name, []).append(record.record_type)
        return record_map

    async def user_records(self, user_id: str | None = None) -> list[PersonalRecord]:
        """All records of a user (default: the signed-in one), newest first."""
        if user_id is None:
            user_id = self.session.require_user()
        return await self.records.list_for_user(user_id)
