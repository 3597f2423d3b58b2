"""Workout editing and the save flow."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..db.repositories import (
    ExerciseRepository,
    ExerciseTemplateRepository,
    SetRepository,
    WorkoutRepository,
)
from ..exceptions import NotFoundError
from ..models.library import ExerciseTemplate
from ..models.records import RecordResult
from ..models.workout import Exercise, Workout, WorkoutSet
from ..session import Session
from .records import PersonalRecordService

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """A saved workout and the records its exercises set."""

    workout: Workout
    records: list[RecordResult] = field(default_factory=list)

    @property
    def new_records(self) -> list[RecordResult]:
        return [r for r in self.records if r.is_record]

    def to_dict(self) -> dict:
        return {
            "workout": self.workout.to_dict(),
            "records": [r.to_dict() for r in self.new_records],
        }


class WorkoutService:
    """CRUD for a user's workouts, exercises and sets."""

    def __init__(self, session: Session, db_path: Path | None = None):
        self.session = session
        self.db_path = db_path
        self.workouts = WorkoutRepository(db_path)
        self.exercises = ExerciseRepository(db_path)
        self.sets = SetRepository(db_path)
        self.templates = ExerciseTemplateRepository(db_path)
        self.records = PersonalRecordService(session, db_path)

    async def get_workout(self, workout_id: int) -> Workout:
        """Get one of the current user's workouts."""
        user_id = self.session.require_user()
        workout = await self.workouts.get(workout_id, user_id=user_id)
        if workout is None:
            raise NotFoundError(f"Workout {workout_id} not found")
        return workout

    async def save_workout(self, workout: Workout) -> SaveResult:
        """Create or update a workout with its exercises and sets.

        Exercises and sets missing from ``workout`` are deleted. Once every
        row is written the personal record pass runs over the completed
        sets; a RecordSyncError from that pass propagates, the workout
        itself stays saved.
        """
        user_id = self.session.require_user()
        workout.user_id = user_id

        if workout.id is None:
            workout.id = await self.workouts.create(workout)
            logger.info("Created workout %s (%s)", workout.id, workout.name)
        else:
            await self.get_workout(workout.id)
            await self.workouts.update(workout)

        await self.exercises.delete_missing(
            workout.id, [e.id for e in workout.exercises if e.id is not None]
        )
        for exercise in workout.exercises:
            await self._save_exercise(exercise, workout.id)

        saved = await self.get_workout(workout.id)
        records = await self.records.sync_workout(saved)
        return SaveResult(workout=saved, records=records)

    async def _save_exercise(self, exercise: Exercise, workout_id: int) -> None:
        if exercise.id is None:
            exercise.id = await self.exercises.create(exercise, workout_id)
        else:
            existing = await self.exercises.get(exercise.id)
            if existing is None or existing.workout_id != workout_id:
                raise NotFoundError(f"Exercise {exercise.id} not found in workout {workout_id}")
            await self.exercises.update(exercise)
        exercise.workout_id = workout_id

        await self.sets.delete_missing(
            exercise.id, [s.id for s in exercise.sets if s.id is not None]
        )
        for workout_set in exercise.sets:
            if workout_set.id is None:
                workout_set.id = await self.sets.create(workout_set, exercise.id)
            else:
                existing_set = await self.sets.get(workout_set.id)
                if existing_set is None or existing_set.exercise_id != exercise.id:
                    raise NotFoundError(
                        f"Set {workout_set.id} not found in exercise {exercise.id}"
                    )
                await self.sets.update(workout_set)
            workout_set.exercise_id = exercise.id

    async def delete_workout(self, workout_id: int) -> None:
        """Delete a workout with its exercises and sets."""
        await self.get_workout(workout_id)
        await self.workouts.delete(workout_id)
        logger.info("Deleted workout %s", workout_id)

    async def duplicate_workout(self, workout_id: int) -> Workout:
        """Copy a workout to today with every set reset to not completed."""
        source = await self.get_workout(workout_id)
        copy = Workout(
            name=f"{source.name} (Copy)",
            date=datetime.now(),
            notes=source.notes,
            user_id=source.user_id,
        )
        copy.id = await self.workouts.create(copy)

        for exercise in source.exercises:
            new_exercise = Exercise(
                name=exercise.name,
                notes=exercise.notes,
                icon_name=exercise.icon_name,
                sample_url=exercise.sample_url,
            )
            exercise_id = await self.exercises.create(new_exercise, copy.id)
            await self.sets.create_many(
                [
                    WorkoutSet(
                        reps=s.reps,
                        weight=s.weight,
                        distance=s.distance,
                        duration=s.duration,
                        completed=False,
                    )
                    for s in exercise.sets
                ],
                exercise_id,
            )

        return await self.get_workout(copy.id)

    async def add_exercise_from_template(
        self, workout_id: int, template: ExerciseTemplate | str
    ) -> Exercise:
        """Add an exercise pre-filled with a template's default sets.

        ``template`` may be a template or a template name.
        """
        await self.get_workout(workout_id)
        if isinstance(template, str):
            found = await self.templates.get_by_name(template)
            if found is None:
                raise NotFoundError(f"Exercise template '{template}' not found")
            template = found

        exercise = Exercise(
            name=template.name,
            icon_name=template.icon_name,
            sample_url=template.sample_url,
        )
        exercise_id = await self.exercises.create(exercise, workout_id)
        set_count = max(template.default_sets or 1, 1)
        await self.sets.create_many(
            [
                WorkoutSet(
                    reps=template.default_reps,
                    distance=template.default_distance,
                    duration=template.default_duration,
                )
                for _ in range(set_count)
            ],
            exercise_id,
        )
        return await self.exercises.get(exercise_id)

    async def delete_exercise(self, exercise_id: int) -> None:
        """Delete an exercise and its sets."""
        await self._require_exercise_owner(exercise_id)
        await self.exercises.delete(exercise_id)

    async def add_set(self, exercise_id: int, workout_set: WorkoutSet | None = None) -> WorkoutSet:
        """Append a set to an exercise, copying the last set's values by default."""
        await self._require_exercise_owner(exercise_id)
        if workout_set is None:
            exercise = await self.exercises.get(exercise_id)
            last = exercise.sets[-1] if exercise.sets else None
            workout_set = WorkoutSet(
                reps=last.reps if last else None,
                weight=last.weight if last else None,
                distance=last.distance if last else None,
                duration=last.duration if last else None,
            )
        set_id = await self.sets.create(workout_set, exercise_id)
        return await self.sets.get(set_id)

    async def update_set(self, set_id: int, changes: dict) -> WorkoutSet:
        """Apply field changes (reps, weight, distance, duration, completed) to a set."""
        await self._require_set_owner(set_id)
        workout_set = await self.sets.get(set_id)
        for key in ("reps", "weight", "distance", "duration", "completed"):
            if key in changes:
                setattr(workout_set, key, changes[key])
        workout_set.completed = bool(workout_set.completed)
        await self.sets.update(workout_set)
        return workout_set

    async def delete_set(self, set_id: int) -> None:
        await self._require_set_owner(set_id)
        await self.sets.delete(set_id)

    async def _require_exercise_owner(self, exercise_id: int) -> None:
        user_id = self.session.require_user()
        if await self.exercises.get_owner(exercise_id) != user_id:
            raise NotFoundError(f"Exercise {exercise_id} not found")

    async def _require_set_owner(self, set_id: int) -> None:
        user_id = self.session.require_user()
        if await self.sets.get_owner(set_id) != user_id:
            raise NotFoundError(f"Set {set_id} not found")
