"""Data access layer for PRify."""

from datetime import datetime
from functools import cmp_to_key
from pathlib import Path

import aiosqlite

from ..models.library import ExerciseCategory, ExerciseTemplate
from ..models.records import MetricType, PersonalRecord
from ..models.workout import Exercise, Workout, WorkoutSet, parse_datetime
from .engine import connect, get_db_path


def _compare_sets(a: WorkoutSet, b: WorkoutSet) -> int:
    """Order sets by creation time, falling back to id."""
    if a.created_at and b.created_at and a.created_at != b.created_at:
        return -1 if a.created_at < b.created_at else 1
    return (a.id or 0) - (b.id or 0)


def sort_sets(sets: list[WorkoutSet]) -> list[WorkoutSet]:
    """Return sets in the order they were performed."""
    return sorted(sets, key=cmp_to_key(_compare_sets))


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


class WorkoutRepository:
    """Repository for workouts, loaded together with exercises and sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, workout: Workout) -> int:
        """Create a workout row (exercises are written separately)."""
        if not workout.user_id:
            raise ValueError("Workout must have a user_id")
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "INSERT INTO workouts (user_id, name, date, notes) VALUES (?, ?, ?, ?)",
                (workout.user_id, workout.name, workout.date.isoformat(), workout.notes),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, workout_id: int, user_id: str | None = None) -> Workout | None:
        """Get a workout by ID, optionally restricted to one owner."""
        async with connect(self.db_path) as db:
            if user_id is None:
                cursor = await db.execute(
                    "SELECT * FROM workouts WHERE id = ?", (workout_id,)
                )
            else:
                cursor = await db.execute(
                    "SELECT * FROM workouts WHERE id = ? AND user_id = ?",
                    (workout_id, user_id),
                )
            row = await cursor.fetchone()
            if row is None:
                return None
            workouts = await self._load_children(db, [self._row_to_workout(row)])
            return workouts[0]

    async def update(self, workout: Workout) -> None:
        """Update name, date and notes of an existing workout."""
        if workout.id is None:
            raise ValueError("Workout must have an ID to update")

        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE workouts SET name = ?, date = ?, notes = ? WHERE id = ?",
                (workout.name, workout.date.isoformat(), workout.notes, workout.id),
            )
            await db.commit()

    async def delete(self, workout_id: int) -> int:
        """Delete a workout; its exercises and sets go with it."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))
            await db.commit()
            return cursor.rowcount

    async def list_for_user(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
        offset: int = 0,
        newest_first: bool = True,
    ) -> list[Workout]:
        """List a user's workouts with exercises and sets."""
        where, params = self._date_filter(user_id, start, end)
        order = "DESC" if newest_first else "ASC"
        sql = f"SELECT * FROM workouts WHERE {where} ORDER BY date {order}, id {order}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params += [limit, offset]

        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return await self._load_children(db, [self._row_to_workout(r) for r in rows])

    async def count_for_user(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        """Count a user's workouts in an optional date range."""
        where, params = self._date_filter(user_id, start, end)
        async with connect(self.db_path) as db:
            cursor = await db.execute(f"SELECT COUNT(*) FROM workouts WHERE {where}", params)
            row = await cursor.fetchone()
            return row[0]

    def _date_filter(
        self, user_id: str, start: datetime | None, end: datetime | None
    ) -> tuple[str, list]:
        clauses = ["user_id = ?"]
        params: list = [user_id]
        if start is not None:
            clauses.append("date >= ?")
            params.append(start.isoformat())
        if end is not None:
            clauses.append("date <= ?")
            params.append(end.isoformat())
        return " AND ".join(clauses), params

    async def _load_children(
        self, db: aiosqlite.Connection, workouts: list[Workout]
    ) -> list[Workout]:
        """Attach exercises and sets to the given workouts."""
        if not workouts:
            return workouts

        by_id = {w.id: w for w in workouts}
        ids = list(by_id)
        cursor = await db.execute(
            f"SELECT * FROM exercises WHERE workout_id IN ({_placeholders(ids)}) ORDER BY id",
            ids,
        )
        exercises = [ExerciseRepository.row_to_exercise(r) for r in await cursor.fetchall()]
        for exercise in exercises:
            by_id[exercise.workout_id].exercises.append(exercise)

        if exercises:
            exercise_by_id = {e.id: e for e in exercises}
            exercise_ids = list(exercise_by_id)
            cursor = await db.execute(
                f"SELECT * FROM sets WHERE exercise_id IN ({_placeholders(exercise_ids)})",
                exercise_ids,
            )
            for row in await cursor.fetchall():
                workout_set = SetRepository.row_to_set(row)
                exercise_by_id[workout_set.exercise_id].sets.append(workout_set)
            for exercise in exercises:
                exercise.sets = sort_sets(exercise.sets)

        return workouts

    def _row_to_workout(self, row: aiosqlite.Row) -> Workout:
        """Convert a database row to a Workout (without children)."""
        return Workout(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            date=parse_datetime(row["date"]),
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
        )


class ExerciseRepository:
    """Repository for exercises within workouts."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, exercise: Exercise, workout_id: int) -> int:
        """Create an exercise row in a workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercises (workout_id, name, notes, icon_name, sample_url)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    workout_id,
                    exercise.name,
                    exercise.notes,
                    exercise.icon_name,
                    exercise.sample_url,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, exercise_id: int) -> Exercise | None:
        """Get an exercise by ID with its sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE id = ?", (exercise_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            exercise = self.row_to_exercise(row)
            cursor = await db.execute(
                "SELECT * FROM sets WHERE exercise_id = ?", (exercise_id,)
            )
            exercise.sets = sort_sets([SetRepository.row_to_set(r) for r in await cursor.fetchall()])
            return exercise

    async def get_owner(self, exercise_id: int) -> str | None:
        """Get the user id owning an exercise's workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT w.user_id FROM exercises e
                JOIN workouts w ON w.id = e.workout_id
                WHERE e.id = ?
                """,
                (exercise_id,),
            )
            row = await cursor.fetchone()
            return row["user_id"] if row else None

    async def update(self, exercise: Exercise) -> None:
        """Update an existing exercise."""
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")

        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE exercises SET name = ?, notes = ?, icon_name = ?, sample_url = ?
                WHERE id = ?
                """,
                (
                    exercise.name,
                    exercise.notes,
                    exercise.icon_name,
                    exercise.sample_url,
                    exercise.id,
                ),
            )
            await db.commit()

    async def delete(self, exercise_id: int) -> int:
        """Delete an exercise and its sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
            await db.commit()
            return cursor.rowcount

    async def delete_missing(self, workout_id: int, keep_ids: list[int]) -> int:
        """Delete exercises of a workout whose ids are not in ``keep_ids``."""
        async with connect(self.db_path) as db:
            if keep_ids:
                cursor = await db.execute(
                    f"""
                    DELETE FROM exercises
                    WHERE workout_id = ? AND id NOT IN ({_placeholders(keep_ids)})
                    """,
                    [workout_id, *keep_ids],
                )
            else:
                cursor = await db.execute(
                    "DELETE FROM exercises WHERE workout_id = ?", (workout_id,)
                )
            await db.commit()
            return cursor.rowcount

    @staticmethod
    def row_to_exercise(row: aiosqlite.Row) -> Exercise:
        """Convert a database row to an Exercise (without sets)."""
        return Exercise(
            id=row["id"],
            workout_id=row["workout_id"],
            name=row["name"],
            notes=row["notes"],
            icon_name=row["icon_name"],
            sample_url=row["sample_url"],
            created_at=parse_datetime(row["created_at"]),
        )


class SetRepository:
    """Repository for sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, workout_set: WorkoutSet, exercise_id: int) -> int:
        """Create a set for an exercise."""
        ids = await self.create_many([workout_set], exercise_id)
        return ids[0]

    async def create_many(self, sets: list[WorkoutSet], exercise_id: int) -> list[int]:
        """Create several sets for an exercise in one transaction."""
        ids = []
        async with connect(self.db_path) as db:
            for workout_set in sets:
                created_at = workout_set.created_at or datetime.now()
                cursor = await db.execute(
                    """
                    INSERT INTO sets
                    (exercise_id, reps, weight, distance, duration, completed, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        exercise_id,
                        workout_set.reps,
                        workout_set.weight,
                        workout_set.distance,
                        workout_set.duration,
                        int(workout_set.completed),
                        created_at.isoformat(),
                    ),
                )
                ids.append(cursor.lastrowid)
            await db.commit()
        return ids

    async def get(self, set_id: int) -> WorkoutSet | None:
        """Get a set by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM sets WHERE id = ?", (set_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self.row_to_set(row)

    async def get_owner(self, set_id: int) -> str | None:
        """Get the user id owning a set's workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT w.user_id FROM sets s
                JOIN exercises e ON e.id = s.exercise_id
                JOIN workouts w ON w.id = e.workout_id
                WHERE s.id = ?
                """,
                (set_id,),
            )
            row = await cursor.fetchone()
            return row["user_id"] if row else None

    async def update(self, workout_set: WorkoutSet) -> None:
        """Update an existing set."""
        if workout_set.id is None:
            raise ValueError("Set must have an ID to update")

        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE sets SET
                    reps = ?, weight = ?, distance = ?, duration = ?, completed = ?
                WHERE id = ?
                """,
                (
                    workout_set.reps,
                    workout_set.weight,
                    workout_set.distance,
                    workout_set.duration,
                    int(workout_set.completed),
                    workout_set.id,
                ),
            )
            await db.commit()

    async def delete(self, set_id: int) -> int:
        """Delete a set."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM sets WHERE id = ?", (set_id,))
            await db.commit()
            return cursor.rowcount

    async def delete_missing(self, exercise_id: int, keep_ids: list[int]) -> int:
        """Delete sets of an exercise whose ids are not in ``keep_ids``."""
        async with connect(self.db_path) as db:
            if keep_ids:
                cursor = await db.execute(
                    f"""
                    DELETE FROM sets
                    WHERE exercise_id = ? AND id NOT IN ({_placeholders(keep_ids)})
                    """,
                    [exercise_id, *keep_ids],
                )
            else:
                cursor = await db.execute(
                    "DELETE FROM sets WHERE exercise_id = ?", (exercise_id,)
                )
            await db.commit()
            return cursor.rowcount

    @staticmethod
    def row_to_set(row: aiosqlite.Row) -> WorkoutSet:
        """Convert a database row to a WorkoutSet."""
        return WorkoutSet(
            id=row["id"],
            exercise_id=row["exercise_id"],
            reps=row["reps"],
            weight=row["weight"],
            distance=row["distance"],
            duration=row["duration"],
            completed=bool(row["completed"]),
            created_at=parse_datetime(row["created_at"]),
        )


class PersonalRecordRepository:
    """Repository for personal records keyed by (user, exercise name, metric)."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(
        self, user_id: str, exercise_name: str, record_type: MetricType
    ) -> PersonalRecord | None:
        """Get the stored record for one key."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM personal_records
                WHERE user_id = ? AND exercise_name = ? AND record_type = ?
                """,
                (user_id, exercise_name, record_type.value),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def list_for_exercise(
        self, user_id: str, exercise_name: str
    ) -> list[PersonalRecord]:
        """Get every stored record of a user for one exercise."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM personal_records
                WHERE user_id = ? AND exercise_name = ?
                """,
                (user_id, exercise_name),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def upsert(self, record: PersonalRecord) -> None:
        """Insert a record or overwrite the one stored under the same key."""
        async with connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO personal_records
                (user_id, exercise_name, record_type, value, workout_id, achieved_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (user_id, exercise_name, record_type) DO UPDATE SET
                    value = excluded.value,
                    workout_id = excluded.workout_id,
                    achieved_at = excluded.achieved_at
                """,
                (
                    record.user_id,
                    record.exercise_name,
                    record.record_type.value,
                    record.value,
                    record.workout_id,
                    record.achieved_at.isoformat(),
                ),
            )
            await db.commit()

    async def list_for_user(self, user_id: str) -> list[PersonalRecord]:
        """List a user's records, most recently achieved first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM personal_records
                WHERE user_id = ?
                ORDER BY achieved_at DESC, exercise_name
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def list_for_workout(self, workout_id: int) -> list[PersonalRecord]:
        """List records that were achieved in a workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM personal_records WHERE workout_id = ? ORDER BY id",
                (workout_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    def _row_to_record(self, row: aiosqlite.Row) -> PersonalRecord:
        """Convert a database row to a PersonalRecord."""
        return PersonalRecord(
            id=row["id"],
            user_id=row["user_id"],
            exercise_name=row["exercise_name"],
            record_type=MetricType(row["record_type"]),
            value=row["value"],
            workout_id=row["workout_id"],
            achieved_at=parse_datetime(row["achieved_at"]),
            created_at=parse_datetime(row["created_at"]),
        )


class CategoryRepository:
    """Repository for exercise categories."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, category: ExerciseCategory) -> int:
        """Create a category. Raises aiosqlite.IntegrityError on a duplicate name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "INSERT INTO exercise_categories (name, user_id, is_default) VALUES (?, ?, ?)",
                (category.name, category.user_id, int(category.is_default)),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, category_id: int) -> ExerciseCategory | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def get_by_name(self, name: str) -> ExerciseCategory | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_categories WHERE name = ?", (name,)
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def list_all(self) -> list[ExerciseCategory]:
        """List all categories by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM exercise_categories ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_category(row) for row in rows]

    async def delete(self, category_id: int) -> int:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM exercise_categories WHERE id = ?", (category_id,)
            )
            await db.commit()
            return cursor.rowcount

    def _row_to_category(self, row: aiosqlite.Row) -> ExerciseCategory:
        return ExerciseCategory(
            id=row["id"],
            name=row["name"],
            user_id=row["user_id"],
            is_default=bool(row["is_default"]),
            created_at=parse_datetime(row["created_at"]),
        )


class ExerciseTemplateRepository:
    """Repository for the exercise template library."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, template: ExerciseTemplate) -> int:
        """Create a template."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercise_templates
                (name, category_id, default_sets, default_reps, default_distance,
                 default_duration, icon_name, sample_url, is_custom, user_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    template.name,
                    template.category_id,
                    template.default_sets,
                    template.default_reps,
                    template.default_distance,
                    template.default_duration,
                    template.icon_name,
                    template.sample_url,
                    int(template.is_custom),
                    template.user_id,
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, template_id: int) -> ExerciseTemplate | None:
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_templates WHERE id = ?", (template_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_template(row) if row else None

    async def get_by_name(self, name: str) -> ExerciseTemplate | None:
        """Get a template by exact name (case-insensitive)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_templates WHERE name = ? COLLATE NOCASE ORDER BY id",
                (name,),
            )
            row = await cursor.fetchone()
            return self._row_to_template(row) if row else None

    async def search(
        self, query: str = "", category_id: int | None = None
    ) -> list[ExerciseTemplate]:
        """Search templates by name, optionally within one category."""
        sql = "SELECT * FROM exercise_templates WHERE name LIKE ?"
        params: list = [f"%{query}%"]
        if category_id is not None:
            sql += " AND category_id = ?"
            params.append(category_id)
        sql += " ORDER BY name"

        async with connect(self.db_path) as db:
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_template(row) for row in rows]

    async def reassign_category(
        self, old_category_id: int, new_category_id: int, deleted_name: str
    ) -> int:
        """Move every template of a category to another one."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE exercise_templates
                SET category_id = ?, deleted_category_name = ?
                WHERE category_id = ?
                """,
                (new_category_id, deleted_name, old_category_id),
            )
            await db.commit()
            return cursor.rowcount

    def _row_to_template(self, row: aiosqlite.Row) -> ExerciseTemplate:
        return ExerciseTemplate(
            id=row["id"],
            name=row["name"],
            category_id=row["category_id"],
            default_sets=row["default_sets"],
            default_reps=row["default_reps"],
            default_distance=row["default_distance"],
            default_duration=row["default_duration"],
            icon_name=row["icon_name"],
            sample_url=row["sample_url"],
            is_custom=bool(row["is_custom"]),
            user_id=row["user_id"],
            deleted_category_name=row["deleted_category_name"],
            created_at=parse_datetime(row["created_at"]),
        )
