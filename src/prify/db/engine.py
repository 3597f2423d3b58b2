"""Database engine setup and initialization."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..config import get_settings

logger = logging.getLogger(__name__)


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_settings().data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "prify.db"


@asynccontextmanager
async def connect(db_path: Path):
    """Open a connection with foreign keys enforced and row access by name."""
    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        # Cascading deletes depend on this; SQLite keeps it off by default
        await db.execute("PRAGMA foreign_keys = ON")
        yield db


async def _run_migrations(db: aiosqlite.Connection) -> None:
    """Run database migrations for schema updates."""
    cursor = await db.execute("PRAGMA table_info(exercise_templates)")
    columns = await cursor.fetchall()
    template_columns = {col[1] for col in columns}

    for col, ddl in [
        ("default_duration", "REAL"),
        ("sample_url", "TEXT"),
        ("deleted_category_name", "TEXT"),
    ]:
        if col not in template_columns:
            logger.info("Adding column exercise_templates.%s", col)
            await db.execute(f"ALTER TABLE exercise_templates ADD COLUMN {col} {ddl}")

    await db.commit()


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                date TIMESTAMP NOT NULL,
                notes TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                notes TEXT,
                icon_name TEXT,
                sample_url TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS sets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                exercise_id INTEGER NOT NULL,
                reps INTEGER,
                weight REAL,
                distance REAL,
                duration REAL,
                completed INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id) ON DELETE CASCADE
            )
        """)

        # One best value per (user, exercise name, metric)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS personal_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                exercise_name TEXT NOT NULL,
                record_type TEXT NOT NULL,
                value REAL NOT NULL,
                workout_id INTEGER,
                achieved_at TIMESTAMP NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (user_id, exercise_name, record_type),
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE SET NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercise_categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                user_id TEXT,
                is_default INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercise_templates (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                category_id INTEGER,
                default_sets INTEGER,
                default_reps INTEGER,
                default_distance REAL,
                icon_name TEXT,
                is_custom INTEGER DEFAULT 0,
                user_id TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (category_id) REFERENCES exercise_categories(id)
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workouts_user_date
            ON workouts(user_id, date)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_workout
            ON exercises(workout_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_sets_exercise
            ON sets(exercise_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_personal_records_workout
            ON personal_records(workout_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercise_templates_category
            ON exercise_templates(category_id)
        """)

        await db.commit()

        # Run migrations for existing databases
        await _run_migrations(db)


async def seed_library(db_path: Path | None = None) -> int:
    """Seed default categories and predefined exercise templates.

    Returns the number of templates inserted.
    """
    from ..models.library import DEFAULT_CATEGORIES, PREDEFINED_EXERCISES

    if db_path is None:
        db_path = get_db_path()

    inserted = 0
    async with connect(db_path) as db:
        for name in DEFAULT_CATEGORIES:
            await db.execute(
                "INSERT OR IGNORE INTO exercise_categories (name, is_default) VALUES (?, 1)",
                (name,),
            )

        cursor = await db.execute("SELECT id, name FROM exercise_categories")
        category_ids = {row["name"]: row["id"] for row in await cursor.fetchall()}

        for name, category, default_sets, default_reps in PREDEFINED_EXERCISES:
            cursor = await db.execute(
                "SELECT 1 FROM exercise_templates WHERE name = ? AND is_custom = 0",
                (name,),
            )
            if await cursor.fetchone():
                continue
            await db.execute(
                """
                INSERT INTO exercise_templates
                (name, category_id, default_sets, default_reps, is_custom)
                VALUES (?, ?, ?, ?, 0)
                """,
                (name, category_ids[category], default_sets, default_reps),
            )
            inserted += 1

        await db.commit()

    logger.info("Seeded %d exercise templates", inserted)
    return inserted
