"""Database layer for PRify."""

from .engine import connect, get_db_path, init_db, seed_library
from .repositories import (
    CategoryRepository,
    ExerciseRepository,
    ExerciseTemplateRepository,
    PersonalRecordRepository,
    SetRepository,
    WorkoutRepository,
)

__all__ = [
    "CategoryRepository",
    "connect",
    "ExerciseRepository",
    "ExerciseTemplateRepository",
    "get_db_path",
    "init_db",
    "PersonalRecordRepository",
    "seed_library",
    "SetRepository",
    "WorkoutRepository",
]
