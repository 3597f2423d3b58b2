"""Pytest configuration and fixtures."""

import pytest
import tempfile
from datetime import datetime
from pathlib import Path

from prify.config import Settings
from prify.db import init_db, seed_library
from prify.models.workout import Exercise, Workout, WorkoutSet
from prify.session import Session


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def db_path(temp_db_path):
    """A database with the schema and the default exercise library."""
    await init_db(temp_db_path)
    await seed_library(temp_db_path)
    return temp_db_path


@pytest.fixture
def settings(temp_db_path):
    """Settings pointing at the temporary database directory."""
    return Settings(data_dir=temp_db_path.parent, user_id="alice")


@pytest.fixture
def session():
    """A session signed in as alice."""
    return Session(user_id="alice")


@pytest.fixture
def signed_out():
    """A session with nobody signed in."""
    return Session()


def make_set(reps=None, weight=None, distance=None, duration=None, completed=True):
    return WorkoutSet(
        reps=reps, weight=weight, distance=distance, duration=duration, completed=completed
    )


@pytest.fixture
def bench_workout():
    """Three completed bench press sets: 15 reps total, 105 lbs best."""
    return Workout(
        name="Push Day",
        date=datetime(2024, 3, 12, 18, 30),
        notes="Felt strong",
        exercises=[
            Exercise(
                name="Bench Press",
                sets=[
                    make_set(reps=5, weight=100),
                    make_set(reps=5, weight=105),
                    make_set(reps=5, weight=95),
                ],
            ),
        ],
    )


@pytest.fixture
def cardio_workout():
    """A run plus a mostly incomplete squat session."""
    return Workout(
        name="Run and Legs",
        date=datetime(2024, 3, 14, 7, 0),
        exercises=[
            Exercise(
                name="Running",
                sets=[make_set(distance=3.1, duration=30)],
            ),
            Exercise(
                name="Squats",
                sets=[
                    make_set(reps=8, weight=225),
                    make_set(reps=8, weight=245, completed=False),
                ],
            ),
        ],
    )
