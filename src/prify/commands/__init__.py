"""CLI commands for PRify."""

from .init import init
from .library import library
from .records import records
from .serve import serve
from .stats import stats
from .workouts import sets, workouts

__all__ = [
    "init",
    "library",
    "records",
    "serve",
    "sets",
    "stats",
    "workouts",
]
