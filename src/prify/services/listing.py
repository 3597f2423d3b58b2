"""Workout history listing: date filter, pagination, search and record badges."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..db.repositories import WorkoutRepository
from ..models.records import MetricType, format_metric
from ..models.workout import Exercise, Workout
from ..session import Session
from .periods import period_range
from .stats import stats_for_exercise

logger = logging.getLogger(__name__)

LIST_FILTERS = ("all", "today", "week", "month")


@dataclass
class GlobalRecord:
    """The workout currently holding an exercise's all-time bests."""

    workout_id: int
    date: datetime
    record_types: list[MetricType] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "workout_id": self.workout_id,
            "date": self.date.isoformat(),
            "record_types": [m.value for m in self.record_types],
        }


@dataclass
class WorkoutPage:
    """One page of the workout history."""

    workouts: list[Workout]
    page: int
    page_size: int
    total_count: int
    filter: str = "all"
    search: str = ""
    global_records: dict[str, GlobalRecord] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        return {
            "workouts": [w.to_dict() for w in self.workouts],
            "page": self.page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "filter": self.filter,
            "search": self.search,
            "global_records": {
                name: record.to_dict() for name, record in self.global_records.items()
            },
        }


def _exercise_search_strings(exercise: Exercise) -> list[str]:
    strings = [exercise.name]
    if exercise.notes:
        strings.append(exercise.notes)
    for workout_set in exercise.sets:
        for metric, value in (
            (MetricType.REPS, workout_set.reps),
            (MetricType.WEIGHT, workout_set.weight),
            (MetricType.DISTANCE, workout_set.distance),
            (MetricType.DURATION, workout_set.duration),
        ):
            if value is not None:
                strings.append(format_metric(metric, value))
    for metric, value in stats_for_exercise(exercise).items():
        if value is not None:
            strings.append(format_metric(metric, value))
    return strings


def matches_search(workout: Workout, term: str) -> bool:
    """Case-insensitive match on names, notes and formatted measurements.

    Measurements are matched in their display form (``"5 reps"``,
    ``"105 lbs"``, ``"3.1 mi"``, ``"30 min"``), both per set and for the
    exercise totals.
    """
    term = term.lower()
    if term in workout.name.lower():
        return True
    if workout.notes and term in workout.notes.lower():
        return True
    return any(
        term in text.lower()
        for exercise in workout.exercises
        for text in _exercise_search_strings(exercise)
    )


def sort_for_display(workout: Workout) -> Workout:
    """Order exercises alphabetically; sets keep their performed order."""
    workout.exercises.sort(key=lambda e: e.name.casefold())
    return workout


def compute_global_records(workouts: list[Workout]) -> dict[str, GlobalRecord]:
    """Find, per exercise name, the newest workout holding any all-time best.

    Workouts are scanned newest first, so among equal values the newest
    workout keeps the record. The returned entry lists every metric that
    workout holds for the exercise.
    """
    ordered = sorted(workouts, key=lambda w: w.date, reverse=True)

    # exercise name -> metric -> (value, workout)
    holders: dict[str, dict[MetricType, tuple[float, Workout]]] = {}
    for workout in ordered:
        for exercise in workout.exercises:
            best = holders.setdefault(exercise.name, {})
            stats = stats_for_exercise(exercise)
            for metric, value in stats.items():
                if value is None:
                    continue
                held = best.get(metric)
                if held is None or value > held[0]:
                    best[metric] = (value, workout)

    records: dict[str, GlobalRecord] = {}
    for name, best in holders.items():
        if not best:
            continue
        newest = max((w for _, w in best.values()), key=lambda w: w.date)
        records[name] = GlobalRecord(
            workout_id=newest.id,
            date=newest.date,
            record_types=[m for m in MetricType if m in best and best[m][1] is newest],
        )
    return records


class WorkoutListService:
    """Builds pages of a user's workout history."""

    def __init__(self, session: Session, db_path: Path | None = None, page_size: int = 10):
        self.session = session
        self.page_size = page_size
        self.workouts = WorkoutRepository(db_path)

    async def list_workouts(
        self,
        filter: str = "all",
        page: int = 1,
        search: str = "",
        now: datetime | None = None,
    ) -> WorkoutPage:
        """Get one page of workouts, newest first.

        Args:
            filter: One of ``all``, ``today``, ``week``, ``month``
            page: 1-based page number
            search: Optional term matched against the page's workouts
            now: Reference time for the date filter (default: now)

        Returns:
            The page, with record badges computed over all workouts
        """
        if filter not in LIST_FILTERS:
            raise ValueError(f"Unknown filter '{filter}'. Expected one of: {', '.join(LIST_FILTERS)}")
        if page < 1:
            raise ValueError("Page must be 1 or greater")

        user_id = self.session.require_user()
        start = end = None
        if filter != "all":
            start, end = period_range(filter, now)

        offset = (page - 1) * self.page_size
        workouts = await self.workouts.list_for_user(
            user_id, start=start, end=end, limit=self.page_size, offset=offset
        )
        total = await self.workouts.count_for_user(user_id, start=start, end=end)

        # Record badges always consider the full, unfiltered history
        all_workouts = await self.workouts.list_for_user(user_id)
        global_records = compute_global_records(all_workouts)
        logger.debug(
            "Computed record holders for %d exercises from %d workouts",
            len(global_records),
            len(all_workouts),
        )

        workouts = [sort_for_display(w) for w in workouts]
        if search:
            workouts = [w for w in workouts if matches_search(w, search)]

        return WorkoutPage(
            workouts=workouts,
            page=page,
            page_size=self.page_size,
            total_count=total,
            filter=filter,
            search=search,
            global_records=global_records,
        )
