"""Workout, exercise and set models."""

from dataclasses import dataclass, field
from datetime import datetime


def parse_datetime(value) -> datetime | None:
    """Parse an ISO timestamp (or pass a datetime through) as naive local time."""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is not None:
        # Stored dates are naive local time
        value = value.astimezone().replace(tzinfo=None)
    return value


def format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class WorkoutSet:
    """One performed set of an exercise.

    Every measurement is optional; an exercise may track any mix of reps,
    weight (lbs), distance (mi) and duration (min).
    """

    reps: int | None = None
    weight: float | None = None
    distance: float | None = None
    duration: float | None = None
    completed: bool = False
    exercise_id: int | None = None
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "reps": self.reps,
            "weight": self.weight,
            "distance": self.distance,
            "duration": self.duration,
            "completed": self.completed,
            "created_at": format_datetime(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSet":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            exercise_id=data.get("exercise_id"),
            reps=data.get("reps"),
            weight=data.get("weight"),
            distance=data.get("distance"),
            duration=data.get("duration"),
            completed=bool(data.get("completed", False)),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass
class Exercise:
    """A named movement within a workout, owning its sets in order."""

    name: str
    sets: list[WorkoutSet] = field(default_factory=list)
    notes: str | None = None
    icon_name: str | None = None
    sample_url: str | None = None  # Demonstration link
    workout_id: int | None = None
    id: int | None = None
    created_at: datetime | None = None

    @property
    def completed_sets(self) -> list[WorkoutSet]:
        return [s for s in self.sets if s.completed]

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "name": self.name,
            "notes": self.notes,
            "icon_name": self.icon_name,
            "sample_url": self.sample_url,
            "created_at": format_datetime(self.created_at),
            "sets": [s.to_dict() for s in self.sets],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary."""
        if not data.get("name"):
            raise ValueError("Exercise requires a name")
        return cls(
            id=data.get("id"),
            workout_id=data.get("workout_id"),
            name=data["name"],
            notes=data.get("notes"),
            icon_name=data.get("icon_name"),
            sample_url=data.get("sample_url"),
            created_at=parse_datetime(data.get("created_at")),
            sets=[WorkoutSet.from_dict(s) for s in data.get("sets", [])],
        )


@dataclass
class Workout:
    """A dated training session owned by one user."""

    name: str
    date: datetime
    exercises: list[Exercise] = field(default_factory=list)
    notes: str | None = None
    user_id: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    @property
    def completed_set_count(self) -> int:
        return sum(len(e.completed_sets) for e in self.exercises)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "created_at": format_datetime(self.created_at),
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        """Create from dictionary."""
        if not data.get("name"):
            raise ValueError("Workout requires a name")
        date = parse_datetime(data.get("date"))
        if date is None:
            raise ValueError("Workout requires a date")
        return cls(
            id=data.get("id"),
            user_id=data.get("user_id"),
            name=data["name"],
            date=date,
            notes=data.get("notes"),
            created_at=parse_datetime(data.get("created_at")),
            exercises=[Exercise.from_dict(e) for e in data.get("exercises", [])],
        )

    def get_summary(self) -> str:
        """Generate a short human-readable summary."""
        summary = f"{self.name} ({self.date.strftime('%Y-%m-%d %H:%M')})\n"
        if self.notes:
            summary += f"Notes: {self.notes}\n"
        for exercise in self.exercises:
            done = len(exercise.completed_sets)
            summary += f"  - {exercise.name}: {done}/{len(exercise.sets)} sets completed\n"
        return summary
