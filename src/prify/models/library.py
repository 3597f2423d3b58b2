"""Exercise library models: categories and reusable exercise templates."""

from dataclasses import dataclass
from datetime import datetime

UNCATEGORIZED = "Uncategorized"


@dataclass
class ExerciseCategory:
    """Grouping for exercise templates."""

    name: str
    is_default: bool = False
    user_id: str | None = None  # None for built-in categories
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "is_default": self.is_default,
            "user_id": self.user_id,
        }


@dataclass
class ExerciseTemplate:
    """Reusable exercise definition used to add exercises to a workout.

    The defaults pre-fill the sets created when the template is picked.
    """

    name: str
    category_id: int | None = None
    default_sets: int | None = None
    default_reps: int | None = None
    default_distance: float | None = None
    default_duration: float | None = None
    icon_name: str | None = None
    sample_url: str | None = None
    is_custom: bool = False
    user_id: str | None = None
    deleted_category_name: str | None = None  # Set when the category was removed
    id: int | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category_id": self.category_id,
            "default_sets": self.default_sets,
            "default_reps": self.default_reps,
            "default_distance": self.default_distance,
            "default_duration": self.default_duration,
            "icon_name": self.icon_name,
            "sample_url": self.sample_url,
            "is_custom": self.is_custom,
            "user_id": self.user_id,
            "deleted_category_name": self.deleted_category_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseTemplate":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            category_id=data.get("category_id"),
            default_sets=data.get("default_sets"),
            default_reps=data.get("default_reps"),
            default_distance=data.get("default_distance"),
            default_duration=data.get("default_duration"),
            icon_name=data.get("icon_name"),
            sample_url=data.get("sample_url"),
            is_custom=bool(data.get("is_custom", False)),
            user_id=data.get("user_id"),
            deleted_category_name=data.get("deleted_category_name"),
        )


DEFAULT_CATEGORIES = ["Strength", "Cardio", "Bodyweight", UNCATEGORIZED]


# (name, category, default sets, default reps)
PREDEFINED_EXERCISES: list[tuple[str, str, int, int]] = [
    ("Squats", "Strength", 3, 8),
    ("Bench Press", "Strength", 3, 8),
    ("Incline Dumbbell Press", "Strength", 3, 10),
    ("Pullups", "Bodyweight", 3, 8),
    ("Seated Calf Raises", "Strength", 3, 15),
    ("Incline Dumbbell Curls", "Strength", 3, 12),
    ("Incline Tricep Extension", "Strength", 3, 12),
    ("TRX Inverted Rows", "Bodyweight", 3, 12),
    ("Hanging Ab Raises", "Bodyweight", 3, 12),
    ("Cable Crunches", "Strength", 3, 15),
    ("Decline Ab Raises", "Bodyweight", 3, 15),
    ("Pec Machine Seated Cable", "Strength", 3, 12),
    ("Pec Machine Seated Machine", "Strength", 3, 12),
    ("Pec Machine Standing", "Strength", 3, 12),
]
