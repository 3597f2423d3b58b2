"""Workout, exercise and set routes."""

from pathlib import Path

from fastapi import APIRouter, Body, Depends, Query

from ...models.workout import Workout, WorkoutSet
from ...services.listing import WorkoutListService
from ...services.workouts import WorkoutService
from ...session import Session
from ..deps import get_db_path, get_page_size, get_session

router = APIRouter(prefix="/workouts", tags=["workouts"])
exercise_router = APIRouter(prefix="/exercises", tags=["workouts"])
set_router = APIRouter(prefix="/sets", tags=["workouts"])


@router.get("")
async def list_workouts(
    filter: str = Query("all"),
    page: int = Query(1),
    search: str = Query(""),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
    page_size: int = Depends(get_page_size),
):
    """Paginated workout history with record badges."""
    service = WorkoutListService(session, db_path, page_size=page_size)
    result = await service.list_workouts(filter=filter, page=page, search=search)
    return result.to_dict()


@router.post("")
async def create_workout(
    payload: dict = Body(...),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Save a new workout and report any personal records it set."""
    payload.pop("id", None)
    workout = Workout.from_dict(payload)
    result = await WorkoutService(session, db_path).save_workout(workout)
    return result.to_dict()


@router.get("/{workout_id}")
async def get_workout(
    workout_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Get a workout with its records grouped by exercise."""
    service = WorkoutService(session, db_path)
    workout = await service.get_workout(workout_id)
    records = await service.records.records_for_workout(workout_id)
    return {
        "workout": workout.to_dict(),
        "records": {name: [m.value for m in types] for name, types in records.items()},
    }


@router.put("/{workout_id}")
async def update_workout(
    workout_id: int,
    payload: dict = Body(...),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Save changes to an existing workout."""
    payload["id"] = workout_id
    workout = Workout.from_dict(payload)
    result = await WorkoutService(session, db_path).save_workout(workout)
    return result.to_dict()


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Delete a workout with its exercises and sets."""
    await WorkoutService(session, db_path).delete_workout(workout_id)
    return {"status": "deleted", "id": workout_id}


@router.post("/{workout_id}/duplicate")
async def duplicate_workout(
    workout_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Copy a workout to today with all sets reset."""
    copy = await WorkoutService(session, db_path).duplicate_workout(workout_id)
    return copy.to_dict()


@router.post("/{workout_id}/exercises")
async def add_exercise(
    workout_id: int,
    template: str = Body(..., embed=True),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Add an exercise from a library template."""
    exercise = await WorkoutService(session, db_path).add_exercise_from_template(
        workout_id, template
    )
    return exercise.to_dict()


@exercise_router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Delete an exercise and its sets."""
    await WorkoutService(session, db_path).delete_exercise(exercise_id)
    return {"status": "deleted", "id": exercise_id}


@exercise_router.post("/{exercise_id}/sets")
async def add_set(
    exercise_id: int,
    payload: dict | None = Body(None),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Append a set; without a body the previous set's values are copied."""
    workout_set = WorkoutSet.from_dict(payload) if payload else None
    created = await WorkoutService(session, db_path).add_set(exercise_id, workout_set)
    return created.to_dict()


@set_router.patch("/{set_id}")
async def update_set(
    set_id: int,
    payload: dict = Body(...),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Change a set's measurements or completion."""
    updated = await WorkoutService(session, db_path).update_set(set_id, payload)
    return updated.to_dict()


@set_router.delete("/{set_id}")
async def delete_set(
    set_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Delete a set."""
    await WorkoutService(session, db_path).delete_set(set_id)
    return {"status": "deleted", "id": set_id}
