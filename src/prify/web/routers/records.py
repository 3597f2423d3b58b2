"""Personal record routes."""

from pathlib import Path

from fastapi import APIRouter, Body, Depends

from ...models.records import ExerciseStats
from ...services.records import PersonalRecordService
from ...session import Session
from ..deps import get_db_path, get_session

router = APIRouter(prefix="/records", tags=["records"])


@router.get("")
async def list_records(
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """All personal records of the signed-in user, newest first."""
    records = await PersonalRecordService(session, db_path).user_records()
    return [r.to_dict() for r in records]


@router.get("/workout/{workout_id}")
async def workout_records(
    workout_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Record types achieved in a workout, by exercise name."""
    record_map = await PersonalRecordService(session, db_path).records_for_workout(workout_id)
    return {name: [m.value for m in types] for name, types in record_map.items()}


@router.post("/matching")
async def matching_records(
    exercise_name: str = Body(...),
    stats: dict = Body(...),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Metrics of ``stats`` that equal a stored record (trophy badges).

    Never fails on storage problems; the answer is then an empty list.
    """
    service = PersonalRecordService(session, db_path)
    matches = await service.matching_records(exercise_name, ExerciseStats.from_dict(stats))
    return {"exercise_name": exercise_name, "record_types": [m.value for m in matches]}
