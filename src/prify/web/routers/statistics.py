"""Statistics routes."""

from pathlib import Path

from fastapi import APIRouter, Depends, Query

from ...services.statistics import StatisticsService
from ...session import Session
from ..deps import get_db_path, get_session

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("")
async def get_statistics(
    period: str = Query("week"),
    metric: str = Query("reps"),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Per-exercise daily series and totals for a period."""
    stats = await StatisticsService(session, db_path).compute(period=period, metric=metric)
    return stats.to_dict()
