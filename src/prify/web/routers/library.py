"""Exercise library routes."""

from pathlib import Path

from fastapi import APIRouter, Body, Depends, Query

from ...models.library import ExerciseTemplate
from ...services.library import LibraryService
from ...session import Session
from ..deps import get_db_path, get_session

router = APIRouter(prefix="/library", tags=["library"])


@router.get("/categories")
async def list_categories(
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    categories = await LibraryService(session, db_path).list_categories()
    return [c.to_dict() for c in categories]


@router.post("/categories")
async def create_category(
    name: str = Body(..., embed=True),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Create a category; names are unique."""
    category = await LibraryService(session, db_path).create_category(name)
    return category.to_dict()


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Delete a category; its templates move to Uncategorized."""
    moved = await LibraryService(session, db_path).delete_category(category_id)
    return {"status": "deleted", "id": category_id, "templates_moved": moved}


@router.get("/templates")
async def search_templates(
    q: str = Query(""),
    category_id: int | None = Query(None),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    templates = await LibraryService(session, db_path).search_templates(q, category_id)
    return [t.to_dict() for t in templates]


@router.post("/templates")
async def create_template(
    payload: dict = Body(...),
    session: Session = Depends(get_session),
    db_path: Path = Depends(get_db_path),
):
    """Create a custom exercise template."""
    template = await LibraryService(session, db_path).create_template(
        ExerciseTemplate.from_dict(payload)
    )
    return template.to_dict()
