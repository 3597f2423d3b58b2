"""Exercise library: categories and templates."""

import logging
from pathlib import Path

import aiosqlite

from ..db.repositories import CategoryRepository, ExerciseTemplateRepository
from ..exceptions import DuplicateError, NotFoundError, PrifyError
from ..models.library import UNCATEGORIZED, ExerciseCategory, ExerciseTemplate
from ..session import Session

logger = logging.getLogger(__name__)


class LibraryService:
    """Manages exercise categories and templates."""

    def __init__(self, session: Session, db_path: Path | None = None):
        self.session = session
        self.categories = CategoryRepository(db_path)
        self.templates = ExerciseTemplateRepository(db_path)

    async def list_categories(self) -> list[ExerciseCategory]:
        return await self.categories.list_all()

    async def create_category(self, name: str) -> ExerciseCategory:
        """Create a category with a unique, non-blank name."""
        name = name.strip()
        if not name:
            raise ValueError("Please enter a category name")

        category = ExerciseCategory(name=name, user_id=self.session.require_user())
        try:
            category.id = await self.categories.create(category)
        except aiosqlite.IntegrityError:
            raise DuplicateError(f"A category named '{name}' already exists")
        return category

    async def delete_category(self, category_id: int) -> int:
        """Delete a category, moving its templates to Uncategorized.

        The moved templates remember the removed category's name. Returns
        the number of templates moved.
        """
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        if category.is_default:
            raise PrifyError(f"Default category '{category.name}' cannot be deleted")

        fallback = await self._uncategorized()
        moved = await self.templates.reassign_category(category.id, fallback.id, category.name)
        await self.categories.delete(category.id)
        logger.info(
            "Deleted category %s; moved %d templates to %s", category.name, moved, UNCATEGORIZED
        )
        return moved

    async def _uncategorized(self) -> ExerciseCategory:
        fallback = await self.categories.get_by_name(UNCATEGORIZED)
        if fallback is None:
            fallback = ExerciseCategory(name=UNCATEGORIZED, is_default=True)
            fallback.id = await self.categories.create(fallback)
        return fallback

    async def search_templates(
        self, query: str = "", category_id: int | None = None
    ) -> list[ExerciseTemplate]:
        return await self.templates.search(query, category_id)

    async def create_template(self, template: ExerciseTemplate) -> ExerciseTemplate:
        """Create a custom template owned by the current user."""
        if not template.name.strip():
            raise ValueError("Please enter a name")
        if template.category_id is None:
            raise ValueError("Please select a category")
        if await self.categories.get(template.category_id) is None:
            raise NotFoundError(f"Category {template.category_id} not found")

        template.name = template.name.strip()
        template.user_id = self.session.require_user()
        template.is_custom = True
        template.id = await self.templates.create(template)
        return template
