"""Exercise library commands."""

import click

from ..exceptions import PrifyError
from ..models.library import ExerciseTemplate
from ..services.library import LibraryService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    ensure_user,
    fmt,
    format_table,
    get_db_path,
    get_session,
)


def _service(ctx: click.Context) -> LibraryService:
    return LibraryService(get_session(ctx), get_db_path(ctx))


@click.group()
def library():
    """Manage exercise categories and templates."""
    pass


@library.command("categories")
@click.pass_context
@async_command
async def categories(ctx: click.Context):
    """List exercise categories."""
    ensure_initialized(ctx)

    rows = [
        [str(c.id), c.name, "yes" if c.is_default else "no"]
        for c in await _service(ctx).list_categories()
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Default"], rows))


@library.command("add-category")
@click.argument("name")
@click.pass_context
@async_command
async def add_category(ctx: click.Context, name: str):
    """Create a category."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        category = await _service(ctx).create_category(name)
    except (PrifyError, ValueError) as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Created category {category.id}: {category.name}")


@library.command("delete-category")
@click.argument("category_id", type=int)
@click.pass_context
@async_command
async def delete_category(ctx: click.Context, category_id: int):
    """Delete a category; its exercises move to Uncategorized."""
    ensure_initialized(ctx)

    try:
        moved = await _service(ctx).delete_category(category_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Deleted category {category_id} ({moved} exercises moved)")


@library.command("list")
@click.option("--search", "-s", default="", help="Filter by name")
@click.option("--category", "-c", "category_id", type=int, default=None, help="Category ID")
@click.pass_context
@async_command
async def list_templates(ctx: click.Context, search: str, category_id: int | None):
    """List exercises in the library."""
    ensure_initialized(ctx)

    templates = await _service(ctx).search_templates(search, category_id)
    if not templates:
        echo_info("No exercises found.")
        return

    rows = []
    for t in templates:
        name = t.name
        if t.deleted_category_name:
            name += f" (was {t.deleted_category_name})"
        rows.append([str(t.id), name, fmt(t.default_sets), fmt(t.default_reps), "yes" if t.is_custom else "no"])
    click.echo()
    click.echo(format_table(["ID", "Name", "Sets", "Reps", "Custom"], rows))


@library.command("add")
@click.argument("name")
@click.option("--category", "-c", "category_id", type=int, required=True, help="Category ID")
@click.option("--sets", "default_sets", type=int, default=None, help="Default number of sets")
@click.option("--reps", "default_reps", type=int, default=None, help="Default reps per set")
@click.option("--distance", "default_distance", type=float, default=None, help="Default distance")
@click.option("--duration", "default_duration", type=float, default=None, help="Default duration")
@click.option("--url", "sample_url", default=None, help="Demonstration video URL")
@click.pass_context
@async_command
async def add_template(
    ctx: click.Context,
    name: str,
    category_id: int,
    default_sets: int | None,
    default_reps: int | None,
    default_distance: float | None,
    default_duration: float | None,
    sample_url: str | None,
):
    """Add a custom exercise to the library."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    template = ExerciseTemplate(
        name=name,
        category_id=category_id,
        default_sets=default_sets,
        default_reps=default_reps,
        default_distance=default_distance,
        default_duration=default_duration,
        sample_url=sample_url,
    )
    try:
        template = await _service(ctx).create_template(template)
    except (PrifyError, ValueError) as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Added exercise {template.id}: {template.name}")
