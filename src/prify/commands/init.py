"""Initialize project command."""

import click

from ..db import init_db, seed_library
from .base import async_command, echo_info, echo_success, get_settings


@click.command()
@click.pass_context
@async_command
async def init(ctx: click.Context):
    """Initialize the PRify database.

    This creates the data directory and the SQLite database with the
    required schema, default categories and exercise library.
    """
    settings = get_settings(ctx)
    echo_info(f"Initializing PRify in {settings.data_dir}")

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(settings.db_path)
    echo_success("Database initialized")

    count = await seed_library(settings.db_path)
    echo_success(f"Exercise library populated ({count} new exercises)")

    click.echo()
    click.echo("PRify is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Select yourself:  export PRIFY_USER_ID=<your name>")
    click.echo('  2. Log a workout:    prify workouts new "Push Day"')
    click.echo("  3. Check your PRs:   prify records list")
