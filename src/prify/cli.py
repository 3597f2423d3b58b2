"""CLI entry point for PRify."""

import click

from . import __version__
from .commands import init, library, records, serve, sets, stats, workouts
from .config import Settings, configure_logging
from .session import Session


@click.group()
@click.version_option(version=__version__, prog_name="prify")
@click.option("--user", "-u", default=None, help="User to act as (default: PRIFY_USER_ID)")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def main(ctx: click.Context, user: str | None, verbose: bool):
    """PRify: workout logging with personal record tracking.

    Log workouts made of exercises and sets. When a workout is saved, every
    exercise's completed sets are checked against your personal records.

    Example usage:

        # Initialize the database and exercise library
        prify init

        # Log a workout and add an exercise from the library
        prify --user alice workouts new "Leg Day"
        prify --user alice workouts add-exercise 1 Squats

        # Complete sets, then save and check for records
        prify --user alice sets update 1 --reps 8 --weight 225 --done
        prify --user alice workouts finish 1

        # Review progress
        prify --user alice records list
        prify --user alice stats --period month --metric weight
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))

    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["session"] = Session(user_id=user or settings.user_id)


# Register commands
main.add_command(init)
main.add_command(workouts)
main.add_command(sets)
main.add_command(records)
main.add_command(stats)
main.add_command(library)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
