"""Workout logging commands."""

import json
from datetime import datetime

import click

from ..exceptions import PrifyError, RecordSyncError
from ..models.records import format_metric
from ..models.workout import Workout, WorkoutSet
from ..services.listing import LIST_FILTERS, WorkoutListService
from ..services.records import PersonalRecordService
from ..services.stats import compute_exercise_stats
from ..services.workouts import SaveResult, WorkoutService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    ensure_user,
    fmt,
    format_table,
    get_db_path,
    get_session,
    get_settings,
)


def _service(ctx: click.Context) -> WorkoutService:
    return WorkoutService(get_session(ctx), get_db_path(ctx))


def _report_save(result: SaveResult) -> None:
    echo_success(f"Saved workout {result.workout.id}: {result.workout.name}")
    for record in result.new_records:
        types = ", ".join(m.value for m in record.record_types)
        click.echo(click.style("  New PR! ", fg="yellow", bold=True) + f"{record.exercise_name} ({types})")


async def _save(ctx: click.Context, workout: Workout) -> None:
    try:
        result = await _service(ctx).save_workout(workout)
    except RecordSyncError as e:
        echo_error(f"Workout saved, but personal records could not be updated: {e.cause}")
        ctx.exit(1)
    except (PrifyError, ValueError) as e:
        echo_error(str(e))
        ctx.exit(1)
    _report_save(result)


@click.group()
def workouts():
    """Log and browse workouts."""
    pass


@workouts.command("list")
@click.option("--filter", "filter_", type=click.Choice(LIST_FILTERS), default="all", help="Date range")
@click.option("--page", "-p", type=int, default=1, help="Page number")
@click.option("--search", "-s", default="", help="Search names, notes and values (e.g. '105 lbs')")
@click.pass_context
@async_command
async def list_workouts(ctx: click.Context, filter_: str, page: int, search: str):
    """List workouts, newest first."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = WorkoutListService(
        get_session(ctx), get_db_path(ctx), page_size=get_settings(ctx).page_size
    )
    try:
        result = await service.list_workouts(filter=filter_, page=page, search=search)
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)

    if not result.workouts:
        if search:
            echo_info("No workouts match your search term.")
        else:
            echo_info("No workouts found. Log one with 'prify workouts new'.")
        return

    rows = []
    for workout in result.workouts:
        trophies = sorted(
            name
            for name, record in result.global_records.items()
            if record.workout_id == workout.id
        )
        rows.append([
            str(workout.id),
            workout.date.strftime("%Y-%m-%d"),
            workout.name[:30],
            str(len(workout.exercises)),
            f"{workout.completed_set_count}/{workout.total_sets}",
            ", ".join(trophies) or "-",
        ])

    click.echo()
    click.echo(format_table(["ID", "Date", "Name", "Exercises", "Sets", "PRs"], rows))
    if result.total_pages > 1:
        click.echo()
        click.echo(f"Page {result.page} of {result.total_pages} ({result.total_count} workouts)")


@workouts.command("show")
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def show(ctx: click.Context, workout_id: int):
    """Show a workout with its sets and records."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = _service(ctx)
    try:
        workout = await service.get_workout(workout_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)

    record_service = PersonalRecordService(get_session(ctx), get_db_path(ctx))

    click.echo()
    click.echo(click.style(workout.name, bold=True) + f"  {workout.date.strftime('%Y-%m-%d %H:%M')}")
    if workout.notes:
        click.echo(workout.notes)

    for exercise in workout.exercises:
        stats = compute_exercise_stats(exercise.sets)
        trophies = await record_service.matching_records(exercise.name, stats)

        click.echo()
        title = f"{exercise.name} (exercise {exercise.id})"
        if trophies:
            title += click.style("  PR: " + ", ".join(m.value for m in trophies), fg="yellow")
        click.echo(click.style(title, bold=True))
        if exercise.notes:
            click.echo(f"  {exercise.notes}")

        rows = [
            [
                str(s.id),
                fmt(s.reps),
                fmt(s.weight),
                fmt(s.distance),
                fmt(s.duration),
                "yes" if s.completed else "no",
            ]
            for s in exercise.sets
        ]
        if rows:
            table = format_table(["Set", "Reps", "Weight", "Distance", "Duration", "Done"], rows)
            click.echo("\n".join("  " + line for line in table.splitlines()))

        totals = [format_metric(m, v) for m, v in stats.items() if v is not None]
        if totals:
            click.echo("  Totals: " + ", ".join(totals))


@workouts.command("new")
@click.argument("name")
@click.option("--date", "date_", type=click.DateTime(), default=None, help="Workout date (default: now)")
@click.option("--notes", default=None, help="Optional notes")
@click.pass_context
@async_command
async def new(ctx: click.Context, name: str, date_: datetime | None, notes: str | None):
    """Create an empty workout."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    await _save(ctx, Workout(name=name, date=date_ or datetime.now(), notes=notes))


@workouts.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@async_command
async def import_workout(ctx: click.Context, path: str):
    """Save a complete workout from a JSON file.

    The file holds a workout object with "name", "date", optional "notes"
    and "exercises", each with "name" and a list of "sets".
    """
    ensure_initialized(ctx)
    ensure_user(ctx)

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            echo_error(f"Invalid JSON: {e}")
            ctx.exit(1)

    data.pop("id", None)
    try:
        workout = Workout.from_dict(data)
    except (KeyError, ValueError) as e:
        echo_error(f"Invalid workout: {e}")
        ctx.exit(1)

    await _save(ctx, workout)


@workouts.command("finish")
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def finish(ctx: click.Context, workout_id: int):
    """Save a workout and check it for personal records."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        workout = await _service(ctx).get_workout(workout_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)

    if workout.completed_set_count == 0:
        echo_warning("No completed sets yet; nothing to check for records.")
    await _save(ctx, workout)


@workouts.command("delete")
@click.argument("workout_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx: click.Context, workout_id: int, yes: bool):
    """Delete a workout with its exercises and sets."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    if not yes and not click.confirm("Are you sure you want to delete this workout?"):
        return

    try:
        await _service(ctx).delete_workout(workout_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Deleted workout {workout_id}")


@workouts.command("duplicate")
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def duplicate(ctx: click.Context, workout_id: int):
    """Copy a workout to today with every set marked not done."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        copy = await _service(ctx).duplicate_workout(workout_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Created workout {copy.id}: {copy.name}")


@workouts.command("add-exercise")
@click.argument("workout_id", type=int)
@click.argument("template")
@click.pass_context
@async_command
async def add_exercise(ctx: click.Context, workout_id: int, template: str):
    """Add an exercise from the library by name."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        exercise = await _service(ctx).add_exercise_from_template(workout_id, template)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Added {exercise.name} (exercise {exercise.id}) with {len(exercise.sets)} sets")


@workouts.command("remove-exercise")
@click.argument("exercise_id", type=int)
@click.pass_context
@async_command
async def remove_exercise(ctx: click.Context, exercise_id: int):
    """Delete an exercise and its sets."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        await _service(ctx).delete_exercise(exercise_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Deleted exercise {exercise_id}")


@click.group()
def sets():
    """Add, edit and complete sets."""
    pass


@sets.command("add")
@click.argument("exercise_id", type=int)
@click.option("--reps", type=int, default=None)
@click.option("--weight", type=float, default=None, help="Weight in lbs")
@click.option("--distance", type=float, default=None, help="Distance in miles")
@click.option("--duration", type=float, default=None, help="Duration in minutes")
@click.option("--done", is_flag=True, help="Mark the set completed")
@click.pass_context
@async_command
async def add_set(ctx: click.Context, exercise_id: int, reps, weight, distance, duration, done):
    """Add a set to an exercise (copies the previous set when no values are given)."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    workout_set = None
    if any(v is not None for v in (reps, weight, distance, duration)) or done:
        workout_set = WorkoutSet(
            reps=reps, weight=weight, distance=distance, duration=duration, completed=done
        )
    try:
        created = await _service(ctx).add_set(exercise_id, workout_set)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Added set {created.id}")


@sets.command("update")
@click.argument("set_id", type=int)
@click.option("--reps", type=int, default=None)
@click.option("--weight", type=float, default=None, help="Weight in lbs")
@click.option("--distance", type=float, default=None, help="Distance in miles")
@click.option("--duration", type=float, default=None, help="Duration in minutes")
@click.option("--done/--not-done", default=None, help="Completion state")
@click.pass_context
@async_command
async def update_set(ctx: click.Context, set_id: int, reps, weight, distance, duration, done):
    """Change a set's values."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    changes = {
        key: value
        for key, value in (
            ("reps", reps),
            ("weight", weight),
            ("distance", distance),
            ("duration", duration),
            ("completed", done),
        )
        if value is not None
    }
    if not changes:
        echo_warning("Nothing to change.")
        return

    try:
        await _service(ctx).update_set(set_id, changes)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Updated set {set_id}")


@sets.command("complete")
@click.argument("set_ids", type=int, nargs=-1, required=True)
@click.pass_context
@async_command
async def complete(ctx: click.Context, set_ids: tuple[int, ...]):
    """Mark sets as completed."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = _service(ctx)
    for set_id in set_ids:
        try:
            await service.update_set(set_id, {"completed": True})
        except PrifyError as e:
            echo_error(str(e))
            ctx.exit(1)
    echo_success(f"Completed {len(set_ids)} set(s)")


@sets.command("delete")
@click.argument("set_id", type=int)
@click.pass_context
@async_command
async def delete_set(ctx: click.Context, set_id: int):
    """Delete a set."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    try:
        await _service(ctx).delete_set(set_id)
    except PrifyError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Deleted set {set_id}")
