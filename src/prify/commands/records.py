"""Personal record commands."""

import click

from ..models.records import format_metric
from ..services.records import PersonalRecordService
from .base import (
    async_command,
    echo_info,
    ensure_initialized,
    ensure_user,
    format_table,
    get_db_path,
    get_session,
)


@click.group()
def records():
    """View personal records."""
    pass


@records.command("list")
@click.option("--exercise", "-e", default=None, help="Only show records for this exercise")
@click.pass_context
@async_command
async def list_records(ctx: click.Context, exercise: str | None):
    """List your personal records, most recent first."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = PersonalRecordService(get_session(ctx), get_db_path(ctx))
    user_records = await service.user_records()
    if exercise:
        user_records = [r for r in user_records if r.exercise_name == exercise]

    if not user_records:
        echo_info("No personal records yet. Complete some sets and finish a workout.")
        return

    rows = [
        [
            r.exercise_name,
            r.record_type.value,
            format_metric(r.record_type, r.value),
            r.achieved_at.strftime("%Y-%m-%d"),
            str(r.workout_id) if r.workout_id is not None else "-",
        ]
        for r in user_records
    ]
    click.echo()
    click.echo(format_table(["Exercise", "Type", "Value", "Achieved", "Workout"], rows))


@records.command("workout")
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def workout_records(ctx: click.Context, workout_id: int):
    """Show the records set in a workout."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = PersonalRecordService(get_session(ctx), get_db_path(ctx))
    record_map = await service.records_for_workout(workout_id)
    if not record_map:
        echo_info(f"Workout {workout_id} holds no personal records.")
        return

    for name in sorted(record_map):
        types = ", ".join(m.value for m in record_map[name])
        click.echo(f"{name}: {types}")
