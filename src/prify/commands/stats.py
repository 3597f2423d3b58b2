"""Training statistics command."""

import click

from ..models.records import format_metric
from ..services.periods import PERIODS
from ..services.statistics import CHART_METRICS, StatisticsService
from .base import (
    async_command,
    echo_error,
    echo_info,
    ensure_initialized,
    ensure_user,
    format_table,
    get_db_path,
    get_session,
)


@click.command()
@click.option("--period", type=click.Choice(PERIODS), default="week", help="Time period")
@click.option(
    "--metric",
    type=click.Choice([m.value for m in CHART_METRICS]),
    default="reps",
    help="Metric to chart",
)
@click.pass_context
@async_command
async def stats(ctx: click.Context, period: str, metric: str):
    """Show workout totals and per-exercise progress for a period."""
    ensure_initialized(ctx)
    ensure_user(ctx)

    service = StatisticsService(get_session(ctx), get_db_path(ctx))
    try:
        result = await service.compute(period=period, metric=metric)
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)

    click.echo()
    click.echo(
        click.style(f"Statistics for this {period}", bold=True)
        + f"  ({result.start:%Y-%m-%d} to {result.end:%Y-%m-%d})"
    )
    click.echo(f"  Workouts:        {result.total_workouts}")
    click.echo(f"  Exercises:       {result.total_exercises}")
    click.echo(f"  Completion rate: {result.completion_rate}%")

    if not result.series:
        click.echo()
        echo_info(f"No {metric} data for this {period}.")
        return

    rows = []
    for series in result.series:
        values = [value for _, value in series.points if value > 0]
        best = max(values)
        rows.append([
            series.name,
            str(len(values)),
            format_metric(result.metric, best),
        ])
    click.echo()
    click.echo(format_table(["Exercise", "Days", "Best day"], rows))
