"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..config import Settings
from ..models.records import format_number
from ..session import Session


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_settings(ctx: click.Context) -> Settings:
    """Get the settings loaded by the root command."""
    return ctx.obj["settings"]


def get_db_path(ctx: click.Context) -> Path:
    return get_settings(ctx).db_path


def get_session(ctx: click.Context) -> Session:
    """Get the session for the user selected with --user or PRIFY_USER_ID."""
    return ctx.obj["session"]


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path(ctx)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'prify init' first."
        )
        ctx.exit(1)


def ensure_user(ctx: click.Context) -> str:
    """Ensure a user is selected and return its id."""
    user_id = get_session(ctx).get_user()
    if user_id is None:
        echo_error("No user selected. Pass --user or set PRIFY_USER_ID.")
        ctx.exit(1)
    return user_id


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def fmt(value) -> str:
    """Format an optional measurement for a table cell."""
    return "-" if value is None else format_number(value)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)),
        "".join("-" * w + " " * padding for w in widths),
    ]
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
