"""Web server command."""

import click

from .base import ensure_initialized, get_settings


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Start the JSON API server.

    Requests identify the user with the X-User-Id header; PRIFY_USER_ID is
    used when the header is missing.

    Examples:

        # Start on default port (8000)
        prify serve

        # Expose to network (all interfaces)
        prify serve --host 0.0.0.0

        # Development mode with auto-reload
        prify serve --reload
    """
    ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting PRify API server...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo(f"  Docs:    http://{host}:{port}/docs")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    settings = get_settings(ctx)
    uvicorn.run(
        create_app(settings) if not reload else "prify.web:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level=settings.log_level.lower(),
    )
