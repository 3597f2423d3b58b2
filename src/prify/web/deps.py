"""Request-scoped helpers shared by the routers."""

from pathlib import Path

from fastapi import Request

from ..session import Session

USER_HEADER = "X-User-Id"


def get_db_path(request: Request) -> Path:
    """Get the database path configured on the app."""
    return request.app.state.db_path


def get_session(request: Request) -> Session:
    """Identify the caller from the X-User-Id header or the configured default."""
    user_id = request.headers.get(USER_HEADER) or request.app.state.settings.user_id
    return Session(user_id=user_id)


def get_page_size(request: Request) -> int:
    return request.app.state.settings.page_size
