"""Web interface for PRify."""

from .app import create_app

__all__ = ["create_app"]
