"""Runtime configuration for PRify.

Values come from the process environment, optionally seeded from a ``.env``
file in the working directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path.cwd() / "data"
DEFAULT_PAGE_SIZE = 10


@dataclass
class Settings:
    """Application settings."""

    data_dir: Path = DEFAULT_DATA_DIR
    user_id: str | None = None  # Default signed-in user for the CLI
    page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = "WARNING"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "prify.db"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        load_dotenv()

        data_dir = os.getenv("PRIFY_DATA_DIR")
        page_size = os.getenv("PRIFY_PAGE_SIZE")
        try:
            page_size_value = int(page_size) if page_size else DEFAULT_PAGE_SIZE
        except ValueError:
            raise ValueError(f"PRIFY_PAGE_SIZE must be an integer, got: {page_size}")
        if page_size_value < 1:
            raise ValueError("PRIFY_PAGE_SIZE must be at least 1")

        return cls(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            user_id=os.getenv("PRIFY_USER_ID") or None,
            page_size=page_size_value,
            log_level=os.getenv("PRIFY_LOG_LEVEL", "WARNING").upper(),
        )


def get_settings() -> Settings:
    """Get settings for the current process."""
    return Settings.from_env()


def configure_logging(level: str | int = "WARNING") -> None:
    """Configure root logging for CLI and server use."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
