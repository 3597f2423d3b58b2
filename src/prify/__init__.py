"""PRify: workout logging and personal record tracking."""

__version__ = "0.1.0"
