"""fieldguide CLI module."""

from .main import cli_main, main

__all__ = ["cli_main", "main"]
