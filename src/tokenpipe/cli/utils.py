"""
CLI utilities shared across tokenpipe commands.
"""

from __future__ import annotations

import logging
import os
import platform

import typer

__version__ = "0.1.0"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_version() -> str:
    """Get tokenpipe version from package metadata."""
    try:
        from importlib.metadata import version

        return version("tokenpipe")
    except Exception:
        return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"tokenpipe version {get_version()}")
        typer.echo(f"  Python:    {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:  {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for a CLI run.

    ``--verbose`` forces DEBUG; otherwise LOG_LEVEL is honoured (default WARNING).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
