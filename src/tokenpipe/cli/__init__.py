"""
tokenpipe CLI package.

- build.py: build, validate and stats commands
- common.py: configuration loading shared by commands
- utils.py: version and logging helpers

The command-line shell is thin: every command delegates to
tokenpipe.build_css or tokenpipe.core.
"""

from __future__ import annotations

import sys

import typer

from tokenpipe.cli.build import build_command, stats_command, validate_command
from tokenpipe.cli.utils import get_version, version_callback

app = typer.Typer(
    help="tokenpipe – design token resolution and CSS variable generation",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """tokenpipe CLI main callback for global options."""
    pass


app.command(name="build")(build_command)
app.command(name="validate")(validate_command)
app.command(name="stats")(stats_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]


if __name__ == "__main__":
    main(sys.argv[1:])
