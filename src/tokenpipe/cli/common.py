"""Shared CLI helpers to reduce boilerplate across command modules."""

from __future__ import annotations

from pathlib import Path

import typer

from tokenpipe.core.errors import ConfigError
from tokenpipe.core.manifest import TokenPipeConfig, load_config


def resolve_config(
    config_path: Path | None,
    *,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
) -> TokenPipeConfig:
    """Load tokenpipe.toml and apply command-line directory overrides.

    Exits with code 1 if the configuration cannot be loaded.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)
    return config.with_overrides(
        data_dir=data_dir.resolve() if data_dir else None,
        output_dir=output_dir.resolve() if output_dir else None,
    )
