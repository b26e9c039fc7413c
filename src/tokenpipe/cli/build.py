"""
Token build commands for tokenpipe CLI.

Commands:
- build: Resolve tokens and write CSS variable files
- validate: Check every token resolves, per mode
- stats: Show token counts per cascade layer
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tokenpipe.build_css import BuildResult, build_token_css, validate_tokens
from tokenpipe.core.errors import TokenPipeError
from tokenpipe.core.processor import TokenProcessor

from .common import resolve_config
from .utils import configure_logging

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to tokenpipe.toml"),
]
DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Token data directory (overrides config)"),
]
ThemeOption = Annotated[
    str | None,
    typer.Option("--theme", "-t", help="Generate for specific theme only"),
]
ModeOption = Annotated[
    str | None,
    typer.Option("--mode", "-m", help="Generate for specific mode only"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Detailed output"),
]


def build_command(
    theme: ThemeOption = None,
    mode: ModeOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Test run without writing files"),
    ] = False,
    verbose: VerboseOption = False,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Custom output directory"),
    ] = None,
    data_dir: DataDirOption = None,
    config: ConfigOption = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table (default) or json"),
    ] = "table",
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit 1 when any token is unresolved"),
    ] = False,
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Rebuild when token files change"),
    ] = False,
) -> None:
    """Resolve design tokens and generate CSS variable files.

    Examples:
        tokenpipe build
        tokenpipe build --verbose
        tokenpipe build --mode dark-mode --dry-run
        tokenpipe build --theme dive-theme --format json
    """
    configure_logging(verbose)
    pipeline_config = resolve_config(config, data_dir=data_dir, output_dir=output_dir)

    def run() -> BuildResult | None:
        try:
            result = build_token_css(
                pipeline_config,
                theme=theme,
                mode=mode,
                dry_run=dry_run,
                verbose=verbose,
            )
        except TokenPipeError as e:
            typer.echo(f"CSS variable generation failed: {e}", err=True)
            return None

        if format == "json":
            typer.echo(result.metrics.model_dump_json(indent=2))
        else:
            _print_build_report(result)
        return result

    if watch:
        from tokenpipe.runtime.hot_reload import watch_and_rebuild

        run()
        watch_and_rebuild(pipeline_config.data_dir, run)
        return

    result = run()
    if result is None:
        raise typer.Exit(code=1)
    if strict and not result.ok:
        typer.echo(
            f"{result.metrics.unresolved_tokens} unresolved token(s) with --strict",
            err=True,
        )
        raise typer.Exit(code=1)


def _print_build_report(result: BuildResult) -> None:
    """Render a human-readable build summary."""
    metrics = result.metrics

    table = Table(title="Build Metrics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Modes", ", ".join(metrics.modes) or "-")
    table.add_row("Total variables", str(metrics.total_variables))
    table.add_row("Files written", str(metrics.files_written))
    table.add_row("Processing time", f"{metrics.processing_time_ms:.0f}ms")
    table.add_row("Unresolved tokens", str(metrics.unresolved_tokens))
    if metrics.cycle_detections:
        table.add_row("Cycles detected", str(metrics.cycle_detections))
    if metrics.duplicate_variables:
        table.add_row("Duplicate variables", str(metrics.duplicate_variables))
    console.print(table)

    if metrics.unresolved_tokens:
        console.print(
            f"[yellow]⚠ {metrics.unresolved_tokens} tokens could not be resolved[/yellow]"
        )
        for failure in result.failures:
            console.print(f"  [yellow]-[/yellow] {escape(failure.message)}", highlight=False)

    if metrics.dry_run:
        console.print("[cyan]Dry run completed - no files were written[/cyan]")
        for path in metrics.files:
            console.print(f"  would write {escape(path)}", highlight=False)
    else:
        console.print("[green]✓ CSS variable generation complete[/green]")


def validate_command(
    theme: ThemeOption = None,
    mode: ModeOption = None,
    data_dir: DataDirOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Check that every component and layout token resolves in every mode."""
    configure_logging(verbose)
    pipeline_config = resolve_config(config, data_dir=data_dir)

    try:
        report = validate_tokens(pipeline_config, theme=theme, mode=mode)
    except TokenPipeError as e:
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(code=1)

    invalid = 0
    for mode_name, validation in report.items():
        if validation.valid:
            console.print(f"[green]✓[/green] {mode_name}")
            continue
        invalid += 1
        console.print(f"[red]✗[/red] {mode_name}: {len(validation.errors)} error(s)")
        for error in validation.errors:
            console.print(f"    {escape(error)}", highlight=False)

    if invalid:
        raise typer.Exit(code=1)
    console.print("[green]All tokens resolve.[/green]")


def stats_command(
    theme: ThemeOption = None,
    data_dir: DataDirOption = None,
    config: ConfigOption = None,
) -> None:
    """Show how many tokens each cascade layer defines."""
    configure_logging(False)
    pipeline_config = resolve_config(config, data_dir=data_dir)

    processor = TokenProcessor(pipeline_config, theme=theme)
    try:
        processor.load_all_tokens()
    except TokenPipeError as e:
        typer.echo(f"Failed to load tokens: {e}", err=True)
        raise typer.Exit(code=1)

    stats = processor.token_stats()
    table = Table(title=f"Token Statistics ({processor.theme_name})")
    table.add_column("Layer", style="cyan")
    table.add_column("Tokens", justify="right")
    table.add_row("Theme", str(stats["theme"]))
    for name, count in stats["modes"].items():
        table.add_row(f"Mode: {name}", str(count))
    table.add_row("Component", str(stats["component"]))
    table.add_row("Layout", str(stats["layout"]))
    console.print(table)
