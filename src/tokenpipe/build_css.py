"""CSS variable build for tokenpipe.

Loads the token layers, resolves the Component and Layout trees for
every mode, and writes one stylesheet per category containing every
mode's rule block back-to-back, so a single import switches correctly
whichever mode the page activates.

Usage::

    from tokenpipe.build_css import build_token_css
    result = build_token_css(load_config(), dry_run=True)
    result.metrics.unresolved_tokens

Or via CLI::

    tokenpipe build --dry-run
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from tokenpipe.core.errors import (
    TokenProcessingError,
    TokenResolutionError,
    TokenValidationError,
)
from tokenpipe.core.json_export import RESOLVED_TOKENS_FILE, build_resolved_document
from tokenpipe.core.manifest import TokenPipeConfig
from tokenpipe.core.processor import TokenProcessor
from tokenpipe.core.resolver import TokenResolver, TokenSetValidation, TreeResolution
from tokenpipe.specs.tokens import BuildMetrics
from tokenpipe.themes.css_generator import (
    generate_css_rule,
    generate_file_header,
    generate_import_index,
    generate_mode_selector,
    optimize_css,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Everything a build produced, whether or not it was written."""

    metrics: BuildMetrics
    component_css: str = ""
    layout_css: str | None = None
    # mode -> CSS variable name -> formatted value (component and layout)
    resolved: dict[str, dict[str, str]] = field(default_factory=dict)
    failures: list[TokenResolutionError | TokenValidationError] = field(default_factory=list)
    outputs: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every token resolved."""
        return self.metrics.unresolved_tokens == 0


class CSSVariableGenerator:
    """
    Drives processor, resolver and formatter across every mode.

    Example:
        generator = CSSVariableGenerator(config, mode="dark-mode", dry_run=True)
        result = generator.generate()
    """

    def __init__(
        self,
        config: TokenPipeConfig,
        *,
        theme: str | None = None,
        mode: str | None = None,
        dry_run: bool = False,
        verbose: bool = False,
        output_dir: Path | None = None,
    ):
        self.config = config.with_overrides(output_dir=output_dir)
        self.mode = mode
        self.dry_run = dry_run
        self.verbose = verbose
        self.processor = TokenProcessor(self.config, theme=theme, verbose=verbose)
        self.resolver: TokenResolver | None = None

    def generate(self) -> BuildResult:
        """
        Run the full pipeline.

        Returns:
            BuildResult with metrics and generated CSS.

        Raises:
            TokenProcessingError: On loading, mode selection or write failures.
                Unresolved tokens are counted in the metrics instead.
        """
        started = time.perf_counter()
        metrics = BuildMetrics(dry_run=self.dry_run)
        logger.info("Starting CSS variable generation")

        layers = self.processor.load_all_tokens()
        self.resolver = TokenResolver(layers)
        self.resolver.clear_cache()

        target_modes = self._target_modes()
        metrics.modes = list(target_modes)
        logger.debug("Processing %d modes", len(target_modes))

        result = BuildResult(metrics=metrics)
        component_blocks: list[str] = []
        layout_blocks: list[str] = []
        component_count = 0
        layout_count = 0

        for mode in target_modes:
            component, layout = self._resolve_mode(mode)
            selector = generate_mode_selector(
                mode, self.config.root_mode, self.config.mode_attribute
            )

            component_blocks.append(generate_css_rule(selector, component.css_variables()))
            component_count += len(component.variables)
            mode_values = component.css_variables()

            if layout is not None and layout.variables:
                layout_blocks.append(generate_css_rule(selector, layout.css_variables()))
                layout_count += len(layout.variables)
                mode_values.update(layout.css_variables())

            result.resolved[mode] = mode_values
            for resolution in (component, layout):
                if resolution is None:
                    continue
                result.failures.extend(resolution.failures)
                metrics.duplicate_variables += len(resolution.duplicates)
                metrics.cycle_detections += resolution.cycle_count

            logger.debug(
                "Mode %s processed: %d variables",
                mode,
                len(component.variables) + (len(layout.variables) if layout else 0),
            )

        result.component_css = "\n\n".join(component_blocks)
        result.layout_css = "\n\n".join(layout_blocks) if layout_blocks else None
        metrics.total_variables = component_count + layout_count
        metrics.unresolved_tokens = len(result.failures)

        result.outputs = self._render_outputs(
            result, target_modes, component_count, layout_count
        )
        metrics.files = [str(path) for path in result.outputs]
        if not self.dry_run:
            for path, content in result.outputs.items():
                self._write(path, content)
                metrics.files_written += 1

        metrics.cache_size = self.resolver.cache_size
        metrics.processing_time_ms = (time.perf_counter() - started) * 1000
        self._report(metrics)
        return result

    def _target_modes(self) -> list[str]:
        available = self.processor.available_modes()
        if self.mode is None:
            return available
        if self.mode not in available:
            raise TokenProcessingError(
                f"Unknown mode {self.mode!r} (available: {', '.join(available) or 'none'})",
                stage="resolving",
            )
        return [self.mode]

    def _resolve_mode(self, mode: str) -> tuple[TreeResolution, TreeResolution | None]:
        assert self.resolver is not None
        layers = self.resolver.layers
        logger.debug("Processing mode: %s", mode)
        component = self.resolver.resolve_tree(layers.component, mode)
        layout = None if layers.layout.is_empty else self.resolver.resolve_tree(layers.layout, mode)
        return component, layout

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _render_outputs(
        self,
        result: BuildResult,
        modes: list[str],
        component_count: int,
        layout_count: int,
    ) -> dict[Path, str]:
        """Render every output file as path -> content, in write order."""
        theme = self.processor.theme_name
        output_dir = self.config.output_dir
        theme_dir = output_dir / theme
        generated = datetime.now(UTC).isoformat()
        outputs: dict[Path, str] = {}

        component_header = generate_file_header(
            "component.css",
            "Component tokens for all modes",
            {
                "modes": modes,
                "type": "component",
                "variables": component_count,
                "generated": generated,
            },
        )
        outputs[theme_dir / "component.css"] = (
            optimize_css(component_header + result.component_css) + "\n"
        )

        theme_imports = ["./component.css"]
        if result.layout_css:
            layout_header = generate_file_header(
                "layout.css",
                "Layout tokens for all modes",
                {
                    "modes": modes,
                    "type": "layout",
                    "variables": layout_count,
                    "generated": generated,
                },
            )
            outputs[theme_dir / "layout.css"] = (
                optimize_css(layout_header + result.layout_css) + "\n"
            )
            theme_imports.append("./layout.css")

        outputs[theme_dir / "index.css"] = generate_import_index(
            f"{theme}/index.css", theme_imports
        )
        outputs[output_dir / "index.css"] = generate_import_index(
            "Auto-generated design tokens",
            [*self.config.pre_imports, f"./{theme}/index.css", *self.config.post_imports],
        )

        if self.config.emit_json:
            document = build_resolved_document(theme, result.resolved)
            try:
                outputs[theme_dir / RESOLVED_TOKENS_FILE] = json.dumps(document, indent=2) + "\n"
            except (TypeError, ValueError) as e:
                raise TokenProcessingError(
                    f"Failed to serialize resolved tokens: {e}", stage="generating"
                ) from e

        return outputs

    def _write(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise TokenProcessingError(f"Failed to write {path}: {e}", stage="writing") from e
        logger.debug("Wrote %s", path)

    def _report(self, metrics: BuildMetrics) -> None:
        logger.info(
            "CSS variable generation complete: %d variables, %d files, %.1fms",
            metrics.total_variables,
            metrics.files_written,
            metrics.processing_time_ms,
        )
        if metrics.unresolved_tokens:
            logger.warning("%d tokens could not be resolved", metrics.unresolved_tokens)
        if self.dry_run:
            logger.info("Dry run completed - no files were written")


def build_token_css(
    config: TokenPipeConfig,
    *,
    theme: str | None = None,
    mode: str | None = None,
    dry_run: bool = False,
    verbose: bool = False,
    output_dir: Path | None = None,
) -> BuildResult:
    """Build the token stylesheets. See CSSVariableGenerator.generate."""
    generator = CSSVariableGenerator(
        config,
        theme=theme,
        mode=mode,
        dry_run=dry_run,
        verbose=verbose,
        output_dir=output_dir,
    )
    return generator.generate()


def validate_tokens(
    config: TokenPipeConfig,
    *,
    theme: str | None = None,
    mode: str | None = None,
) -> dict[str, TokenSetValidation]:
    """
    Check every Component and Layout token resolves, per mode.

    Returns:
        mode -> combined TokenSetValidation
    """
    processor = TokenProcessor(config, theme=theme)
    layers = processor.load_all_tokens()
    resolver = TokenResolver(layers)

    modes = processor.available_modes()
    if mode is not None:
        if mode not in modes:
            raise TokenProcessingError(f"Unknown mode {mode!r}", stage="resolving")
        modes = [mode]

    report: dict[str, TokenSetValidation] = {}
    for name in modes:
        errors: list[str] = []
        for tree in (layers.component, layers.layout):
            errors.extend(resolver.validate_token_set(tree, name).errors)
        report[name] = TokenSetValidation(valid=not errors, errors=errors)
    return report
