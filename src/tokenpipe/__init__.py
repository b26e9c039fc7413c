"""
tokenpipe - design token resolution and CSS variable generation.

Loads layered design token JSON (Theme, Mode, Component, Layout),
resolves {path} references through the cascade with cycle detection,
and emits CSS custom properties for every mode.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .build_css import BuildResult, CSSVariableGenerator, build_token_css, validate_tokens
from .core.errors import (
    ConfigError,
    ModeNotAvailableError,
    RuntimeNotReadyError,
    TokenPipeError,
    TokenProcessingError,
    TokenResolutionError,
    TokenValidationError,
)
from .core.manifest import TokenPipeConfig, load_config
from .core.processor import TokenProcessor
from .core.resolver import TokenResolver
from .specs.tokens import BuildMetrics, DesignToken, TokenTree, TokenType
from .themes.formatter import format_css_value, to_css_var_name


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("tokenpipe")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "TokenPipeConfig",
    "load_config",
    "TokenProcessor",
    "TokenResolver",
    "CSSVariableGenerator",
    "BuildResult",
    "build_token_css",
    "validate_tokens",
    "DesignToken",
    "TokenTree",
    "TokenType",
    "BuildMetrics",
    "format_css_value",
    "to_css_var_name",
    "TokenPipeError",
    "TokenProcessingError",
    "TokenResolutionError",
    "TokenValidationError",
    "ConfigError",
    "RuntimeNotReadyError",
    "ModeNotAvailableError",
]
