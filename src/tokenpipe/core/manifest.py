"""
Pipeline configuration loaded from tokenpipe.toml.

Example tokenpipe.toml:

    [tokens]
    data_dir = "src/tokens/data"
    output_dir = "src/tokens/css-vars"
    root_mode = "light-mode"
    pre_imports = ["../../assets/fonts/fonts.css"]
    post_imports = ["../../styles/global.css"]

Relative paths resolve against the directory holding the manifest.
TOKENPIPE_DATA_DIR and TOKENPIPE_OUTPUT_DIR override the file values.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "tokenpipe.toml"


@dataclass(frozen=True)
class TokenPipeConfig:
    """Locations and naming conventions for one token pipeline."""

    data_dir: Path = Path("src/tokens/data")
    output_dir: Path = Path("src/tokens/css-vars")
    metadata_file: str = "$metadata.json"
    theme_prefix: str = "brand-theme/"
    mode_prefix: str = "color-modes/"
    component_file: str = "components/component.json"
    layout_file: str = "layouts/layout.json"
    root_mode: str = "light-mode"
    mode_attribute: str = "data-mode"
    emit_json: bool = True
    pre_imports: list[str] = field(default_factory=list)
    post_imports: list[str] = field(default_factory=list)

    def with_overrides(
        self,
        *,
        data_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> TokenPipeConfig:
        """Return a copy with the given directories replaced."""
        changes: dict[str, Path] = {}
        if data_dir is not None:
            changes["data_dir"] = data_dir
        if output_dir is not None:
            changes["output_dir"] = output_dir
        return replace(self, **changes) if changes else self


def _as_str_list(value: object, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"[tokens] {key} must be a list of strings")
    return list(value)


def _as_str(value: object, key: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"[tokens] {key} must be a non-empty string")
    return value


def load_config(path: Path | None = None) -> TokenPipeConfig:
    """
    Load pipeline configuration.

    Args:
        path: Path to tokenpipe.toml. When None, ./tokenpipe.toml is used if it
            exists, otherwise defaults relative to the working directory.

    Returns:
        Resolved TokenPipeConfig with absolute directories.

    Raises:
        ConfigError: If the file is unreadable or holds invalid values.
    """
    if path is None:
        candidate = Path.cwd() / MANIFEST_FILE
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    data: dict[str, object] = {}
    base = Path.cwd()
    if path is not None:
        base = path.resolve().parent
        try:
            raw = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e
        tokens = raw.get("tokens", {})
        if not isinstance(tokens, dict):
            raise ConfigError(f"{path}: [tokens] must be a table")
        data = tokens
        logger.debug("Loaded config from %s", path)

    defaults = TokenPipeConfig()

    data_dir = Path(
        os.environ.get("TOKENPIPE_DATA_DIR")
        or _as_str(data.get("data_dir", str(defaults.data_dir)), "data_dir")
    )
    output_dir = Path(
        os.environ.get("TOKENPIPE_OUTPUT_DIR")
        or _as_str(data.get("output_dir", str(defaults.output_dir)), "output_dir")
    )

    emit_json = data.get("emit_json", defaults.emit_json)
    if not isinstance(emit_json, bool):
        raise ConfigError("[tokens] emit_json must be a boolean")

    return TokenPipeConfig(
        data_dir=data_dir if data_dir.is_absolute() else base / data_dir,
        output_dir=output_dir if output_dir.is_absolute() else base / output_dir,
        metadata_file=_as_str(data.get("metadata_file", defaults.metadata_file), "metadata_file"),
        theme_prefix=_as_str(data.get("theme_prefix", defaults.theme_prefix), "theme_prefix"),
        mode_prefix=_as_str(data.get("mode_prefix", defaults.mode_prefix), "mode_prefix"),
        component_file=_as_str(
            data.get("component_file", defaults.component_file), "component_file"
        ),
        layout_file=_as_str(data.get("layout_file", defaults.layout_file), "layout_file"),
        root_mode=_as_str(data.get("root_mode", defaults.root_mode), "root_mode"),
        mode_attribute=_as_str(
            data.get("mode_attribute", defaults.mode_attribute), "mode_attribute"
        ),
        emit_json=emit_json,
        pre_imports=_as_str_list(data.get("pre_imports", []), "pre_imports"),
        post_imports=_as_str_list(data.get("post_imports", []), "post_imports"),
    )
