"""
Token processor - loads layered design token JSON files.

Reads $metadata.json, then the Theme, Mode, Component and Layout
layers in that order. Loading is all-or-nothing: any failure raises
TokenProcessingError(stage="loading") and leaves the processor without
layers. Absent optional layers (a mode file, component, layout) load as
empty trees.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tokenpipe.specs.tokens import (
    TokenLayers,
    TokenMetadata,
    TokenTree,
    parse_token_tree,
)

from .errors import TokenProcessingError
from .manifest import TokenPipeConfig

logger = logging.getLogger(__name__)


def count_tokens(tree: TokenTree) -> int:
    """Count leaf tokens in a tree (groups are not counted)."""
    return tree.count()


class TokenProcessor:
    """
    Loads the cascade layers for one token source.

    Example:
        processor = TokenProcessor(config)
        processor.load_all_tokens()
        layers = processor.layers
        modes = processor.available_modes()
    """

    def __init__(
        self,
        config: TokenPipeConfig,
        *,
        theme: str | None = None,
        verbose: bool = False,
    ):
        """
        Args:
            config: Pipeline configuration (data directory and file layout)
            theme: Theme name to load; the first theme in tokenSetOrder if None
            verbose: Log per-layer progress and statistics at INFO level
        """
        self.config = config
        self.theme = theme
        self.verbose = verbose
        self._metadata: TokenMetadata | None = None
        self._layers: TokenLayers | None = None
        self._theme_set: str | None = None

    @property
    def data_dir(self) -> Path:
        return self.config.data_dir

    @property
    def is_loaded(self) -> bool:
        return self._layers is not None

    @property
    def metadata(self) -> TokenMetadata | None:
        return self._metadata

    @property
    def layers(self) -> TokenLayers:
        if self._layers is None:
            raise TokenProcessingError("Tokens have not been loaded", stage="loading")
        return self._layers

    @property
    def theme_name(self) -> str:
        """Name of the loaded theme (last segment of its token set id)."""
        if self._theme_set is None:
            raise TokenProcessingError("Tokens have not been loaded", stage="loading")
        return self._theme_set.rsplit("/", 1)[-1]

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_all_tokens(self) -> TokenLayers:
        """
        Load every layer according to the metadata.

        Returns:
            The loaded TokenLayers

        Raises:
            TokenProcessingError: If metadata or the theme layer is missing or
                any present file is malformed
        """
        self._metadata = None
        self._layers = None
        self._theme_set = None

        if not self.data_dir.is_dir():
            raise TokenProcessingError(
                f"Data path does not exist: {self.data_dir}", stage="loading"
            )

        metadata = self._load_metadata()
        theme_set = self._select_theme_set(metadata)
        theme = self._load_required(f"{theme_set}.json")
        self._log(f"Theme tokens loaded: {theme_set}")

        modes: dict[str, TokenTree] = {}
        for mode_set in metadata.token_set_order:
            if not mode_set.startswith(self.config.mode_prefix):
                continue
            mode_name = mode_set.rsplit("/", 1)[-1]
            tree = self._load_optional(f"{mode_set}.json")
            if tree is None:
                logger.debug("Mode file for %s not found, skipping", mode_set)
                continue
            modes[mode_name] = tree
            self._log(f"Mode tokens loaded: {mode_name}")

        component = self._load_optional(self.config.component_file)
        if component is not None:
            self._log("Component tokens loaded")
        layout = self._load_optional(self.config.layout_file)
        if layout is not None:
            self._log("Layout tokens loaded")

        self._metadata = metadata
        self._theme_set = theme_set
        self._layers = TokenLayers(theme=theme, modes=modes, component=component, layout=layout)

        if self.verbose:
            logger.info("All token files loaded successfully")
            self.log_token_stats()
        return self._layers

    def _load_metadata(self) -> TokenMetadata:
        path = self.data_dir / self.config.metadata_file
        if not path.exists():
            raise TokenProcessingError(
                f"{self.config.metadata_file} not found in {self.data_dir}", stage="loading"
            )
        raw = self._read_json(path)
        try:
            metadata = TokenMetadata.model_validate(raw)
        except ValidationError as e:
            raise TokenProcessingError(
                f"Invalid metadata in {path}: {e.error_count()} error(s): "
                + "; ".join(err["msg"] for err in e.errors()),
                stage="loading",
            ) from e
        self._log(f"Metadata loaded: {len(metadata.token_set_order)} token sets")
        return metadata

    def _select_theme_set(self, metadata: TokenMetadata) -> str:
        themes = [s for s in metadata.token_set_order if s.startswith(self.config.theme_prefix)]
        if not themes:
            raise TokenProcessingError(
                f"No theme found in tokenSetOrder (expected prefix {self.config.theme_prefix!r})",
                stage="loading",
            )
        if self.theme is None:
            return themes[0]
        for theme_set in themes:
            if theme_set.rsplit("/", 1)[-1] == self.theme:
                return theme_set
        available = ", ".join(t.rsplit("/", 1)[-1] for t in themes)
        raise TokenProcessingError(
            f"Theme {self.theme!r} not found in tokenSetOrder (available: {available})",
            stage="loading",
        )

    def _load_required(self, relative: str) -> TokenTree:
        path = self.data_dir / relative
        if not path.exists():
            raise TokenProcessingError(f"Required token file not found: {path}", stage="loading")
        return parse_token_tree(self._read_json(path), str(path))

    def _load_optional(self, relative: str) -> TokenTree | None:
        path = self.data_dir / relative
        if not path.exists():
            return None
        return parse_token_tree(self._read_json(path), str(path))

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise TokenProcessingError(f"Failed to read {path}: {e}", stage="loading") from e
        except json.JSONDecodeError as e:
            raise TokenProcessingError(f"Malformed JSON in {path}: {e}", stage="loading") from e

    def _log(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
        else:
            logger.debug(message)

    # -------------------------------------------------------------------------
    # Accessors and statistics
    # -------------------------------------------------------------------------

    def available_modes(self) -> list[str]:
        """Mode names in metadata order."""
        return self.layers.mode_names

    def token_stats(self) -> dict[str, Any]:
        """Leaf counts per layer, for reporting."""
        layers = self.layers
        return {
            "theme": count_tokens(layers.theme),
            "modes": {name: count_tokens(tree) for name, tree in layers.modes.items()},
            "component": count_tokens(layers.component),
            "layout": count_tokens(layers.layout),
        }

    def log_token_stats(self) -> None:
        stats = self.token_stats()
        logger.info("Token statistics:")
        logger.info("  Theme: %d tokens", stats["theme"])
        for name, count in stats["modes"].items():
            logger.info("  %s: %d tokens", name, count)
        logger.info("  Component: %d tokens", stats["component"])
        logger.info("  Layout: %d tokens", stats["layout"])
