"""
Token resolver - follows {path} references through the cascade.

Lookup order for every hop is Layout -> Component -> Mode(active) ->
Theme. References are followed under the same mode with an immutable
visited chain per call; revisiting a path raises TokenValidationError
carrying the full chain. Terminal values are cached by the requested
(path, mode) pair. The cache can be disabled without changing results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tokenpipe.specs.tokens import (
    DesignToken,
    ResolvedVariable,
    TokenLayers,
    TokenTree,
    TokenValue,
)
from tokenpipe.themes.formatter import format_css_value, to_css_var_name

from .errors import TokenResolutionError, TokenValidationError

logger = logging.getLogger(__name__)


@dataclass
class TreeResolution:
    """Result of resolving every token in a tree for one mode."""

    mode: str
    variables: dict[str, ResolvedVariable] = field(default_factory=dict)
    failures: list[TokenResolutionError | TokenValidationError] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def cycle_count(self) -> int:
        return sum(1 for f in self.failures if isinstance(f, TokenValidationError))

    def css_variables(self) -> dict[str, str]:
        """Variable name -> formatted CSS value, in tree order."""
        return {name: var.css_value for name, var in self.variables.items()}


@dataclass
class TokenSetValidation:
    """Outcome of validating every reference in a tree."""

    valid: bool
    errors: list[str]


class TokenResolver:
    """
    Resolves token paths to literal values for a given mode.

    Example:
        resolver = TokenResolver(processor.layers)
        resolver.resolve("Color.Primary.Background.default", "dark-mode")
        -> "#2c72e0"
    """

    def __init__(self, layers: TokenLayers, *, use_cache: bool = True):
        self.layers = layers
        self.use_cache = use_cache
        self._cache: dict[tuple[str, str], DesignToken] = {}

    # -------------------------------------------------------------------------
    # Single-token resolution
    # -------------------------------------------------------------------------

    def resolve(self, token_path: str, mode: str) -> TokenValue:
        """
        Resolve a token path to its literal value.

        Raises:
            TokenResolutionError: If a path in the chain is defined nowhere
            TokenValidationError: If the chain contains a cycle
        """
        return self._resolve_terminal(token_path, mode).value

    def resolve_token(self, token_path: str, mode: str) -> ResolvedVariable:
        """Resolve a path into a ResolvedVariable with its formatted CSS value."""
        terminal = self._resolve_terminal(token_path, mode)
        return ResolvedVariable(
            name=to_css_var_name(token_path.split(".")),
            path=token_path,
            mode=mode,
            value=terminal.value,
            type=terminal.type,
            css_value=format_css_value(terminal.value, terminal.type),
        )

    def _resolve_terminal(self, token_path: str, mode: str) -> DesignToken:
        key = (token_path, mode)
        if self.use_cache and key in self._cache:
            return self._cache[key]

        terminal = self._follow(token_path, mode)
        if self.use_cache:
            self._cache[key] = terminal
        return terminal

    def _follow(self, token_path: str, mode: str) -> DesignToken:
        visited: tuple[str, ...] = ()
        current = token_path

        while True:
            if current in visited:
                chain = [*visited, current]
                raise TokenValidationError(
                    f"Circular reference detected in mode {mode}: {' -> '.join(chain)}",
                    token_path=token_path,
                    cycle_chain=chain,
                )
            visited = (*visited, current)

            found = self.layers.lookup(current, mode)
            if found is None:
                if current == token_path:
                    message = f"Token not found: {current} (mode {mode})"
                else:
                    message = (
                        f"Token not found: {current} (mode {mode}), "
                        f"referenced via {' -> '.join(visited)}"
                    )
                raise TokenResolutionError(message, token_path=current, mode=mode)

            _layer, token = found
            if not token.is_reference:
                return token
            current = token.reference_path or ""

    # -------------------------------------------------------------------------
    # Bulk resolution
    # -------------------------------------------------------------------------

    def resolve_tree(self, tree: TokenTree, mode: str) -> TreeResolution:
        """
        Resolve every token in a tree for one mode.

        A token that fails (missing reference or cycle) is logged and left
        out; it never stops its siblings from resolving.
        """
        result = TreeResolution(mode=mode)

        for segments, _token in tree.walk():
            token_path = ".".join(segments)
            try:
                terminal = self._resolve_terminal(token_path, mode)
            except (TokenResolutionError, TokenValidationError) as e:
                logger.warning("Failed to resolve token %s: %s", token_path, e.message)
                result.failures.append(e)
                continue

            name = to_css_var_name(segments)
            if name in result.variables:
                logger.warning(
                    "Duplicate CSS variable %s from %s (already defined by %s), skipping",
                    name,
                    token_path,
                    result.variables[name].path,
                )
                result.duplicates.append(token_path)
                continue

            result.variables[name] = ResolvedVariable(
                name=name,
                path=token_path,
                mode=mode,
                value=terminal.value,
                type=terminal.type,
                css_value=format_css_value(terminal.value, terminal.type),
            )

        return result

    def resolve_token_set(self, tree: TokenTree, mode: str) -> dict[str, ResolvedVariable]:
        """Resolve a tree to CSS variable name -> ResolvedVariable."""
        return self.resolve_tree(tree, mode).variables

    def validate_token_set(self, tree: TokenTree, mode: str) -> TokenSetValidation:
        """Check that every token in a tree resolves for a mode."""
        errors: list[str] = []
        for segments, _token in tree.walk():
            token_path = ".".join(segments)
            try:
                self._resolve_terminal(token_path, mode)
            except (TokenResolutionError, TokenValidationError) as e:
                errors.append(f"{token_path}: {e.message}")
        return TokenSetValidation(valid=not errors, errors=errors)

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cache_stats(self) -> dict[str, object]:
        return {
            "size": len(self._cache),
            "keys": [f"{path}::{mode}" for path, mode in self._cache],
        }
