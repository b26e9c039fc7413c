"""Token model types."""

from tokenpipe.specs.tokens import (
    EMPTY_TREE,
    BuildMetrics,
    DesignToken,
    ResolvedVariable,
    TokenLayers,
    TokenMetadata,
    TokenTree,
    TokenType,
    TokenValue,
    parse_token_tree,
)

__all__ = [
    "TokenType",
    "TokenValue",
    "DesignToken",
    "TokenTree",
    "EMPTY_TREE",
    "parse_token_tree",
    "TokenMetadata",
    "TokenLayers",
    "ResolvedVariable",
    "BuildMetrics",
]
