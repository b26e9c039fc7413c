"""
Value formatting for CSS output.

Converts resolved token values into CSS-legal literals according to
their declared type, and derives CSS variable names from token paths.
Every place a token path becomes a CSS identifier goes through
to_css_var_name so the same token always yields the same variable.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from tokenpipe.specs.tokens import TokenType, TokenValue

_BARE_NUMBER = re.compile(r"[0-9]+(\.[0-9]+)?")
_WHITESPACE = re.compile(r"\s+")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")
_HYPHEN_RUNS = re.compile(r"-+")

# Named font weights -> numeric CSS weights
FONT_WEIGHTS: dict[str, str] = {
    "thin": "100",
    "extra-light": "200",
    "light": "300",
    "normal": "400",
    "medium": "500",
    "semi-bold": "600",
    "bold": "700",
    "extra-bold": "800",
    "black": "900",
}


def _to_text(value: TokenValue) -> str:
    # Python renders booleans as True/False; CSS and JSON sources use lowercase
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_color_value(value: TokenValue) -> str:
    """Colors are trusted as-is: hex, rgb()/hsl(), var() and named colors."""
    return _to_text(value)


def format_numeric_value(value: TokenValue) -> str:
    """Add a px unit to bare numbers; leave units and CSS functions alone."""
    text = _to_text(value)
    if _BARE_NUMBER.fullmatch(text):
        return f"{text}px"
    return text


def format_font_family_value(value: TokenValue) -> str:
    """Quote multi-word family names that are not already quoted."""
    text = _to_text(value)
    if _WHITESPACE.search(text) and not text.startswith(('"', "'")):
        return f'"{text}"'
    return text


def format_font_weight_value(value: TokenValue) -> str:
    """Map named weights to numbers; unknown names pass through."""
    text = _to_text(value)
    return FONT_WEIGHTS.get(text.lower(), text)


def format_css_value(value: TokenValue, token_type: TokenType | str) -> str:
    """
    Format a resolved token value for CSS output.

    Args:
        value: Terminal literal value (never a reference)
        token_type: Declared type of the token supplying the value

    Returns:
        CSS value text
    """
    match token_type:
        case TokenType.COLOR:
            return format_color_value(value)
        case TokenType.NUMBER | TokenType.DIMENSION:
            return format_numeric_value(value)
        case TokenType.FONT_FAMILY:
            return format_font_family_value(value)
        case TokenType.FONT_WEIGHT:
            return format_font_weight_value(value)
        case _:
            return _to_text(value)


def sanitize_segment(segment: str) -> str:
    """Make one path segment safe for use inside a CSS identifier."""
    cleaned = _WHITESPACE.sub("-", segment)
    cleaned = _INVALID_CHARS.sub("-", cleaned)
    cleaned = _HYPHEN_RUNS.sub("-", cleaned)
    return cleaned.strip("-")


def to_css_var_name(path: Sequence[str]) -> str:
    """
    Convert token path segments to a CSS custom property name.

    Example:
        to_css_var_name(["Color", "Base", "Subtle Background", "hover"])
        -> "--Color-Base-Subtle-Background-hover"
    """
    return "--" + "-".join(sanitize_segment(segment) for segment in path)


def path_to_css_var_name(token_path: str) -> str:
    """Dotted-path form of to_css_var_name."""
    return to_css_var_name(token_path.split("."))
