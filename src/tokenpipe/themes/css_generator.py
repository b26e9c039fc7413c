"""
CSS generator for resolved token variables.

Builds mode rule blocks, file headers, and @import index files. The
root mode is emitted under :root; every other mode under an attribute
selector such as [data-mode="dark-mode"], so switching modes is a
matter of setting one attribute on the document root.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

DEFAULT_MODE_ATTRIBUTE = "data-mode"


def generate_mode_selector(
    mode: str,
    root_mode: str,
    attribute: str = DEFAULT_MODE_ATTRIBUTE,
) -> str:
    """
    Get the CSS selector for a mode.

    Args:
        mode: Mode name (e.g., "dark-mode")
        root_mode: Mode that owns the :root block
        attribute: Attribute carrying the active mode on the document root

    Returns:
        CSS selector string
    """
    if mode == root_mode:
        return ":root"
    escaped = mode.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{attribute}="{escaped}"]'


def generate_css_rule(selector: str, variables: Mapping[str, str], indent: int = 2) -> str:
    """
    Generate a CSS rule declaring custom properties.

    Args:
        selector: Rule selector
        variables: CSS variable name -> formatted value
        indent: Number of spaces for declarations

    Returns:
        CSS rule text
    """
    prefix = " " * indent
    lines = [f"{selector} {{"]
    lines.extend(f"{prefix}{name}: {value};" for name, value in variables.items())
    lines.append("}")
    return "\n".join(lines)


def generate_file_header(
    file_name: str,
    description: str | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> str:
    """Generate the comment block placed at the top of generated CSS files."""
    lines = [f"/* {file_name} */", ""]

    if description:
        lines.extend([f"/* {description} */", ""])

    if metadata:
        lines.append("/*")
        for key, value in metadata.items():
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(item) for item in value)
            lines.append(f" * {key}: {value}")
        lines.extend([" */", ""])

    return "\n".join(lines)


def generate_import_index(title: str, imports: Iterable[str]) -> str:
    """Generate an index stylesheet that only @imports other files."""
    lines = [f"/* {title} */", "/* Auto-generated - do not edit */", ""]
    lines.extend(f"@import '{path}';" for path in imports)
    return "\n".join(lines) + "\n"


def optimize_css(css: str) -> str:
    """Normalize whitespace: trim every line and drop blank ones."""
    stripped = (line.strip() for line in css.split("\n"))
    return "\n".join(line for line in stripped if line)
