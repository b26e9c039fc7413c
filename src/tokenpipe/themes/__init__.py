"""
CSS output for resolved tokens: value formatting, variable naming,
mode selectors and stylesheet assembly.
"""

from tokenpipe.themes.css_generator import (
    DEFAULT_MODE_ATTRIBUTE,
    generate_css_rule,
    generate_file_header,
    generate_import_index,
    generate_mode_selector,
    optimize_css,
)
from tokenpipe.themes.formatter import (
    FONT_WEIGHTS,
    format_css_value,
    path_to_css_var_name,
    sanitize_segment,
    to_css_var_name,
)

__all__ = [
    "FONT_WEIGHTS",
    "format_css_value",
    "sanitize_segment",
    "to_css_var_name",
    "path_to_css_var_name",
    "DEFAULT_MODE_ATTRIBUTE",
    "generate_mode_selector",
    "generate_css_rule",
    "generate_file_header",
    "generate_import_index",
    "optimize_css",
]
