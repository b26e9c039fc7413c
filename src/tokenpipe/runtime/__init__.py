"""
Runtime support: applying resolved token modes to a document, and
watching token sources for rebuilds.
"""

from tokenpipe.runtime.document import Document, DocumentEvent, RootElement, StyleElement
from tokenpipe.runtime.mode_manager import (
    DEFAULT_STYLE_ID,
    MODE_CHANGED_EVENT,
    ModeChangeEvent,
    RuntimeModeManager,
    RuntimeValidation,
    get_available_modes,
    get_current_mode,
    get_resolved_token_value,
    get_runtime_manager,
    inject_all_token_css_vars,
    remove_custom_token,
    reset_runtime_manager,
    set_custom_token,
    switch_to_mode,
    validate_token_system,
)

__all__ = [
    "Document",
    "DocumentEvent",
    "RootElement",
    "StyleElement",
    "DEFAULT_STYLE_ID",
    "MODE_CHANGED_EVENT",
    "ModeChangeEvent",
    "RuntimeModeManager",
    "RuntimeValidation",
    "get_runtime_manager",
    "reset_runtime_manager",
    "inject_all_token_css_vars",
    "switch_to_mode",
    "get_current_mode",
    "get_available_modes",
    "get_resolved_token_value",
    "set_custom_token",
    "remove_custom_token",
    "validate_token_system",
]
