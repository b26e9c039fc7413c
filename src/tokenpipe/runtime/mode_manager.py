"""
Runtime mode manager.

Holds pre-resolved CSS variables per mode and applies them to a
document: one injected <style> block (replaced, never appended), a
mode attribute on the root element, and a change notification.
Single-variable overrides live on the root's inline style, so a mode
switch never clobbers them.

The manager must be loaded before it can switch modes; until then
switch_mode raises RuntimeNotReadyError, and switch_mode_when_ready
waits for the load to finish.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field

from tokenpipe.core.errors import ModeNotAvailableError, RuntimeNotReadyError
from tokenpipe.core.json_export import load_resolved_tokens
from tokenpipe.themes.css_generator import DEFAULT_MODE_ATTRIBUTE, generate_css_rule
from tokenpipe.themes.formatter import path_to_css_var_name

from .document import Document, DocumentEvent, StyleElement

logger = logging.getLogger(__name__)

DEFAULT_STYLE_ID = "tokenpipe-css-vars"
MODE_CHANGED_EVENT = "tokenpipe:mode-changed"

ResolvedModes = Mapping[str, Mapping[str, str]]
ResolvedSource = Union[ResolvedModes, Path, str, Awaitable[ResolvedModes]]


@dataclass(frozen=True)
class ModeChangeEvent:
    """Notification sent after a completed mode switch."""

    previous_mode: str | None
    mode: str


class RuntimeValidation(BaseModel):
    """Result of RuntimeModeManager.validate()."""

    valid: bool = Field(description="True when no issues were found")
    issues: list[str] = Field(default_factory=list, description="Each missing piece")


class RuntimeModeManager:
    """
    Applies resolved token modes to a document.

    Example:
        manager = RuntimeModeManager(Document())
        await manager.load(Path("css-vars/dive-theme/resolved-tokens.json"))
        manager.switch_mode("dark-mode")
        manager.set_custom_token_value("Color.Primary.Background.default", "#ff0000")
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        style_id: str = DEFAULT_STYLE_ID,
        mode_attribute: str = DEFAULT_MODE_ATTRIBUTE,
        default_mode: str = "light-mode",
    ):
        self.document = document if document is not None else Document()
        self.style_id = style_id
        self.mode_attribute = mode_attribute
        self._resolved: dict[str, dict[str, str]] = {}
        self._current_mode = default_mode
        self._ready = asyncio.Event()
        self._subscribers: list[Callable[[ModeChangeEvent], None]] = []

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def load_resolved(self, resolved: ResolvedModes) -> None:
        """Install resolved variables (mode -> variable -> value) and mark ready."""
        self._resolved = {
            mode: {str(name): str(value) for name, value in variables.items()}
            for mode, variables in resolved.items()
        }
        self._ready.set()
        logger.debug("Runtime tokens loaded for modes: %s", ", ".join(self._resolved))

    async def load(self, source: ResolvedSource) -> None:
        """
        Load resolved variables asynchronously.

        Args:
            source: A mode -> variables mapping, a path to a resolved-tokens
                JSON file, or an awaitable producing the mapping
        """
        if isinstance(source, (str, Path)):
            resolved = await asyncio.to_thread(load_resolved_tokens, Path(source))
        elif inspect.isawaitable(source):
            resolved = await source
        else:
            resolved = source
        self.load_resolved(resolved)

    async def wait_until_ready(self, timeout: float | None = None) -> None:
        await asyncio.wait_for(self._ready.wait(), timeout)

    def _require_ready(self, action: str) -> None:
        if not self.is_ready:
            raise RuntimeNotReadyError(f"Cannot {action}: runtime tokens have not been loaded")

    # -------------------------------------------------------------------------
    # Injection and switching
    # -------------------------------------------------------------------------

    @property
    def current_mode(self) -> str:
        return self._current_mode

    def available_modes(self) -> list[str]:
        return list(self._resolved)

    def inject_mode_tokens(self, mode: str) -> StyleElement:
        """
        Replace the injected stylesheet with the variables for a mode.

        Raises:
            RuntimeNotReadyError: Before tokens are loaded
            ModeNotAvailableError: If the mode has no resolved variables
        """
        self._require_ready("inject mode tokens")
        tokens = self._resolved.get(mode)
        if tokens is None:
            raise ModeNotAvailableError(mode, self.available_modes())

        self.remove_injected_styles()
        style = StyleElement(
            id=self.style_id,
            attributes={self.mode_attribute: mode},
            text=generate_css_rule(":root", tokens),
        )
        self.document.append_child(style)
        self._current_mode = mode

        logger.debug("Injected %d CSS variables for mode: %s", len(tokens), mode)
        return style

    def remove_injected_styles(self) -> None:
        existing = self.document.get_element_by_id(self.style_id)
        if existing is not None:
            self.document.remove_child(existing)

    def apply_mode_attribute(self, mode: str) -> None:
        self.document.root.set_attribute(self.mode_attribute, mode)

    def switch_mode(self, mode: str) -> ModeChangeEvent:
        """Inject a mode's variables, mark the root, and notify listeners."""
        previous = self._current_mode if self.document.get_element_by_id(self.style_id) else None
        self.inject_mode_tokens(mode)
        self.apply_mode_attribute(mode)

        event = ModeChangeEvent(previous_mode=previous, mode=mode)
        self.document.dispatch_event(
            DocumentEvent(MODE_CHANGED_EVENT, {"mode": mode, "previous_mode": previous})
        )
        for callback in list(self._subscribers):
            callback(event)
        logger.info("Switched mode: %s -> %s", previous, mode)
        return event

    async def switch_mode_when_ready(
        self, mode: str, timeout: float | None = None
    ) -> ModeChangeEvent:
        """Wait for the initial load, then switch."""
        await self.wait_until_ready(timeout)
        return self.switch_mode(mode)

    def on_mode_change(self, callback: Callable[[ModeChangeEvent], None]) -> Callable[[], None]:
        """Subscribe to mode changes. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Single-variable access
    # -------------------------------------------------------------------------

    def get_token_value(self, token_path: str) -> str | None:
        """Resolved value of a token for the current mode."""
        tokens = self._resolved.get(self._current_mode)
        if tokens is None:
            return None
        return tokens.get(path_to_css_var_name(token_path))

    def get_effective_value(self, token_path: str) -> str | None:
        """Inline override if one is set, else the resolved value."""
        override = self.document.root.get_property(path_to_css_var_name(token_path))
        if override is not None:
            return override
        return self.get_token_value(token_path)

    def set_custom_token_value(self, token_path: str, value: str) -> None:
        self.document.root.set_property(path_to_css_var_name(token_path), value)

    def remove_custom_token_value(self, token_path: str) -> None:
        self.document.root.remove_property(path_to_css_var_name(token_path))

    # -------------------------------------------------------------------------
    # Self-check
    # -------------------------------------------------------------------------

    def validate(self) -> RuntimeValidation:
        """Report which parts of the runtime state are missing."""
        issues: list[str] = []

        if self.document.get_element_by_id(self.style_id) is None:
            issues.append("No injected style element found")

        if not self.document.root.get_attribute(self.mode_attribute):
            issues.append(f"No {self.mode_attribute} attribute set on document element")

        if not self._resolved.get(self._current_mode):
            issues.append(f"No resolved tokens for current mode: {self._current_mode}")

        return RuntimeValidation(valid=not issues, issues=issues)


# Global manager instance
_manager: RuntimeModeManager | None = None


def get_runtime_manager() -> RuntimeModeManager:
    """Get the global runtime manager, creating it on first use."""
    global _manager
    if _manager is None:
        _manager = RuntimeModeManager()
    return _manager


def reset_runtime_manager(manager: RuntimeModeManager | None = None) -> None:
    """Replace (or drop) the global runtime manager."""
    global _manager
    _manager = manager


def inject_all_token_css_vars(mode: str = "light-mode") -> StyleElement:
    return get_runtime_manager().inject_mode_tokens(mode)


def switch_to_mode(mode: str) -> ModeChangeEvent:
    return get_runtime_manager().switch_mode(mode)


def get_current_mode() -> str:
    return get_runtime_manager().current_mode


def get_available_modes() -> list[str]:
    return get_runtime_manager().available_modes()


def get_resolved_token_value(token_path: str) -> str | None:
    return get_runtime_manager().get_token_value(token_path)


def set_custom_token(token_path: str, value: str) -> None:
    get_runtime_manager().set_custom_token_value(token_path, value)


def remove_custom_token(token_path: str) -> None:
    get_runtime_manager().remove_custom_token_value(token_path)


def validate_token_system() -> RuntimeValidation:
    return get_runtime_manager().validate()
