"""Tests for the runtime mode manager."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from tokenpipe.core.errors import ModeNotAvailableError, RuntimeNotReadyError
from tokenpipe.runtime import (
    DEFAULT_STYLE_ID,
    MODE_CHANGED_EVENT,
    Document,
    ModeChangeEvent,
    RuntimeModeManager,
    get_available_modes,
    get_current_mode,
    get_resolved_token_value,
    get_runtime_manager,
    inject_all_token_css_vars,
    remove_custom_token,
    set_custom_token,
    switch_to_mode,
    validate_token_system,
)

RESOLVED = {
    "light-mode": {
        "--Color-Primary-Background-default": "#2c72e0",
        "--Spacing-4": "16px",
    },
    "dark-mode": {
        "--Color-Primary-Background-default": "#1f5bb8",
        "--Spacing-4": "16px",
    },
}


@pytest.fixture
def manager() -> RuntimeModeManager:
    manager = RuntimeModeManager(Document())
    manager.load_resolved(RESOLVED)
    return manager


class TestReadiness:
    def test_switch_before_load_rejected(self) -> None:
        manager = RuntimeModeManager(Document())
        with pytest.raises(RuntimeNotReadyError):
            manager.switch_mode("dark-mode")
        assert manager.document.head == []

    @pytest.mark.asyncio
    async def test_load_from_mapping(self) -> None:
        manager = RuntimeModeManager(Document())
        await manager.load(RESOLVED)
        assert manager.is_ready
        assert manager.available_modes() == ["light-mode", "dark-mode"]

    @pytest.mark.asyncio
    async def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "resolved-tokens.json"
        path.write_text(json.dumps({"theme": "dive-theme", "modes": RESOLVED}))
        manager = RuntimeModeManager(Document())
        await manager.load(path)
        assert manager.available_modes() == ["light-mode", "dark-mode"]

    @pytest.mark.asyncio
    async def test_load_from_awaitable(self) -> None:
        async def fetch() -> dict:
            await asyncio.sleep(0)
            return RESOLVED

        manager = RuntimeModeManager(Document())
        await manager.load(fetch())
        assert manager.is_ready

    @pytest.mark.asyncio
    async def test_switch_when_ready_waits_for_load(self) -> None:
        manager = RuntimeModeManager(Document())
        pending = asyncio.create_task(manager.switch_mode_when_ready("dark-mode", timeout=1))
        await asyncio.sleep(0)
        assert not pending.done()

        manager.load_resolved(RESOLVED)
        event = await pending
        assert event.mode == "dark-mode"
        assert manager.current_mode == "dark-mode"

    @pytest.mark.asyncio
    async def test_wait_until_ready_times_out(self) -> None:
        manager = RuntimeModeManager(Document())
        with pytest.raises(asyncio.TimeoutError):
            await manager.wait_until_ready(timeout=0.01)


class TestSwitchMode:
    def test_single_style_element(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("light-mode")
        manager.switch_mode("dark-mode")
        manager.switch_mode("light-mode")

        styles = [e for e in manager.document.head if e.id == DEFAULT_STYLE_ID]
        assert len(styles) == 1
        assert "--Color-Primary-Background-default: #2c72e0;" in styles[0].text
        assert styles[0].attributes["data-mode"] == "light-mode"

    def test_root_attribute(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("dark-mode")
        assert manager.document.root.get_attribute("data-mode") == "dark-mode"

    def test_previous_mode(self, manager: RuntimeModeManager) -> None:
        first = manager.switch_mode("light-mode")
        second = manager.switch_mode("dark-mode")
        assert first.previous_mode is None
        assert second == ModeChangeEvent(previous_mode="light-mode", mode="dark-mode")

    def test_unknown_mode(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("light-mode")
        with pytest.raises(ModeNotAvailableError) as exc_info:
            manager.switch_mode("sepia-mode")
        assert exc_info.value.available == ["light-mode", "dark-mode"]
        assert manager.current_mode == "light-mode"
        assert manager.document.get_element_by_id(DEFAULT_STYLE_ID) is not None

    def test_document_event(self, manager: RuntimeModeManager) -> None:
        received = []
        manager.document.add_event_listener(MODE_CHANGED_EVENT, received.append)
        manager.switch_mode("dark-mode")
        assert received[0].detail == {"mode": "dark-mode", "previous_mode": None}

    def test_subscribe_and_unsubscribe(self, manager: RuntimeModeManager) -> None:
        events: list[ModeChangeEvent] = []
        unsubscribe = manager.on_mode_change(events.append)
        manager.switch_mode("dark-mode")
        unsubscribe()
        manager.switch_mode("light-mode")
        assert [e.mode for e in events] == ["dark-mode"]

    def test_remove_injected_styles(self, manager: RuntimeModeManager) -> None:
        manager.inject_mode_tokens("light-mode")
        manager.remove_injected_styles()
        assert manager.document.head == []


class TestCustomValues:
    def test_token_value_for_current_mode(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("dark-mode")
        assert manager.get_token_value("Color.Primary.Background.default") == "#1f5bb8"
        assert manager.get_token_value("Color.Missing") is None

    def test_override_survives_switch(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("light-mode")
        manager.set_custom_token_value("Color.Primary.Background.default", "#ff0000")
        manager.switch_mode("dark-mode")

        root = manager.document.root
        assert root.get_property("--Color-Primary-Background-default") == "#ff0000"
        assert manager.get_effective_value("Color.Primary.Background.default") == "#ff0000"

        manager.remove_custom_token_value("Color.Primary.Background.default")
        assert manager.get_effective_value("Color.Primary.Background.default") == "#1f5bb8"


class TestValidate:
    def test_before_switch(self, manager: RuntimeModeManager) -> None:
        validation = manager.validate()
        assert not validation.valid
        assert "No injected style element found" in validation.issues

    def test_after_switch(self, manager: RuntimeModeManager) -> None:
        manager.switch_mode("light-mode")
        assert manager.validate().valid


class TestGlobalManager:
    def test_singleton(self) -> None:
        assert get_runtime_manager() is get_runtime_manager()

    def test_module_helpers(self) -> None:
        get_runtime_manager().load_resolved(RESOLVED)

        inject_all_token_css_vars()
        assert get_current_mode() == "light-mode"
        switch_to_mode("dark-mode")
        assert get_current_mode() == "dark-mode"
        assert get_available_modes() == ["light-mode", "dark-mode"]
        assert get_resolved_token_value("Spacing.4") == "16px"

        set_custom_token("Spacing.4", "20px")
        assert get_runtime_manager().get_effective_value("Spacing.4") == "20px"
        remove_custom_token("Spacing.4")
        assert validate_token_system().valid
