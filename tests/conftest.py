"""Shared pytest fixtures for tokenpipe tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tokenpipe.core.manifest import TokenPipeConfig
from tokenpipe.runtime.mode_manager import reset_runtime_manager

METADATA = {
    "tokenSetOrder": [
        "brand-theme/dive-theme",
        "color-modes/light-mode",
        "color-modes/dark-mode",
        "components/component",
        "layouts/layout",
    ]
}

THEME_TOKENS = {
    "Color": {
        "$type": "color",
        "Primary": {
            "600": {"$value": "#2c72e0"},
            "700": {"$value": "#1f5bb8"},
        },
        "Neutral": {
            "0": {"$value": "#ffffff"},
            "900": {"$value": "#111111"},
        },
    },
    "Spacing": {
        "$type": "dimension",
        "4": {"$value": "16"},
        "8": {"$value": "2rem"},
    },
    "Font": {
        "Family": {"Body": {"$type": "fontFamily", "$value": "Open Sans"}},
        "Weight": {"Bold": {"$type": "fontWeight", "$value": "bold"}},
    },
}

LIGHT_MODE_TOKENS = {
    "Color": {
        "$type": "color",
        "Surface": {"$value": "{Color.Neutral.0}"},
        "Accent": {"$value": "{Color.Primary.600}"},
    }
}

DARK_MODE_TOKENS = {
    "Color": {
        "$type": "color",
        "Surface": {"$value": "{Color.Neutral.900}"},
        "Accent": {"$value": "{Color.Primary.700}"},
    }
}

COMPONENT_TOKENS = {
    "Button": {
        "Background": {"$type": "color", "$value": "{Color.Accent}"},
        "Surface": {"$type": "color", "$value": "{Color.Surface}"},
        "Padding": {"$type": "dimension", "$value": "{Spacing.4}"},
        "Font": {"$type": "fontFamily", "$value": "{Font.Family.Body}"},
        "Weight": {"$type": "fontWeight", "$value": "{Font.Weight.Bold}"},
    }
}

LAYOUT_TOKENS = {
    "Layout": {
        "Gutter": {"$type": "dimension", "$value": "{Spacing.8}"},
    }
}


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_token_source(
    data_dir: Path,
    *,
    metadata: dict[str, Any] | None = None,
    theme: dict[str, Any] | None = None,
    modes: dict[str, dict[str, Any]] | None = None,
    component: dict[str, Any] | bool | None = None,
    layout: dict[str, Any] | bool | None = None,
) -> Path:
    """Write a complete token data directory and return it.

    Pass component=False or layout=False to leave that file out.
    """
    write_json(data_dir / "$metadata.json", metadata if metadata is not None else METADATA)
    write_json(
        data_dir / "brand-theme" / "dive-theme.json",
        theme if theme is not None else THEME_TOKENS,
    )
    mode_data = modes if modes is not None else {
        "light-mode": LIGHT_MODE_TOKENS,
        "dark-mode": DARK_MODE_TOKENS,
    }
    for name, tokens in mode_data.items():
        write_json(data_dir / "color-modes" / f"{name}.json", tokens)
    if component is not False:
        write_json(
            data_dir / "components" / "component.json",
            component if component is not None else COMPONENT_TOKENS,
        )
    if layout is not False:
        write_json(
            data_dir / "layouts" / "layout.json",
            layout if layout is not None else LAYOUT_TOKENS,
        )
    return data_dir


@pytest.fixture
def token_data_dir(tmp_path: Path) -> Path:
    """Token data directory with theme, two modes, component and layout files."""
    return write_token_source(tmp_path / "data")


@pytest.fixture
def pipeline_config(token_data_dir: Path, tmp_path: Path) -> TokenPipeConfig:
    """Config pointing at token_data_dir, writing into tmp_path/css-vars."""
    return TokenPipeConfig(data_dir=token_data_dir, output_dir=tmp_path / "css-vars")


@pytest.fixture(autouse=True)
def _reset_global_runtime_manager():
    """Each test starts without a global runtime manager."""
    reset_runtime_manager()
    yield
    reset_runtime_manager()


@pytest.fixture
def make_token_source(tmp_path: Path):
    """Factory writing a customised token data directory under tmp_path."""

    def _make(name: str = "custom", **layers: Any) -> TokenPipeConfig:
        data_dir = write_token_source(tmp_path / name, **layers)
        return TokenPipeConfig(data_dir=data_dir, output_dir=tmp_path / f"{name}-out")

    return _make
