"""Tests for tokenpipe.toml configuration loading."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from tokenpipe.core.errors import ConfigError
from tokenpipe.core.manifest import TokenPipeConfig, load_config


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TOKENPIPE_DATA_DIR", raising=False)
        monkeypatch.delenv("TOKENPIPE_OUTPUT_DIR", raising=False)
        config = load_config()
        assert config.data_dir.resolve() == (tmp_path / "src" / "tokens" / "data").resolve()
        assert config.root_mode == "light-mode"
        assert config.emit_json

    def test_relative_paths_resolve_against_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / "tokenpipe.toml"
        manifest.write_text(
            '[tokens]\ndata_dir = "tokens"\noutput_dir = "dist/css"\n'
            'root_mode = "day"\npre_imports = ["./fonts.css"]\n'
        )
        with patch.dict("os.environ", {}, clear=True):
            config = load_config(manifest)
        assert config.data_dir == tmp_path.resolve() / "tokens"
        assert config.output_dir == tmp_path.resolve() / "dist" / "css"
        assert config.root_mode == "day"
        assert config.pre_imports == ["./fonts.css"]
        assert config.post_imports == []

    def test_env_overrides(self, tmp_path: Path) -> None:
        manifest = tmp_path / "tokenpipe.toml"
        manifest.write_text('[tokens]\ndata_dir = "tokens"\n')
        with patch.dict("os.environ", {"TOKENPIPE_DATA_DIR": str(tmp_path / "elsewhere")}):
            config = load_config(manifest)
        assert config.data_dir == tmp_path / "elsewhere"

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        manifest = tmp_path / "tokenpipe.toml"
        manifest.write_text("[tokens\n")
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(manifest)

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            ("data_dir = 3", "data_dir"),
            ("root_mode = ''", "root_mode"),
            ("emit_json = 'yes'", "emit_json"),
            ("post_imports = 'a.css'", "post_imports"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str, message: str) -> None:
        manifest = tmp_path / "tokenpipe.toml"
        manifest.write_text(f"[tokens]\n{body}\n")
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ConfigError, match=message):
                load_config(manifest)

    def test_tokens_must_be_table(self, tmp_path: Path) -> None:
        manifest = tmp_path / "tokenpipe.toml"
        manifest.write_text('tokens = "nope"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(manifest)


class TestWithOverrides:
    def test_replaces_given_dirs(self, tmp_path: Path) -> None:
        config = TokenPipeConfig().with_overrides(output_dir=tmp_path)
        assert config.output_dir == tmp_path
        assert config.data_dir == TokenPipeConfig().data_dir

    def test_no_changes_returns_same(self) -> None:
        config = TokenPipeConfig()
        assert config.with_overrides() is config
