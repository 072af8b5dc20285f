"""Tests for config_loader: reading [console] and [terminal] from TOML."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from console_repl.config_loader import LoadedConfig, apply_loaded_config, load_config
from console_repl.types import Config, TerminalOptions


def _write(tmp_path: Path, content: str) -> str:
    config_file = tmp_path / "config.toml"
    config_file.write_text(content, encoding="utf-8")
    return str(config_file)


class TestValidToml:
    def test_console_section(self, tmp_path: Path):
        path = _write(tmp_path, '[console]\nprompt = "$ "\nhistory_path = "h.txt"\n')
        result = load_config(path)
        assert result.prompt == "$ "
        assert result.history_path == "h.txt"
        assert "console" in result.raw

    def test_terminal_section(self, tmp_path: Path):
        path = _write(
            tmp_path,
            "[terminal]\nmax_history_size = 50\ndouble_tab_completion = true\n"
            'word_break_characters = " "\n',
        )
        result = load_config(path)
        assert result.terminal == {
            "max_history_size": 50,
            "double_tab_completion": True,
            "word_break_characters": " ",
        }

    def test_no_known_sections(self, tmp_path: Path):
        path = _write(tmp_path, '[other]\nkey = "value"\n')
        result = load_config(path)
        assert result.prompt is None
        assert result.history_path is None
        assert result.terminal == {}
        assert result.raw["other"]["key"] == "value"


class TestInvalidValues:
    def test_unknown_terminal_option(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = _write(tmp_path, "[terminal]\nfancy = true\n")
        with caplog.at_level(logging.WARNING):
            result = load_config(path)
        assert result.terminal == {}
        assert "fancy" in caplog.text

    def test_mistyped_terminal_option(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = _write(tmp_path, '[terminal]\nmax_history_size = "lots"\n')
        with caplog.at_level(logging.WARNING):
            result = load_config(path)
        assert result.terminal == {}
        assert "max_history_size" in caplog.text

    def test_bool_not_accepted_as_int(self, tmp_path: Path):
        path = _write(tmp_path, "[terminal]\ncompletion_count_cutoff = true\n")
        assert load_config(path).terminal == {}

    def test_int_not_accepted_as_bool(self, tmp_path: Path):
        path = _write(tmp_path, "[terminal]\nno_color = 1\n")
        assert load_config(path).terminal == {}

    def test_non_string_prompt(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = _write(tmp_path, "[console]\nprompt = 3\n")
        with caplog.at_level(logging.WARNING):
            result = load_config(path)
        assert result.prompt is None
        assert "prompt" in caplog.text


class TestMissingFile:
    def test_creates_template(self, tmp_path: Path):
        config_file = tmp_path / "config.toml"
        result = load_config(str(config_file))
        assert result == LoadedConfig()
        content = config_file.read_text(encoding="utf-8")
        assert "[console]" in content
        assert "[terminal]" in content

    def test_template_loads_as_defaults(self, tmp_path: Path):
        config_file = tmp_path / "config.toml"
        load_config(str(config_file))
        result = load_config(str(config_file))
        assert result.prompt is None
        assert result.terminal == {}

    def test_creates_parent_dirs(self, tmp_path: Path):
        config_file = tmp_path / "subdir" / "nested" / "config.toml"
        load_config(str(config_file))
        assert config_file.exists()


class TestMalformedToml:
    def test_invalid_toml(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = _write(tmp_path, "this is not valid toml [[[")
        with caplog.at_level(logging.WARNING):
            result = load_config(path)
        assert result == LoadedConfig()
        assert "Malformed TOML" in caplog.text

    def test_empty_file(self, tmp_path: Path):
        assert load_config(_write(tmp_path, "")) == LoadedConfig()


class TestApplyLoadedConfig:
    def test_nothing_loaded_keeps_config(self):
        config = Config(default_prompt="> ")
        result = apply_loaded_config(config, LoadedConfig())
        assert result == config

    def test_values_applied(self):
        loaded = LoadedConfig(
            prompt="$ ",
            history_path="h.txt",
            terminal={"no_color": True, "completion_count_cutoff": 5},
        )
        result = apply_loaded_config(Config(app_version="1.2.3"), loaded)
        assert result.default_prompt == "$ "
        assert result.history_path == "h.txt"
        assert result.terminal.no_color is True
        assert result.terminal.completion_count_cutoff == 5
        assert result.terminal.unique_history is TerminalOptions().unique_history
        assert result.app_version == "1.2.3"

    def test_original_untouched(self):
        config = Config()
        apply_loaded_config(config, LoadedConfig(terminal={"no_color": True}))
        assert config.terminal.no_color is False


# --- Property-based tests ---


@pytest.mark.property
class TestConfigLoaderProperties:
    @given(
        content=st.one_of(
            st.just(b""),
            st.just(b"invalid toml [[["),
            st.just(b'[console]\nprompt = "> "\n'),
            st.just(b"[terminal]\nmax_history_size = []\n"),
            st.just(b"console = 1\nterminal = 2\n"),
            st.binary(min_size=0, max_size=100),
        ),
    )
    def test_never_raises(self, content: bytes):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "config.toml"
            config_file.write_bytes(content)
            result = load_config(str(config_file))
            assert isinstance(result, LoadedConfig)
            # whatever was accepted must also be applicable
            apply_loaded_config(Config(), result)

    def test_missing_file_does_not_raise(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_file = Path(tmpdir) / "nonexistent.toml"
            assert isinstance(load_config(str(config_file)), LoadedConfig)
