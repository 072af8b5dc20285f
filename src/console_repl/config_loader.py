from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from console_repl.constants import DEFAULT_CONFIG_PATH
from console_repl.types import Config, TerminalOptions

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATE = """\
# console_repl configuration file

[console]
# prompt = ">> "
# history_path = ".console/history.txt"

[terminal]
# max_history_size = 10000
# completion_count_cutoff = 256
# double_tab_completion = false
# complete_on_empty = true
# beep_on_ambiguous_completion = true
# no_color = false
# unique_history = true
"""

_TERMINAL_FIELDS: dict[str, type] = {
    f.name: type(getattr(TerminalOptions(), f.name))
    for f in dataclasses.fields(TerminalOptions)
}


@dataclass
class LoadedConfig:
    """Result of loading the console configuration file."""

    prompt: str | None = None
    history_path: str | None = None
    terminal: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)


def load_config(path: str = DEFAULT_CONFIG_PATH) -> LoadedConfig:
    """Load configuration from a TOML file.

    - Missing file: create default template, return empty LoadedConfig.
    - Malformed TOML: log warning, return empty LoadedConfig.
    - Valid TOML: extract [console] prompt/history_path and the recognized
      [terminal] options; unknown or mistyped options are logged and skipped.

    Never raises an exception.
    """
    config_path = Path(path)

    if not config_path.exists():
        _create_default_template(config_path)
        return LoadedConfig()

    try:
        content = config_path.read_bytes()
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return LoadedConfig()

    if not content:
        return LoadedConfig()

    try:
        raw = tomllib.loads(content.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        logger.warning("Malformed TOML in %s: %s", path, e)
        return LoadedConfig()

    loaded = LoadedConfig(raw=raw)

    console_section = raw.get("console")
    if isinstance(console_section, dict):
        loaded.prompt = _get_str(console_section, "prompt", path)
        loaded.history_path = _get_str(console_section, "history_path", path)

    terminal_section = raw.get("terminal")
    if isinstance(terminal_section, dict):
        loaded.terminal = _terminal_options(terminal_section, path)

    return loaded


def apply_loaded_config(config: Config, loaded: LoadedConfig) -> Config:
    """Return a copy of *config* with the values from the file applied on top."""
    changes: dict[str, Any] = {
        "terminal": dataclasses.replace(config.terminal, **loaded.terminal),
    }
    if loaded.prompt is not None:
        changes["default_prompt"] = loaded.prompt
    if loaded.history_path is not None:
        changes["history_path"] = loaded.history_path
    return dataclasses.replace(config, **changes)


def _get_str(section: dict[str, Any], key: str, path: str) -> str | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        logger.warning("Ignoring [console].%s in %s: expected a string", key, path)
        return None
    return value


def _terminal_options(section: dict[str, Any], path: str) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in section.items():
        expected = _TERMINAL_FIELDS.get(key)
        if expected is None:
            logger.warning("Ignoring unknown terminal option '%s' in %s", key, path)
            continue
        # bool is a subclass of int; keep them apart
        if type(value) is not expected:
            logger.warning(
                "Ignoring terminal option '%s' in %s: expected %s",
                key, path, expected.__name__,
            )
            continue
        options[key] = value
    return options


def _create_default_template(config_path: Path) -> None:
    """Create the default config template, creating parent directories if needed."""
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_DEFAULT_TEMPLATE, encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to create default config at %s: %s", config_path, e)
