from io import StringIO
from unittest.mock import MagicMock

import pytest
from rich.console import Console as RichConsole

from console_repl.command_registry import CommandRegistry
from console_repl.console import Console
from console_repl.terminal import TerminalShell
from console_repl.types import Config, Context, TerminalOptions, Theme


@pytest.fixture
def registry():
    return CommandRegistry()


@pytest.fixture
def default_config():
    return Config()


@pytest.fixture
def default_theme():
    return Theme()


@pytest.fixture
def sample_context():
    return Context(arguments=("a", "b"))


@pytest.fixture
def shell():
    """A TerminalShell writing plain text into a StringIO."""
    rich_console = RichConsole(
        file=StringIO(), force_terminal=False, color_system=None, width=200, highlight=False,
    )
    return TerminalShell(Theme(), TerminalOptions(), console=rich_console)


@pytest.fixture
def terminal_mode():
    return MagicMock()


@pytest.fixture
def console(shell, terminal_mode):
    return Console(Config(app_version="2.0.0"), terminal=shell, terminal_mode=terminal_mode)
