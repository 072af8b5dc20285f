"""console_repl - an embeddable interactive command console."""

from console_repl.command_registry import CommandRegistry
from console_repl.console import Console
from console_repl.types import (
    Command,
    Config,
    Context,
    TerminalOptions,
    Theme,
)

__all__ = [
    "Command",
    "CommandRegistry",
    "Config",
    "Console",
    "Context",
    "TerminalOptions",
    "Theme",
]
