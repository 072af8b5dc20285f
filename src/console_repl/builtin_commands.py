from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from rich.text import Text

from console_repl.exceptions import QuitRequestedError
from console_repl.types import Command, Context

if TYPE_CHECKING:
    from console_repl.command_registry import CommandRegistry
    from console_repl.terminal import TerminalShell


def get_builtin_commands(
    registry: CommandRegistry,
    terminal: TerminalShell,
    app_version: str,
) -> list[Command]:
    """Build the default commands, binding each handler to the collaborators it uses."""
    return [
        Command(
            name="exit",
            description="Exit the application.",
            handler=_handle_exit,
        ),
        Command(
            name="help",
            description="Print help information.",
            handler=partial(_handle_help, registry, terminal),
        ),
        Command(
            name="history",
            description="Print command history.",
            handler=partial(_handle_history, terminal),
        ),
        Command(
            name="clear",
            description="Clear the screen.",
            handler=partial(_handle_clear, terminal),
        ),
        Command(
            name="version",
            description="Print the application version.",
            handler=partial(_handle_version, terminal, app_version),
        ),
    ]


def _handle_exit(ctx: Context) -> None:
    raise QuitRequestedError()


def _handle_help(registry: CommandRegistry, terminal: TerminalShell, ctx: Context) -> None:
    """List all registered commands with descriptions."""
    style = f"bold {terminal.theme.command_color}"
    terminal.print()
    terminal.print("List of commands:")
    terminal.print()
    for cmd in registry.list_all():
        line = Text()
        line.append(cmd.name, style=style)
        line.append(f": {cmd.description}")
        terminal.print(line)
    terminal.print()
    terminal.print(Text("Usage: <command> [arguments...]"))
    terminal.print()


def _handle_history(terminal: TerminalShell, ctx: Context) -> None:
    """Print each history entry with its index and timestamp."""
    for index, entry in enumerate(terminal.history.scan()):
        line = Text(f"{index:>4} ")
        line.append(entry.timestamp, style=terminal.theme.timestamp_color)
        line.append(f" {entry.text}")
        terminal.print(line)


def _handle_clear(terminal: TerminalShell, ctx: Context) -> None:
    terminal.clear_screen()


def _handle_version(terminal: TerminalShell, app_version: str, ctx: Context) -> None:
    terminal.print(Text(app_version))
