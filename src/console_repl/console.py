from __future__ import annotations

import asyncio
import dataclasses
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from console_repl.builtin_commands import get_builtin_commands
from console_repl.command_registry import CommandRegistry
from console_repl.config_loader import apply_loaded_config, load_config
from console_repl.constants import DEFAULT_CONFIG_PATH
from console_repl.exceptions import ConfigError, QuitRequestedError
from console_repl.repl import LineEvaluator
from console_repl.session import Session
from console_repl.terminal import TerminalShell
from console_repl.terminal_mode import default_terminal_mode
from console_repl.types import Command, Config, Context, TerminalMode, TerminalOptions

if TYPE_CHECKING:
    from rich.console import Console as RichConsole

logger = logging.getLogger(__name__)


class Console:
    """Interactive command console embedded in a host application.

    Owns the command registry, the terminal adapter and the read loop.
    Instances share no state, so several consoles can coexist.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        terminal: TerminalShell | None = None,
        terminal_mode: TerminalMode | None = None,
        stdin: IO[str] | None = None,
    ) -> None:
        self._config = config or Config()
        self._registry = CommandRegistry()
        if terminal is None:
            terminal = TerminalShell(self._config.theme, self._config.terminal)
        else:
            terminal.configure(**dataclasses.asdict(self._config.terminal))
        self._terminal = terminal
        self._terminal_mode = terminal_mode or default_terminal_mode()
        self._stdin = stdin
        self._session = Session(self._config.default_prompt)
        self._evaluator = LineEvaluator(self._registry, self._terminal.history, self._terminal)
        self._running = False
        self._quit_requested = False
        self._task: asyncio.Task[None] | None = None

        self._terminal.install_callbacks(self._registry)
        if self._config.history_path is not None:
            self.set_history_file_path(self._config.history_path)

    @classmethod
    def from_config_file(
        cls,
        path: str = DEFAULT_CONFIG_PATH,
        config: Config | None = None,
        **kwargs: Any,
    ) -> Console:
        """Create a console from *config* with the TOML file at *path* applied on top.

        A missing file is created from the default template. Keyword arguments
        are passed to the constructor.
        """
        loaded = load_config(path)
        return cls(apply_loaded_config(config or Config(), loaded), **kwargs)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_command(self, command: Command) -> None:
        """Register a command; a command with the same name is replaced."""
        self._registry.register(command)

    def remove_command_by_name(self, name: str) -> None:
        self._registry.unregister(name)

    def command_count(self) -> int:
        return self._registry.count()

    def invoke_command_by_name(self, name: str, context: Context | None = None) -> bool:
        """Invoke a command directly, bypassing line parsing and history.

        Returns False if no command has exactly that name.
        """
        cmd = self._registry.find_for_invocation(name)
        if cmd is None:
            return False
        cmd.invoke(context if context is not None else Context())
        return True

    def evaluate_line(self, line: str) -> None:
        self._evaluator.evaluate(line)

    def add_default_commands(self) -> None:
        """Add exit, help, history, clear and version."""
        for cmd in get_builtin_commands(self._registry, self._terminal, self._config.app_version):
            self.add_command(cmd)

    # ------------------------------------------------------------------
    # Prompt and history
    # ------------------------------------------------------------------

    @property
    def prompt(self) -> str:
        return self._session.prompt

    @property
    def default_prompt(self) -> str:
        return self._session.default_prompt

    def set_prompt(self, prompt: str) -> None:
        self._session.set_prompt(prompt)

    def set_default_prompt(self, prompt: str) -> None:
        self._session.set_default_prompt(prompt)

    def reset_prompt(self) -> None:
        self._session.reset_prompt()

    @property
    def history_file_path(self) -> str | None:
        return self._session.history_path

    def set_history_file_path(self, path: str) -> None:
        """Use *path* for persisted history, creating it if needed, and load it.

        Raises ConfigError if the file cannot be created or read.
        """
        history_path = Path(path)
        try:
            if not history_path.exists():
                history_path.parent.mkdir(parents=True, exist_ok=True)
                history_path.touch()
            self._terminal.history.load_file(history_path)
        except OSError as e:
            raise ConfigError(f"Cannot use history file {path}: {e}") from e
        self._session.history_path = str(history_path)

    # ------------------------------------------------------------------
    # Terminal configuration
    # ------------------------------------------------------------------

    def add_default_configuration(self) -> None:
        """Reset every terminal option to its default value."""
        self._terminal.configure(**dataclasses.asdict(TerminalOptions()))

    def set_max_history_size(self, size: int) -> None:
        self._terminal.configure(max_history_size=size)

    def set_word_break_characters(self, characters: str) -> None:
        self._terminal.configure(word_break_characters=characters)

    def set_completion_count_cutoff(self, cutoff: int) -> None:
        self._terminal.configure(completion_count_cutoff=cutoff)

    def set_double_tab_completion(self, enable: bool) -> None:
        self._terminal.configure(double_tab_completion=enable)

    def set_complete_on_empty(self, enable: bool) -> None:
        self._terminal.configure(complete_on_empty=enable)

    def set_beep_on_ambiguous_completion(self, enable: bool) -> None:
        self._terminal.configure(beep_on_ambiguous_completion=enable)

    def set_no_color(self, enable: bool) -> None:
        self._terminal.configure(no_color=enable)

    def set_unique_history(self, enable: bool) -> None:
        self._terminal.configure(unique_history=enable)

    # ------------------------------------------------------------------
    # Output and direct input
    # ------------------------------------------------------------------

    @property
    def output(self) -> RichConsole:
        """The rich console that host code can print to."""
        return self._terminal.console

    def set_output_file(self, file: IO[str]) -> None:
        self._terminal.set_output_file(file)

    def set_stdin_echo(self, enable: bool) -> None:
        self._terminal_mode.set_echo(enable)
        self._session.echo = enable

    @contextmanager
    def echo_disabled(self) -> Iterator[None]:
        """Turn stdin echo off for the block, restoring the previous state on exit."""
        previous = self._session.echo
        self.set_stdin_echo(False)
        try:
            yield
        finally:
            self.set_stdin_echo(previous)

    def read_line(self, prompt: str) -> str:
        """Print *prompt* and read one line from stdin. Raises EOFError at end of input."""
        self._terminal.write(prompt)
        stream = self._stdin if self._stdin is not None else sys.stdin
        line = stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    def read_secret(self, prompt: str) -> str:
        """Like read_line, but the typed text is not echoed."""
        with self.echo_disabled():
            secret = self.read_line(prompt)
            # The user's Enter was not echoed either.
            self._terminal.write("\n")
        return secret

    # ------------------------------------------------------------------
    # Read loop
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start reading lines on the running event loop. No-op if already running."""
        if self._running:
            return
        # A task still waiting on a read after stop() is picked up again.
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._read_loop())
            self._task.add_done_callback(_log_loop_failure)
        self._running = True
        self._quit_requested = False
        logger.debug("Console started")

    def stop(self) -> None:
        """Stop reading after the current line. No-op if not running."""
        if not self._running:
            return
        self._running = False
        logger.debug("Console stopped")

    def running(self) -> bool:
        return self._running

    @property
    def quit_requested(self) -> bool:
        """True once the loop ended because of end of input or the exit command."""
        return self._quit_requested

    async def run(self) -> None:
        """Start the console and wait until the read loop ends.

        Exceptions raised by command handlers propagate from here. They are
        also logged, so a console driven by start() alone does not lose them.
        """
        self.start()
        if self._task is not None:
            await self._task

    async def _read_loop(self) -> None:
        try:
            while self._running:
                line = await self._terminal.read_input(self._session.prompt)
                if line is None:
                    logger.debug("End of input")
                    self._request_quit()
                    break
                try:
                    self._evaluator.evaluate(line)
                except QuitRequestedError:
                    self._request_quit()
        finally:
            self._running = False

    def _request_quit(self) -> None:
        self._quit_requested = True
        self._running = False

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the console.

        Clears the pending input line if running, saves history if a history
        file is set and restores stdin echo if it was turned off. Each step
        runs even if an earlier one fails.
        """
        try:
            if self._running:
                self._terminal.clear_line()
        finally:
            try:
                if self._session.history_path is not None:
                    self._terminal.history.save_file(self._session.history_path)
            finally:
                try:
                    if not self._session.echo:
                        self.set_stdin_echo(True)
                finally:
                    self._running = False
                    if self._task is not None and not self._task.done():
                        self._task.cancel()

    def __enter__(self) -> Console:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> Console:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def terminal(self) -> TerminalShell:
        return self._terminal

    @property
    def config(self) -> Config:
        return self._config


def _log_loop_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Console read loop failed: %s", exc, exc_info=exc)
