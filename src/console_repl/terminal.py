from __future__ import annotations

import dataclasses
import itertools
import logging
from typing import IO, TYPE_CHECKING, Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.output import ColorDepth
from prompt_toolkit.styles import Style
from rich.console import Console, RenderableType
from rich.text import Text

from console_repl.completer import CommandAutoSuggest, CommandCompleter, CommandLexer
from console_repl.history import ConsoleHistory
from console_repl.types import TerminalOptions, Theme

if TYPE_CHECKING:
    from console_repl.command_registry import CommandRegistry

logger = logging.getLogger(__name__)


class TerminalShell:
    """Rich-based output rendering and prompt_toolkit-based async line input."""

    def __init__(
        self,
        theme: Theme | None = None,
        options: TerminalOptions | None = None,
        *,
        console: Console | None = None,
    ) -> None:
        self._theme = theme or Theme()
        self._options = options or TerminalOptions()
        self._console = console or Console(highlight=False)
        self._history = ConsoleHistory(
            max_size=self._options.max_history_size,
            unique=self._options.unique_history,
        )
        self._completer: CommandCompleter | None = None
        self._auto_suggest: CommandAutoSuggest | None = None
        self._lexer: CommandLexer | None = None
        # Created on first read so that building a shell never touches the tty.
        self._prompt_session: PromptSession[str] | None = None

        self._kb = KeyBindings()

        @self._kb.add("tab")
        def _complete_handler(event: Any) -> None:
            buffer = event.current_buffer
            if buffer.complete_state:
                buffer.complete_next()
                return
            if self.should_beep(buffer.document):
                event.app.output.bell()
            buffer.start_completion(insert_common_part=True)

        self._apply_options()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    async def read_input(self, prompt: str) -> str | None:
        """Read one line. Returns None at end of input (Ctrl+D).

        Ctrl+C abandons the line being edited and returns an empty string.
        """
        session = self._get_prompt_session()
        try:
            return await session.prompt_async(
                ANSI(prompt),
                completer=self._completer,
                auto_suggest=self._auto_suggest,
                lexer=self._lexer,
                complete_while_typing=not self._options.double_tab_completion,
                color_depth=ColorDepth.MONOCHROME if self._options.no_color else None,
                style=Style.from_dict({"auto-suggestion": self._theme.suggestion_color}),
            )
        except EOFError:
            return None
        except KeyboardInterrupt:
            return ""

    def install_callbacks(self, registry: CommandRegistry) -> None:
        """Hook command-name completion, hints and highlighting into the prompt."""
        self._completer = CommandCompleter(
            registry,
            self._theme.suggestion_color,
            word_break_characters=self._options.word_break_characters,
            complete_on_empty=self._options.complete_on_empty,
            max_completions=self._options.completion_count_cutoff,
        )
        self._auto_suggest = CommandAutoSuggest(registry, self._theme.suggestion_color)
        self._lexer = CommandLexer(registry, self._theme.highlight_color)

    def should_beep(self, document: Document) -> bool:
        """Whether completing *document* is ambiguous and the bell is enabled."""
        if not self._options.beep_on_ambiguous_completion or self._completer is None:
            return False
        completions = self._completer.get_completions(
            document, CompleteEvent(completion_requested=True),
        )
        return len(list(itertools.islice(completions, 2))) > 1

    def clear_line(self) -> None:
        """Discard whatever is being typed at a running prompt."""
        session = self._prompt_session
        if session is not None and session.app.is_running:
            session.default_buffer.reset()
            session.app.invalidate()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str) -> None:
        """Write text (ANSI escapes allowed) exactly, adding no newline of its own."""
        # from_ansi splits on lines and would drop trailing newlines
        body = text.rstrip("\n")
        self._console.print(Text.from_ansi(body), end="\n" * (len(text) - len(body)))
        self._console.file.flush()

    def print(self, renderable: RenderableType = "", **kwargs: Any) -> None:
        self._console.print(renderable, **kwargs)

    def show_info(self, text: str) -> None:
        """Render an informational message."""
        self._console.print(Text(text, style=self._theme.info_color))

    def show_error(self, text: str) -> None:
        """Render an error message."""
        self._console.print(Text(text, style=self._theme.error_color))

    def clear_screen(self) -> None:
        self._console.clear()

    def set_output_file(self, file: IO[str]) -> None:
        """Send all further output to *file* instead of stdout."""
        self._console.file = file

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, **changes: Any) -> None:
        """Update terminal options by name (see TerminalOptions)."""
        self._options = dataclasses.replace(self._options, **changes)
        self._apply_options()

    def _apply_options(self) -> None:
        options = self._options
        self._history.unique = options.unique_history
        self._history.set_max_size(options.max_history_size)
        self._console.no_color = options.no_color
        if self._completer is not None:
            self._completer.word_break_characters = options.word_break_characters
            self._completer.complete_on_empty = options.complete_on_empty
            self._completer.max_completions = options.completion_count_cutoff
        logger.debug("Terminal options: %s", options)

    def _get_prompt_session(self) -> PromptSession[str]:
        if self._prompt_session is None:
            self._prompt_session = PromptSession(
                history=self._history,
                key_bindings=self._kb,
            )
        return self._prompt_session

    @property
    def options(self) -> TerminalOptions:
        return self._options

    @property
    def history(self) -> ConsoleHistory:
        return self._history

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def console(self) -> Console:
        """Expose the rich console used as the output stream."""
        return self._console
