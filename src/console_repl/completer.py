"""Command name completion, hinting and highlighting for console_repl.

The module-level functions are pure queries against a CommandRegistry. The
classes adapt them to prompt_toolkit's Completer, AutoSuggest and Lexer
interfaces, which the prompt session calls while the user is typing.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from console_repl.constants import (
    DEFAULT_COMPLETION_COUNT_CUTOFF,
    DEFAULT_WORD_BREAK_CHARACTERS,
)
from console_repl.types import Candidate, Hint

if TYPE_CHECKING:
    from prompt_toolkit.buffer import Buffer

    from console_repl.command_registry import CommandRegistry

_WHITESPACE_RE = re.compile(r"\s")


def hint_for(
    registry: CommandRegistry, text: str, length: int, color: str,
) -> Hint | None:
    """Return the first command name starting with *text*, or None."""
    if length <= 0:
        return None
    matches = registry.prefix_range(text)
    if not matches:
        return None
    return Hint(text=matches[0][0], color=color)


def completions_for(
    registry: CommandRegistry, text: str, color: str,
) -> list[Candidate]:
    """Return every command name starting with *text*, sorted by name."""
    return [
        Candidate(text=name, color=color, description=cmd.description)
        for name, cmd in registry.prefix_range(text)
    ]


def highlight_length(registry: CommandRegistry, text: str) -> int:
    """Return how many leading characters of *text* name a registered command.

    The command-name span runs up to the first whitespace character. It is
    highlighted only if it is exactly a registered name; otherwise 0.
    """
    match = _WHITESPACE_RE.search(text)
    span = text if match is None else text[: match.start()]
    if span and registry.get(span) is not None:
        return len(span)
    return 0


def current_word(text: str, word_break_characters: str) -> str:
    """Return the trailing part of *text* after the last word-break character."""
    for index in range(len(text) - 1, -1, -1):
        if text[index] in word_break_characters:
            return text[index + 1 :]
    return text


class CommandAutoSuggest(AutoSuggest):
    """Greyed-out suggestion of the rest of the first matching command name."""

    def __init__(self, registry: CommandRegistry, color: str) -> None:
        self._registry = registry
        self._color = color

    def get_suggestion(self, buffer: Buffer, document: Document) -> Suggestion | None:
        text = document.text_before_cursor
        hint = hint_for(self._registry, text, len(text), self._color)
        if hint is None or len(hint.text) <= len(text):
            return None
        return Suggestion(hint.text[len(text) :])


class CommandCompleter(Completer):
    """prompt-toolkit Completer for command names.

    Offers the command names that start with the whole input before the
    cursor, so arguments are never completed. Accepting a candidate replaces
    only the last word, where words are separated by any of
    *word_break_characters*. At most *max_completions* candidates are
    yielded; with *complete_on_empty* off, an empty input yields nothing.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        color: str,
        *,
        word_break_characters: str = DEFAULT_WORD_BREAK_CHARACTERS,
        complete_on_empty: bool = True,
        max_completions: int = DEFAULT_COMPLETION_COUNT_CUTOFF,
    ) -> None:
        self._registry = registry
        self._color = color
        self.word_break_characters = word_break_characters
        self.complete_on_empty = complete_on_empty
        self.max_completions = max_completions

    def get_completions(
        self,
        document: Document,
        complete_event: CompleteEvent,
    ) -> Iterable[Completion]:
        """Yield completions for the current input state."""
        text = document.text_before_cursor
        if not text and not self.complete_on_empty:
            return

        # Candidates match the whole input; only the last word is replaced.
        word = current_word(text, self.word_break_characters)
        offset = len(text) - len(word)
        candidates = completions_for(self._registry, text, self._color)
        for candidate in candidates[: self.max_completions]:
            yield Completion(
                text=candidate.text[offset:],
                start_position=-len(word),
                display=candidate.text,
                display_meta=candidate.description,
                style=f"fg:{candidate.color}",
            )


class CommandLexer(Lexer):
    """Colors the command name when it exactly matches a registered command."""

    def __init__(self, registry: CommandRegistry, color: str) -> None:
        self._registry = registry
        self._color = color

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        length = highlight_length(self._registry, document.text)

        def get_line(lineno: int) -> StyleAndTextTuples:
            try:
                line = lines[lineno]
            except IndexError:
                return []
            if lineno != 0 or length == 0:
                return [("", line)]
            return [(f"fg:{self._color} bold", line[:length]), ("", line[length:])]

        return get_line
