"""Core data types and protocols for console_repl."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias

from console_repl.constants import (
    DEFAULT_COMPLETION_COUNT_CUTOFF,
    DEFAULT_MAX_HISTORY_SIZE,
    DEFAULT_PROMPT,
    DEFAULT_WORD_BREAK_CHARACTERS,
)

# --- Configuration ---


@dataclass
class Theme:
    # rich styles
    error_color: str = "red"
    info_color: str = "cyan"
    command_color: str = "green"
    timestamp_color: str = "blue"
    # prompt_toolkit styles
    suggestion_color: str = "ansiyellow"
    highlight_color: str = "ansibrightgreen"


@dataclass
class TerminalOptions:
    max_history_size: int = DEFAULT_MAX_HISTORY_SIZE
    word_break_characters: str = DEFAULT_WORD_BREAK_CHARACTERS
    completion_count_cutoff: int = DEFAULT_COMPLETION_COUNT_CUTOFF
    double_tab_completion: bool = False
    complete_on_empty: bool = True
    beep_on_ambiguous_completion: bool = True
    no_color: bool = False
    unique_history: bool = True


@dataclass
class Config:
    app_name: str = "console_repl"
    app_version: str = "0.0.0"
    default_prompt: str = DEFAULT_PROMPT
    history_path: str | None = None
    terminal: TerminalOptions = field(default_factory=TerminalOptions)
    theme: Theme = field(default_factory=Theme)


# --- Commands ---


@dataclass(frozen=True)
class Context:
    """Arguments of a single command invocation (tokens after the name)."""

    arguments: tuple[str, ...] = ()


CommandHandler: TypeAlias = Callable[[Context], None]


@dataclass
class Command:
    name: str
    description: str
    handler: CommandHandler

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Command name must not be empty")

    def invoke(self, ctx: Context) -> None:
        self.handler(ctx)


# --- History ---


@dataclass(frozen=True)
class HistoryEntry:
    text: str
    timestamp: str


# --- Completion bridge results ---


@dataclass(frozen=True)
class Hint:
    text: str
    color: str


@dataclass(frozen=True)
class Candidate:
    text: str
    color: str
    description: str = ""


# --- Collaborator interfaces ---


class TerminalMode(Protocol):
    def set_echo(self, enable: bool) -> None: ...


class OutputSink(Protocol):
    def show_error(self, text: str) -> None: ...


class HistoryRecorder(Protocol):
    def add(self, text: str) -> None: ...
