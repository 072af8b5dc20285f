"""REPL core for console_repl - evaluates one input line at a time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from console_repl.input_parser import parse_line
from console_repl.types import Context

if TYPE_CHECKING:
    from console_repl.command_registry import CommandRegistry
    from console_repl.types import HistoryRecorder, OutputSink

logger = logging.getLogger(__name__)


class LineEvaluator:
    """Parses a line, records it in history and dispatches to the matching command."""

    def __init__(
        self,
        registry: CommandRegistry,
        history: HistoryRecorder,
        output: OutputSink,
    ) -> None:
        self._registry = registry
        self._history = history
        self._output = output

    def evaluate(self, raw: str) -> None:
        """Evaluate a single raw input line.

        Empty lines are ignored entirely. Any other line is added to history
        before lookup, whether or not a command matches. Exceptions raised by
        the command handler are not caught here.
        """
        parsed = parse_line(raw)
        if parsed is None:
            return

        self._history.add(parsed.line)

        cmd = self._registry.find_for_invocation(parsed.name)
        if cmd is None:
            self._output.show_error(f"Command not found: {parsed.name}")
            return

        logger.debug("Dispatching '%s' with %d argument(s)", cmd.name, len(parsed.arguments))
        cmd.invoke(Context(arguments=parsed.arguments))
