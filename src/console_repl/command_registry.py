"""Command registry for console_repl - ordered, prefix-indexed store of commands."""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterator

from console_repl.types import Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Registry mapping command names to commands.

    Names are kept in a sorted list alongside the dict so that prefix ranges
    and iteration come out in ascending lexicographic order.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._names: list[str] = []

    def register(self, command: Command) -> None:
        """Register a command by name. An existing command of that name is replaced."""
        if command.name in self._commands:
            logger.debug("Replacing command '%s'", command.name)
        else:
            bisect.insort(self._names, command.name)
        self._commands[command.name] = command

    def unregister(self, name: str) -> None:
        """Remove a command by name. Unknown names are ignored."""
        if self._commands.pop(name, None) is None:
            return
        index = bisect.bisect_left(self._names, name)
        del self._names[index]

    def count(self) -> int:
        return len(self._commands)

    def get(self, name: str) -> Command | None:
        """Look up a command by exact name. Returns None if not found."""
        return self._commands.get(name)

    def longest_prefix(self, token: str) -> Command | None:
        """Return the command whose name is the longest prefix of *token*."""
        for end in range(len(token), 0, -1):
            cmd = self._commands.get(token[:end])
            if cmd is not None:
                return cmd
        return None

    def find_for_invocation(self, token: str) -> Command | None:
        """Resolve *token* to the command it invokes.

        A longest-prefix match only counts when it covers the whole token,
        so ``ex`` never resolves to ``exit``.
        """
        cmd = self.longest_prefix(token)
        if cmd is not None and len(cmd.name) == len(token):
            return cmd
        return None

    def prefix_range(self, prefix: str) -> list[tuple[str, Command]]:
        """Return (name, command) pairs whose name starts with *prefix*, sorted by name."""
        result: list[tuple[str, Command]] = []
        start = bisect.bisect_left(self._names, prefix)
        for name in self._names[start:]:
            if not name.startswith(prefix):
                break
            result.append((name, self._commands[name]))
        return result

    def list_all(self) -> list[Command]:
        """Return all registered commands sorted by name."""
        return [self._commands[name] for name in self._names]

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self.list_all())
