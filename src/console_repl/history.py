"""Timestamped command history, shared with the prompt session for navigation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from prompt_toolkit.history import History

from console_repl.constants import DEFAULT_MAX_HISTORY_SIZE, HISTORY_TIMESTAMP_FORMAT
from console_repl.types import HistoryEntry

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().strftime(HISTORY_TIMESTAMP_FORMAT)[:-3]


class ConsoleHistory(History):
    """prompt_toolkit History whose entries are recorded by the line evaluator.

    Lines accepted by the prompt session are not stored automatically;
    ``add()`` is the only way in. File format matches prompt_toolkit's
    FileHistory: a ``# <timestamp>`` line followed by ``+<text>`` lines.
    """

    def __init__(
        self, max_size: int = DEFAULT_MAX_HISTORY_SIZE, unique: bool = True,
    ) -> None:
        super().__init__()
        self.max_size = max_size
        self.unique = unique
        self._entries: list[HistoryEntry] = []

    # --- prompt_toolkit History interface ---

    def load_history_strings(self) -> Iterable[str]:
        # Newest first.
        for entry in reversed(self._entries):
            yield entry.text

    def store_string(self, string: str) -> None:
        pass

    def append_string(self, string: str) -> None:
        """Ignore lines appended by the prompt session; see ``add()``."""

    # --- Recording and scanning ---

    def add(self, text: str, timestamp: str | None = None) -> None:
        """Record a line, dropping an older duplicate when history is unique."""
        if self.unique:
            self._entries = [e for e in self._entries if e.text != text]
        self._entries.append(HistoryEntry(text=text, timestamp=timestamp or _now()))
        self._trim()
        self._refresh()

    def set_max_size(self, max_size: int) -> None:
        self.max_size = max_size
        self._trim()
        self._refresh()

    def scan(self) -> list[HistoryEntry]:
        """Return all entries, oldest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []
        self._refresh()

    def __len__(self) -> int:
        return len(self._entries)

    # --- Persistence ---

    def load_file(self, path: str | Path) -> None:
        """Append the entries stored in *path* (in file order) to the history."""
        loaded: list[HistoryEntry] = []
        timestamp: str | None = None
        lines: list[str] = []

        def flush() -> None:
            if lines:
                text = "\n".join(lines)
                loaded.append(HistoryEntry(text=text, timestamp=timestamp or _now()))
                lines.clear()

        with open(path, "rb") as f:
            for raw in f:
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                if line.startswith("+"):
                    lines.append(line[1:])
                else:
                    flush()
                    if line.startswith("# "):
                        timestamp = line[2:]

        flush()
        self._entries.extend(loaded)
        if self.unique:
            self._dedupe()
        self._trim()
        self._refresh()
        logger.debug("Loaded %d history entries from %s", len(self._entries), path)

    def save_file(self, path: str | Path) -> None:
        """Write all entries to *path*, replacing its content."""
        with open(path, "w", encoding="utf-8") as f:
            for entry in self._entries:
                f.write(f"\n# {entry.timestamp}\n")
                for line in entry.text.split("\n"):
                    f.write(f"+{line}\n")
        logger.debug("Saved %d history entries to %s", len(self._entries), path)

    # --- Internal helpers ---

    def _dedupe(self) -> None:
        """Keep only the newest entry of each text, preserving order."""
        seen: set[str] = set()
        kept: list[HistoryEntry] = []
        for entry in reversed(self._entries):
            if entry.text not in seen:
                seen.add(entry.text)
                kept.append(entry)
        kept.reverse()
        self._entries = kept

    def _trim(self) -> None:
        if self.max_size >= 0 and len(self._entries) > self.max_size:
            del self._entries[: len(self._entries) - self.max_size]

    def _refresh(self) -> None:
        """Keep the prompt session's navigation list in sync with the entries."""
        self._loaded_strings = list(self.load_history_strings())
        self._loaded = True
