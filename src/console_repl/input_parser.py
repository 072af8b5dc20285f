from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedLine:
    line: str
    name: str
    arguments: tuple[str, ...] = ()


def parse_line(raw: str) -> ParsedLine | None:
    """Split a raw input line into a command name and its arguments.

    Returns None for empty/whitespace-only input. Otherwise the line is
    trimmed and split on runs of whitespace; the first token is the command
    name and the remaining tokens are the arguments, in order. Quotes and
    escapes are not interpreted.
    """
    stripped = raw.strip()
    if not stripped:
        return None

    tokens = stripped.split()
    return ParsedLine(line=stripped, name=tokens[0], arguments=tuple(tokens[1:]))
