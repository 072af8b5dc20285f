"""OS-level control of stdin echo, used when reading secrets."""

from __future__ import annotations

import logging
import sys

from console_repl.exceptions import TerminalError
from console_repl.types import TerminalMode

logger = logging.getLogger(__name__)

# Windows console input mode flag (wincon.h).
_ENABLE_ECHO_INPUT = 0x0004
_STD_INPUT_HANDLE = -10


class PosixTerminalMode:
    """Toggles the ECHO local flag of a TTY via termios."""

    def __init__(self, fd: int | None = None) -> None:
        self._fd = fd

    def set_echo(self, enable: bool) -> None:
        import termios

        fd = self._fd if self._fd is not None else sys.stdin.fileno()
        try:
            attrs = termios.tcgetattr(fd)
            if enable:
                attrs[3] |= termios.ECHO
            else:
                attrs[3] &= ~termios.ECHO
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
        except (termios.error, OSError) as e:
            raise TerminalError(f"Failed to set stdin echo: {e}") from e


class WindowsTerminalMode:
    """Toggles ENABLE_ECHO_INPUT on the Windows console input handle."""

    def set_echo(self, enable: bool) -> None:
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        handle = kernel32.GetStdHandle(_STD_INPUT_HANDLE)
        mode = wintypes.DWORD()
        if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
            raise TerminalError("Failed to read console mode")
        if enable:
            new_mode = mode.value | _ENABLE_ECHO_INPUT
        else:
            new_mode = mode.value & ~_ENABLE_ECHO_INPUT
        if not kernel32.SetConsoleMode(handle, new_mode):
            raise TerminalError("Failed to set console mode")


class NullTerminalMode:
    """Used when stdin is not a terminal: there is no echo to toggle."""

    def set_echo(self, enable: bool) -> None:
        logger.debug("stdin is not a terminal; echo %s ignored", "on" if enable else "off")


def default_terminal_mode() -> TerminalMode:
    """Pick the terminal mode implementation for the current stdin."""
    try:
        is_tty = sys.stdin is not None and sys.stdin.isatty()
    except ValueError:
        # stdin already closed
        is_tty = False
    if not is_tty:
        return NullTerminalMode()
    if sys.platform == "win32":
        return WindowsTerminalMode()
    return PosixTerminalMode()
