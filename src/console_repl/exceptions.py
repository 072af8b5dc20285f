class ConsoleReplError(Exception):
    """Base exception for all console_repl errors."""


class ConfigError(ConsoleReplError):
    """Raised when a console resource cannot be set up (e.g. the history file)."""


class TerminalError(ConsoleReplError):
    """Raised when the terminal mode (stdin echo) cannot be changed."""


class QuitRequestedError(ConsoleReplError):
    """Raised by the exit command to end the read loop."""
