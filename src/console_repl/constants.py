"""Central constants for console_repl."""

# Prompt shown when the host never sets one.
DEFAULT_PROMPT = ">> "

# Default terminal configuration (see TerminalOptions).
DEFAULT_MAX_HISTORY_SIZE = 10000
DEFAULT_WORD_BREAK_CHARACTERS = " \t,%!;:=*~^'\"/?<>|[](){}"
DEFAULT_COMPLETION_COUNT_CUTOFF = 256

# Location of the optional TOML configuration file.
DEFAULT_CONFIG_PATH = ".console/config.toml"

# Timestamp format used for history entries, truncated to milliseconds.
HISTORY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
