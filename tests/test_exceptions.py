"""Tests for the exception hierarchy."""

import pytest

from console_repl.exceptions import (
    ConfigError,
    ConsoleReplError,
    QuitRequestedError,
    TerminalError,
)


class TestExceptionHierarchy:
    def test_base_exception(self):
        e = ConsoleReplError("base error")
        assert str(e) == "base error"
        assert isinstance(e, Exception)

    def test_config_error_inherits(self):
        e = ConfigError("bad history path")
        assert isinstance(e, ConsoleReplError)
        assert str(e) == "bad history path"

    def test_terminal_error_inherits(self):
        assert isinstance(TerminalError("not a tty"), ConsoleReplError)

    def test_quit_requested_inherits(self):
        assert isinstance(QuitRequestedError(), ConsoleReplError)


class TestExceptionCatching:
    def test_catch_all_with_base(self):
        for exc in [ConfigError("c"), TerminalError("t"), QuitRequestedError()]:
            with pytest.raises(ConsoleReplError):
                raise exc

    def test_catch_specific(self):
        with pytest.raises(TerminalError):
            raise TerminalError("specific")

    def test_chained_cause(self):
        with pytest.raises(ConfigError) as exc_info:
            try:
                raise OSError("disk full")
            except OSError as e:
                raise ConfigError("cannot save") from e
        assert isinstance(exc_info.value.__cause__, OSError)
