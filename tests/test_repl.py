"""Unit and property tests for the line evaluator.

Covers dispatch with arguments, empty-line handling, history recording,
unknown commands and handler error pass-through.
"""

from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from console_repl.command_registry import CommandRegistry
from console_repl.history import ConsoleHistory
from console_repl.repl import LineEvaluator
from console_repl.types import Command, Context


def _make_evaluator():
    registry = CommandRegistry()
    history = ConsoleHistory()
    output = MagicMock()
    return LineEvaluator(registry, history, output), registry, history, output


def _register(registry, name, handler=None):
    handler = handler or MagicMock()
    registry.register(Command(name=name, description="", handler=handler))
    return handler


class TestDispatch:
    def test_arguments_passed(self):
        evaluator, registry, _, output = _make_evaluator()
        handler = _register(registry, "hello-world")
        evaluator.evaluate("hello-world a b")
        handler.assert_called_once()
        ctx = handler.call_args[0][0]
        assert isinstance(ctx, Context)
        assert ctx.arguments == ("a", "b")
        output.show_error.assert_not_called()

    def test_no_arguments(self):
        evaluator, registry, _, _ = _make_evaluator()
        handler = _register(registry, "help")
        evaluator.evaluate("  help  ")
        assert handler.call_args[0][0].arguments == ()

    def test_partial_name_does_not_invoke(self):
        evaluator, registry, _, output = _make_evaluator()
        handler = _register(registry, "exit")
        evaluator.evaluate("ex")
        handler.assert_not_called()
        output.show_error.assert_called_once_with("Command not found: ex")

    def test_fresh_context_per_invocation(self):
        evaluator, registry, _, _ = _make_evaluator()
        handler = _register(registry, "cmd")
        evaluator.evaluate("cmd 1")
        evaluator.evaluate("cmd 2")
        first, second = (c[0][0] for c in handler.call_args_list)
        assert first is not second
        assert first.arguments == ("1",)
        assert second.arguments == ("2",)


class TestEmptyInput:
    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_blank_line_does_nothing(self, raw):
        evaluator, registry, history, output = _make_evaluator()
        handler = _register(registry, "help")
        evaluator.evaluate(raw)
        handler.assert_not_called()
        output.show_error.assert_not_called()
        assert history.scan() == []


class TestHistory:
    def test_trimmed_line_recorded(self):
        evaluator, registry, history, _ = _make_evaluator()
        _register(registry, "help")
        evaluator.evaluate("  help me  ")
        assert [e.text for e in history.scan()] == ["help me"]

    def test_unknown_command_still_recorded(self):
        evaluator, _, history, _ = _make_evaluator()
        evaluator.evaluate("frobnicate")
        assert [e.text for e in history.scan()] == ["frobnicate"]

    def test_recorded_before_handler_runs(self):
        evaluator, registry, history, _ = _make_evaluator()
        seen = []
        _register(registry, "peek", lambda ctx: seen.extend(e.text for e in history.scan()))
        evaluator.evaluate("peek")
        assert seen == ["peek"]


class TestUnknownCommand:
    def test_message(self):
        evaluator, _, _, output = _make_evaluator()
        evaluator.evaluate("frobnicate")
        output.show_error.assert_called_once_with("Command not found: frobnicate")

    def test_token_as_typed(self):
        evaluator, _, _, output = _make_evaluator()
        evaluator.evaluate("  FrobNicate --x  ")
        output.show_error.assert_called_once_with("Command not found: FrobNicate")

    def test_removed_command_not_found(self):
        evaluator, registry, _, output = _make_evaluator()
        handler = _register(registry, "exit")
        registry.unregister("exit")
        evaluator.evaluate("exit")
        handler.assert_not_called()
        output.show_error.assert_called_once_with("Command not found: exit")
        assert registry.count() == 0


class TestHandlerErrors:
    def test_exception_propagates(self):
        evaluator, registry, _, output = _make_evaluator()

        def bad_handler(ctx):
            raise ValueError("boom")

        _register(registry, "bad", bad_handler)
        with pytest.raises(ValueError, match="boom"):
            evaluator.evaluate("bad")
        output.show_error.assert_not_called()


class TestRegistryMutationFromHandler:
    def test_added_command_visible_on_next_line(self):
        evaluator, registry, _, output = _make_evaluator()
        late = MagicMock()

        def add_late(ctx):
            registry.register(Command(name="late", description="", handler=late))

        _register(registry, "add", add_late)
        evaluator.evaluate("add")
        evaluator.evaluate("late")
        late.assert_called_once()
        output.show_error.assert_not_called()

    def test_self_removal(self):
        evaluator, registry, _, output = _make_evaluator()
        _register(registry, "once", lambda ctx: registry.unregister("once"))
        evaluator.evaluate("once")
        evaluator.evaluate("once")
        output.show_error.assert_called_once_with("Command not found: once")


@pytest.mark.property
class TestUnknownCommandProperty:
    @settings(max_examples=100)
    @given(name=st.from_regex(r"[a-z][a-z-]{0,10}", fullmatch=True))
    def test_unregistered_name_reports_error(self, name):
        evaluator, _, history, output = _make_evaluator()
        evaluator.evaluate(name)
        output.show_error.assert_called_once_with(f"Command not found: {name}")
        assert len(history) == 1
