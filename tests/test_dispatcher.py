from __future__ import annotations

import pytest

from vimdoc_engine import Engine, EngineConfig
from vimdoc_engine.buffer import OutOfBounds
from vimdoc_engine.dispatch import CountParser
from vimdoc_engine.keymaps import Binding, Command, CommandKind, KeySequence, KeymapRegistry
from vimdoc_engine.keymaps.defaults import load_default_keymaps
from vimdoc_engine.runtime import telemetry


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_engine(text: str = "", **config) -> Engine:
    return Engine(EngineConfig(initial_text=text, **config))


def make_engine_with(commands: list[tuple[Command, tuple[str, ...]]], text: str, **kwargs) -> Engine:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    for command, keys in commands:
        registry.register_command(command)
        registry.register_binding(
            Binding(
                id=f"normal.{command.id}",
                mode="normal",
                sequence=KeySequence.from_strings(*keys),
                command_id=command.id,
            )
        )
    return Engine(EngineConfig(initial_text=text), registry=registry, **kwargs)


def double_x_command(calls: list) -> Command:
    return Command(
        id="test.xx",
        kind=CommandKind.EDIT,
        handler=lambda context, invocation: calls.append(invocation.keys),
        modes=("normal",),
    )


def test_count_parser_treats_leading_zero_as_key() -> None:
    parser = CountParser()

    assert not parser.accepts("0")
    parser.push("1")
    assert parser.accepts("0")
    parser.push("0")
    assert parser.take() == 10
    assert parser.take() is None
    assert not parser.accepts("<C-a>")


def test_operator_waits_for_motion() -> None:
    engine = make_engine("abc\ndef")

    outcome = engine.handle_key("d")

    assert outcome.is_pending
    assert outcome.message == "operator_pending"
    assert engine.dispatcher.pending_keys == ("d",)
    assert engine.text == "abc\ndef"


def test_doubled_operator_is_linewise() -> None:
    engine = make_engine("abc\ndef")

    outcomes = engine.feed("d", "d")

    assert outcomes[-1].is_consumed
    assert outcomes[-1].command == "operator.delete"
    assert outcomes[-1].transaction is not None
    assert engine.text == "def"
    assert engine.cursor == (0, 0)
    assert engine.dispatcher.pending_keys == ()


def test_counts_multiply() -> None:
    engine = make_engine("one two three four")

    engine.feed("2", "d", "w")
    assert engine.text == "three four"

    engine = make_engine("a b c d")
    engine.feed("d", "3", "w")
    assert engine.text == "d"


def test_count_before_edit_repeats_it() -> None:
    engine = make_engine("abcdef")

    outcome = engine.feed("3", "x")[-1]

    assert outcome.command == "edit.delete_char"
    assert engine.text == "def"


def test_zero_without_count_is_line_start() -> None:
    engine = make_engine("abcdef")
    engine.feed("$")

    engine.feed("0")

    assert engine.cursor == (0, 0)


def test_multi_digit_count() -> None:
    engine = make_engine("a" * 20)

    engine.feed("1", "2", "l")

    assert engine.cursor == (0, 12)


def test_argument_motion_under_operator() -> None:
    engine = make_engine("abcabc")

    engine.feed("d", "t")
    assert engine.dispatcher.has_pending
    engine.feed("c")

    assert engine.text == "cabc"


def test_escape_cancels_pending_state() -> None:
    engine = make_engine("abc")

    outcome = engine.feed("2", "d", "<Esc>")[-1]

    assert outcome.is_ignored
    assert outcome.message == "cancelled"
    assert not engine.dispatcher.has_pending
    assert engine.feed("x")[-1].command == "edit.delete_char"
    assert engine.text == "bc"


def test_unknown_key_discards_operator() -> None:
    engine = make_engine("abc")

    outcome = engine.feed("d", "z")[-1]

    assert outcome.message == "operator_discarded"
    assert engine.text == "abc"
    assert not engine.dispatcher.has_pending


def test_mismatched_operator_pair_is_ignored() -> None:
    engine = make_engine("abc")

    outcome = engine.feed("d", "y")[-1]

    assert outcome.message == "operator_mismatch"
    assert engine.text == "abc"


def test_unbound_key_in_normal_mode_is_ignored() -> None:
    engine = make_engine("abc")

    outcome = engine.handle_key("Z")

    assert outcome.is_ignored
    assert outcome.message == "unbound"


def test_pending_operator_times_out() -> None:
    clock = FakeClock()
    engine = make_engine_with([], "abc", clock=clock)
    engine.feed("d")

    assert engine.dispatcher.deadline == pytest.approx(1.0)
    assert engine.process_timeouts() is None
    clock.now = 5.0
    outcome = engine.process_timeouts()

    assert outcome is not None and outcome.message == "timeout"
    assert not engine.dispatcher.has_pending
    assert engine.text == "abc"


def test_expired_state_is_dropped_before_next_key() -> None:
    clock = FakeClock()
    engine = make_engine_with([], "abc", clock=clock)
    engine.feed("d")
    clock.now = 5.0

    engine.feed("l")

    assert engine.cursor == (0, 1)
    assert engine.text == "abc"


def test_longer_binding_wins_when_completed() -> None:
    calls: list = []
    engine = make_engine_with([(double_x_command(calls), ("x", "x"))], "abc")

    first = engine.handle_key("x")
    assert first.is_pending
    outcome = engine.handle_key("x")

    assert outcome.command == "test.xx"
    assert calls == [("x", "x")]
    assert engine.text == "abc"


def test_held_match_runs_on_miss_then_key_is_replayed() -> None:
    calls: list = []
    engine = make_engine_with([(double_x_command(calls), ("x", "x"))], "abc")

    outcome = engine.feed("x", "l")[-1]

    assert engine.text == "bc"
    assert engine.cursor == (0, 1)
    assert outcome.command == "motion.char_right"
    assert calls == []


def test_held_match_runs_on_timeout() -> None:
    calls: list = []
    engine = make_engine_with([(double_x_command(calls), ("x", "x"))], "abc")
    engine.feed("x")

    outcome = engine.force_timeout()

    assert outcome is not None and outcome.command == "edit.delete_char"
    assert engine.text == "bc"
    assert engine.force_timeout() is None


def test_failing_command_is_rejected_without_changes() -> None:
    def broken(context, invocation):
        return context.buffer.replace_range((0, 0), (9, 0), "x", label="broken")

    command = Command(id="test.broken", kind=CommandKind.EDIT, handler=broken, modes=("normal",))
    engine = make_engine_with([(command, ("Q",))], "abc")

    outcome = engine.handle_key("Q")

    assert outcome.is_ignored
    assert outcome.message == OutOfBounds.__name__
    assert engine.text == "abc"


def test_rejected_command_is_reported_once_as_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    failures: list = []
    events: list = []
    monkeypatch.setattr(telemetry.SpanHandle, "fail", lambda self, reason: failures.append(reason))
    monkeypatch.setattr(
        telemetry, "record_event", lambda name, **kwargs: events.append((name, kwargs.get("level")))
    )

    def broken(context, invocation):
        return context.buffer.replace_range((0, 0), (9, 0), "x", label="broken")

    command = Command(id="test.broken", kind=CommandKind.EDIT, handler=broken, modes=("normal",))
    engine = make_engine_with([(command, ("Q",))], "abc")

    engine.handle_key("Q")

    assert failures == []
    assert [event for event in events if event[0] == "command.rejected"] == [
        ("command.rejected", "warning")
    ]


def test_disabled_mode_makes_switch_unavailable() -> None:
    engine = make_engine("abc", enabled_modes=frozenset({"normal", "insert"}))

    outcome = engine.handle_key("v")

    assert outcome.is_ignored
    assert outcome.message == "mode_unavailable"
    assert engine.mode.value == "normal"


def test_executed_commands_are_announced() -> None:
    engine = make_engine("abc")
    seen: list = []
    engine.bus.subscribe("command.executed", seen.append)

    engine.feed("l")

    assert seen[0]["command"] == "motion.char_right"
