from __future__ import annotations

import pytest

from vimdoc_engine.buffer import Buffer
from vimdoc_engine.modes import (
    MODE_HANDLERS,
    CommandLineMode,
    EditorMode,
    KeyInput,
    ModeBus,
    ModeContext,
    ModeController,
    ModeTransitionError,
    NormalMode,
)


def build_controller(text: str = "abc", **kwargs) -> ModeController:
    buffer = Buffer.from_text(text)
    context = ModeContext(buffer=buffer, registers=buffer.registers, bus=ModeBus())
    controller = ModeController(context, **kwargs)
    for handler_cls in MODE_HANDLERS:
        controller.register_mode(handler_cls)
    return controller


def record(controller: ModeController, event: str) -> list:
    seen: list = []
    controller.context.bus.subscribe(event, seen.append)
    return seen


def test_starts_in_normal_mode() -> None:
    controller = build_controller()

    assert controller.current is EditorMode.NORMAL
    assert isinstance(controller.active_handler, NormalMode)
    assert controller.context.modes is controller


def test_transition_emits_mode_changed() -> None:
    controller = build_controller()
    events = record(controller, "mode.changed")

    controller.transition(EditorMode.INSERT, trigger="i")

    assert controller.current is EditorMode.INSERT
    assert events == [
        {"from": EditorMode.NORMAL, "to": EditorMode.INSERT, "trigger": "i"}
    ]


def test_transition_to_current_mode_is_silent() -> None:
    controller = build_controller()
    events = record(controller, "mode.changed")

    assert controller.transition(EditorMode.NORMAL) is EditorMode.NORMAL
    assert events == []


@pytest.mark.parametrize(
    "path",
    [
        (EditorMode.INSERT, EditorMode.VISUAL),
        (EditorMode.REPLACE, EditorMode.INSERT),
        (EditorMode.COMMAND, EditorMode.VISUAL),
    ],
)
def test_illegal_transitions_raise(path) -> None:
    controller = build_controller()
    first, second = path
    controller.transition(first)

    with pytest.raises(ModeTransitionError) as excinfo:
        controller.transition(second)

    assert excinfo.value.current is first
    assert excinfo.value.target is second
    assert controller.current is first


def test_visual_may_switch_to_insert() -> None:
    controller = build_controller()
    controller.transition(EditorMode.VISUAL)

    controller.transition(EditorMode.INSERT)

    assert controller.current is EditorMode.INSERT


def test_disabled_mode_is_rejected() -> None:
    controller = build_controller(enabled_modes={EditorMode.INSERT})

    assert not controller.can_transition(EditorMode.VISUAL)
    with pytest.raises(ModeTransitionError):
        controller.transition(EditorMode.VISUAL)
    assert EditorMode.NORMAL in controller.enabled


def test_missing_handler_is_rejected() -> None:
    buffer = Buffer.from_text("")
    context = ModeContext(buffer=buffer, registers=buffer.registers, bus=ModeBus())
    controller = ModeController(context)
    controller.register_mode(NormalMode)

    assert not controller.can_transition(EditorMode.INSERT)
    with pytest.raises(ModeTransitionError):
        controller.transition(EditorMode.INSERT)


def test_duplicate_registration_rejected() -> None:
    controller = build_controller()

    with pytest.raises(ValueError):
        controller.register_mode(NormalMode)


def test_leaving_insert_steps_cursor_left() -> None:
    controller = build_controller("abc")
    cursor = controller.context.buffer.cursor
    controller.transition(EditorMode.INSERT)
    cursor.set_position((0, 3))

    controller.transition(EditorMode.NORMAL)

    assert cursor.position == (0, 2)


def test_insert_session_is_one_undo_step() -> None:
    controller = build_controller("")
    buffer = controller.context.buffer
    controller.transition(EditorMode.INSERT)
    buffer.insert_text("a")
    buffer.insert_text("b")
    controller.transition(EditorMode.NORMAL)

    buffer.history.undo()

    assert buffer.text == ""


def test_visual_exit_collapses_selection() -> None:
    controller = build_controller("abcdef")
    cursor = controller.context.buffer.cursor
    selections = record(controller, "visual.selection")
    controller.transition(EditorMode.VISUAL)
    cursor.extend_selection("char_right", 2)

    controller.transition(EditorMode.NORMAL)

    assert selections == [{"anchor": (0, 0), "head": (0, 0)}]
    assert cursor.primary.is_point
    assert cursor.position == (0, 2)


def test_command_line_collects_text() -> None:
    controller = build_controller()
    starts = record(controller, "command.start")
    ends = record(controller, "command.end")
    handler = controller.handler_for(EditorMode.COMMAND)
    assert isinstance(handler, CommandLineMode)
    handler.open("/")
    controller.transition(EditorMode.COMMAND)

    for char in "ab":
        assert handler.handle_text(KeyInput(char))
    assert not handler.handle_text(KeyInput("<Left>"))
    assert handler.display == "/ab"
    assert handler.backspace()
    controller.transition(EditorMode.NORMAL)

    assert starts == ["/"]
    assert ends == ["a"]
    assert handler.text == ""


def test_command_line_rejects_unknown_prompt() -> None:
    handler = build_controller().handler_for(EditorMode.COMMAND)

    with pytest.raises(ValueError):
        handler.open("!")
