"""Command-line actions: prompts, Ex commands and search submission."""

from __future__ import annotations

from functools import partial
from typing import Callable, Dict, List, cast

from vimdoc_engine.buffer import NO_OP, NOT_FOUND
from vimdoc_engine.modes.base_mode import Invocation, ModeContext
from vimdoc_engine.modes.command_mode import CommandLineMode
from vimdoc_engine.modes.controller import EditorMode
from vimdoc_engine.runtime import telemetry

CommandHandler = Callable[[ModeContext, List[str]], None]


def _command_line(context: ModeContext) -> CommandLineMode:
    if context.modes is None:
        raise RuntimeError("command line requires a mode controller")
    return cast(CommandLineMode, context.modes.handler_for(EditorMode.COMMAND))


def open_ex_prompt(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    _command_line(context).open(":")
    return None


def open_search_forward(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    _command_line(context).open("/")
    return None


def open_search_backward(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    _command_line(context).open("?")
    return None


def command_backspace(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    if not _command_line(context).backspace():
        context.modes.transition(EditorMode.NORMAL, trigger="<BS>")
    return None


def submit_command_line(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    command_line = _command_line(context)
    prompt = command_line.prompt
    text = command_line.take()
    context.bus.emit("command.submit", f"{prompt}{text}")
    if prompt in ("/", "?"):
        _submit_search(context, text, "forward" if prompt == "/" else "backward")
        return None
    _run_ex(context, text.strip())
    return None


def _submit_search(context: ModeContext, pattern: str, direction: str) -> None:
    if context.search is None:
        return
    cursor = context.buffer.cursor
    found = context.search.find(pattern, cursor.position, direction)  # type: ignore[arg-type]
    if found is NOT_FOUND:
        context.bus.emit("search.not_found", pattern or context.search.last_pattern)
        return
    cursor.set_position(found, past_end=False)


def _run_ex(context: ModeContext, text: str) -> None:
    if not text:
        return
    parts = text.split()
    name, args = parts[0], parts[1:]
    if name.isdigit():
        _goto_line(context, int(name))
        return
    handler = _COMMAND_HANDLERS.get(name)
    if handler is None:
        telemetry.record_event("command.unknown", level="warning", data={"command": name})
        context.bus.emit("command.error", name)
        return
    handler(context, args)


def _goto_line(context: ModeContext, number: int) -> None:
    document = context.buffer.document
    row = max(0, min(number, document.line_count()) - 1)
    line = document.line_at(row)
    context.buffer.cursor.set_position((row, len(line) - len(line.lstrip())), past_end=False)


def _handle_echo(context: ModeContext, args: List[str]) -> None:
    context.bus.emit("command.echo", " ".join(args))


def _handle_write(context: ModeContext, args: List[str], *, force: bool = False) -> None:
    _emit_write(context, args, force=force)


def _handle_quit(context: ModeContext, args: List[str], *, force: bool = False) -> None:
    del args
    _emit_quit(context, force=force)


def _handle_wq(context: ModeContext, args: List[str], *, force: bool = False) -> None:
    _emit_write(context, args, force=force)
    _emit_quit(context, force=force)


def _handle_undo(context: ModeContext, args: List[str]) -> None:
    del args
    buffer = context.buffer
    landed = buffer.history.undo(buffer.cursor.position)
    if landed is NO_OP:
        context.bus.emit("history.noop", "undo")
        return
    buffer.cursor.set_position(landed, past_end=False)


def _handle_redo(context: ModeContext, args: List[str]) -> None:
    del args
    buffer = context.buffer
    landed = buffer.history.redo()
    if landed is NO_OP:
        context.bus.emit("history.noop", "redo")
        return
    buffer.cursor.set_position(landed, past_end=False)


def _emit_write(context: ModeContext, args: List[str], *, force: bool) -> None:
    payload = {
        "force": force,
        "args": list(args),
        "text": context.buffer.text,
    }
    context.bus.emit("command.write", payload)


def _emit_quit(context: ModeContext, *, force: bool) -> None:
    context.bus.emit("command.quit", {"force": force})


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "echo": _handle_echo,
    "write": _handle_write,
    "w": _handle_write,
    "write!": partial(_handle_write, force=True),
    "w!": partial(_handle_write, force=True),
    "quit": _handle_quit,
    "q": _handle_quit,
    "quit!": partial(_handle_quit, force=True),
    "q!": partial(_handle_quit, force=True),
    "wq": _handle_wq,
    "wq!": partial(_handle_wq, force=True),
    "x": _handle_wq,
    "x!": partial(_handle_wq, force=True),
    "exit": _handle_wq,
    "exit!": partial(_handle_wq, force=True),
    "undo": _handle_undo,
    "u": _handle_undo,
    "redo": _handle_redo,
    "red": _handle_redo,
}


__all__ = [
    "command_backspace",
    "open_ex_prompt",
    "open_search_backward",
    "open_search_forward",
    "submit_command_line",
]
