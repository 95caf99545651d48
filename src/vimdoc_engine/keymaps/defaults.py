"""Built-in commands and the bindings that seed every scope."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from vimdoc_engine.actions import command as command_actions
from vimdoc_engine.actions import core as core_actions
from vimdoc_engine.actions import editing as edit_actions
from vimdoc_engine.actions import navigation as nav_actions
from vimdoc_engine.actions import operators as operator_actions
from vimdoc_engine.actions import visual as visual_actions
from vimdoc_engine.actions.motions import MOTIONS

from .models import Binding, Command, CommandKind, KeySequence
from .registry import KeymapRegistry

NORMAL, INSERT, VISUAL, REPLACE, COMMAND, OPERATOR = (
    "normal",
    "insert",
    "visual",
    "replace",
    "command",
    "operator",
)

_MOTION_SCOPES = (NORMAL, VISUAL, OPERATOR)
_ARROW_SCOPES = _MOTION_SCOPES + (INSERT, REPLACE)


def _motion(name: str, description: str, *, arrows: bool = False) -> Command:
    spec = MOTIONS[name]
    return Command(
        id=f"motion.{name}",
        kind=CommandKind.MOTION,
        handler=nav_actions.move,
        modes=_ARROW_SCOPES if arrows else _MOTION_SCOPES,
        description=description,
        motion=spec,
        takes_argument=spec.needs_argument,
    )


DEFAULT_COMMANDS: tuple[Command, ...] = (
    _motion("char_left", "Cursor left", arrows=True),
    _motion("char_right", "Cursor right", arrows=True),
    _motion("line_up", "Cursor up", arrows=True),
    _motion("line_down", "Cursor down", arrows=True),
    _motion("word_forward", "Start of next word"),
    _motion("big_word_forward", "Start of next WORD"),
    _motion("word_backward", "Start of previous word"),
    _motion("big_word_backward", "Start of previous WORD"),
    _motion("word_end", "End of word"),
    _motion("big_word_end", "End of WORD"),
    _motion("line_start", "Start of line", arrows=True),
    _motion("first_non_blank", "First non-blank character"),
    _motion("line_end", "End of line", arrows=True),
    _motion("document_start", "First line"),
    _motion("document_end", "Last line, or line [count]"),
    _motion("find_char_forward", "Find character forward"),
    _motion("find_char_backward", "Find character backward"),
    _motion("till_char_forward", "Till character forward"),
    _motion("till_char_backward", "Till character backward"),
    Command(
        id="search.next",
        kind=CommandKind.MOTION,
        handler=nav_actions.search_next,
        modes=(NORMAL, VISUAL),
        description="Repeat last search",
    ),
    Command(
        id="search.previous",
        kind=CommandKind.MOTION,
        handler=nav_actions.search_previous,
        modes=(NORMAL, VISUAL),
        description="Repeat last search in the opposite direction",
    ),
    Command(
        id="operator.delete",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.delete,
        modes=(NORMAL, OPERATOR),
        description="Delete over a motion",
    ),
    Command(
        id="operator.change",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.change,
        modes=(NORMAL, OPERATOR),
        description="Change over a motion",
        switch_to=INSERT,
    ),
    Command(
        id="operator.yank",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.yank,
        modes=(NORMAL, OPERATOR),
        description="Yank over a motion",
    ),
    Command(
        id="visual.delete",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.delete,
        modes=(VISUAL,),
        description="Delete the selection",
        switch_to=NORMAL,
    ),
    Command(
        id="visual.change",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.change,
        modes=(VISUAL,),
        description="Change the selection",
        switch_to=INSERT,
    ),
    Command(
        id="visual.yank",
        kind=CommandKind.OPERATOR,
        handler=operator_actions.yank,
        modes=(VISUAL,),
        description="Yank the selection",
        switch_to=NORMAL,
    ),
    Command(
        id="visual.swap_anchor",
        kind=CommandKind.MOTION,
        handler=visual_actions.swap_selection_anchor,
        modes=(VISUAL,),
        description="Jump to the other end of the selection",
    ),
    Command(
        id="mode.insert",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.noop,
        modes=(NORMAL,),
        description="Insert before the cursor",
        switch_to=INSERT,
    ),
    Command(
        id="mode.append",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.append,
        modes=(NORMAL,),
        description="Insert after the cursor",
        switch_to=INSERT,
    ),
    Command(
        id="mode.append_line_end",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.append_line_end,
        modes=(NORMAL,),
        description="Insert at the end of the line",
        switch_to=INSERT,
    ),
    Command(
        id="mode.insert_line_start",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.insert_line_start,
        modes=(NORMAL,),
        description="Insert before the first non-blank",
        switch_to=INSERT,
    ),
    Command(
        id="mode.open_below",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.open_line_below,
        modes=(NORMAL,),
        description="Open a line below",
        switch_to=INSERT,
    ),
    Command(
        id="mode.open_above",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.open_line_above,
        modes=(NORMAL,),
        description="Open a line above",
        switch_to=INSERT,
    ),
    Command(
        id="mode.visual",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.noop,
        modes=(NORMAL,),
        description="Start Visual mode",
        switch_to=VISUAL,
    ),
    Command(
        id="mode.replace",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.noop,
        modes=(NORMAL,),
        description="Start Replace mode",
        switch_to=REPLACE,
    ),
    Command(
        id="mode.normal",
        kind=CommandKind.MODE_SWITCH,
        handler=core_actions.noop,
        modes=(INSERT, VISUAL, REPLACE, COMMAND),
        description="Return to Normal mode",
        switch_to=NORMAL,
    ),
    Command(
        id="command.open_ex",
        kind=CommandKind.MODE_SWITCH,
        handler=command_actions.open_ex_prompt,
        modes=(NORMAL,),
        description="Open the Ex command line",
        switch_to=COMMAND,
    ),
    Command(
        id="command.search_forward",
        kind=CommandKind.MODE_SWITCH,
        handler=command_actions.open_search_forward,
        modes=(NORMAL,),
        description="Search forward",
        switch_to=COMMAND,
    ),
    Command(
        id="command.search_backward",
        kind=CommandKind.MODE_SWITCH,
        handler=command_actions.open_search_backward,
        modes=(NORMAL,),
        description="Search backward",
        switch_to=COMMAND,
    ),
    Command(
        id="command.submit",
        kind=CommandKind.MODE_SWITCH,
        handler=command_actions.submit_command_line,
        modes=(COMMAND,),
        description="Run the command line",
        switch_to=NORMAL,
    ),
    Command(
        id="command.backspace",
        kind=CommandKind.EDIT,
        handler=command_actions.command_backspace,
        modes=(COMMAND,),
        description="Delete the last typed character",
    ),
    Command(
        id="edit.delete_char",
        kind=CommandKind.EDIT,
        handler=edit_actions.delete_char,
        modes=(NORMAL,),
        description="Delete characters under the cursor",
    ),
    Command(
        id="edit.delete_char_before",
        kind=CommandKind.EDIT,
        handler=edit_actions.delete_char_before,
        modes=(NORMAL,),
        description="Delete characters before the cursor",
    ),
    Command(
        id="edit.delete_to_line_end",
        kind=CommandKind.EDIT,
        handler=edit_actions.delete_to_line_end,
        modes=(NORMAL,),
        description="Delete to the end of the line",
    ),
    Command(
        id="edit.change_to_line_end",
        kind=CommandKind.EDIT,
        handler=edit_actions.delete_to_line_end,
        modes=(NORMAL,),
        description="Change to the end of the line",
        switch_to=INSERT,
    ),
    Command(
        id="edit.substitute",
        kind=CommandKind.EDIT,
        handler=edit_actions.delete_char,
        modes=(NORMAL,),
        description="Substitute characters",
        switch_to=INSERT,
    ),
    Command(
        id="edit.substitute_lines",
        kind=CommandKind.EDIT,
        handler=edit_actions.substitute_lines,
        modes=(NORMAL,),
        description="Substitute lines",
        switch_to=INSERT,
    ),
    Command(
        id="edit.join",
        kind=CommandKind.EDIT,
        handler=edit_actions.join_lines,
        modes=(NORMAL,),
        description="Join lines",
    ),
    Command(
        id="edit.put_after",
        kind=CommandKind.EDIT,
        handler=edit_actions.put_after,
        modes=(NORMAL,),
        description="Put after the cursor",
    ),
    Command(
        id="edit.put_before",
        kind=CommandKind.EDIT,
        handler=edit_actions.put_before,
        modes=(NORMAL,),
        description="Put before the cursor",
    ),
    Command(
        id="edit.replace_char",
        kind=CommandKind.EDIT,
        handler=edit_actions.replace_char,
        modes=(NORMAL,),
        description="Replace characters under the cursor",
        takes_argument=True,
    ),
    Command(
        id="history.undo",
        kind=CommandKind.EDIT,
        handler=core_actions.undo,
        modes=(NORMAL,),
        description="Undo",
    ),
    Command(
        id="history.redo",
        kind=CommandKind.EDIT,
        handler=core_actions.redo,
        modes=(NORMAL,),
        description="Redo",
    ),
    Command(
        id="register.select",
        kind=CommandKind.EDIT,
        handler=core_actions.select_register,
        modes=(NORMAL, VISUAL),
        description="Use a named register for the next delete, yank or put",
        takes_argument=True,
    ),
    Command(
        id="insert.backspace",
        kind=CommandKind.EDIT,
        handler=edit_actions.insert_backspace,
        modes=(INSERT,),
        description="Delete before the cursor",
    ),
    Command(
        id="insert.newline",
        kind=CommandKind.EDIT,
        handler=edit_actions.insert_newline,
        modes=(INSERT,),
        description="Split the line",
    ),
    Command(
        id="insert.tab",
        kind=CommandKind.EDIT,
        handler=edit_actions.insert_tab,
        modes=(INSERT,),
        description="Insert a tab",
    ),
    Command(
        id="replace.backspace",
        kind=CommandKind.EDIT,
        handler=edit_actions.replace_backspace,
        modes=(REPLACE,),
        description="Step back, restoring the replaced character",
    ),
)


def _bind(mode: str, keys: str | Sequence[str], command_id: str, *, name: str = "") -> Binding:
    tokens = (keys,) if isinstance(keys, str) else tuple(keys)
    suffix = name or command_id.split(".", 1)[-1]
    return Binding(
        id=f"{mode}.{suffix}",
        mode=mode,
        sequence=KeySequence.from_strings(*tokens),
        command_id=command_id,
    )


def _motion_bindings(
    scopes: Sequence[str], keys: Sequence[str | Sequence[str]], motion: str
) -> tuple[Binding, ...]:
    bindings = []
    for scope in scopes:
        for index, key in enumerate(keys):
            suffix = motion if index == 0 else f"{motion}.{index}"
            bindings.append(_bind(scope, key, f"motion.{motion}", name=suffix))
    return tuple(bindings)


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    *_motion_bindings(_MOTION_SCOPES, ("h", "<Left>"), "char_left"),
    *_motion_bindings(_MOTION_SCOPES, ("l", "<Right>"), "char_right"),
    *_motion_bindings(_MOTION_SCOPES, ("k", "<Up>"), "line_up"),
    *_motion_bindings(_MOTION_SCOPES, ("j", "<Down>"), "line_down"),
    *_motion_bindings((INSERT, REPLACE), ("<Left>",), "char_left"),
    *_motion_bindings((INSERT, REPLACE), ("<Right>",), "char_right"),
    *_motion_bindings((INSERT, REPLACE), ("<Up>",), "line_up"),
    *_motion_bindings((INSERT, REPLACE), ("<Down>",), "line_down"),
    *_motion_bindings((INSERT, REPLACE), ("<Home>",), "line_start"),
    *_motion_bindings((INSERT, REPLACE), ("<End>",), "line_end"),
    *_motion_bindings(_MOTION_SCOPES, ("w",), "word_forward"),
    *_motion_bindings(_MOTION_SCOPES, ("W",), "big_word_forward"),
    *_motion_bindings(_MOTION_SCOPES, ("b",), "word_backward"),
    *_motion_bindings(_MOTION_SCOPES, ("B",), "big_word_backward"),
    *_motion_bindings(_MOTION_SCOPES, ("e",), "word_end"),
    *_motion_bindings(_MOTION_SCOPES, ("E",), "big_word_end"),
    *_motion_bindings(_MOTION_SCOPES, ("0", "<Home>"), "line_start"),
    *_motion_bindings(_MOTION_SCOPES, ("^",), "first_non_blank"),
    *_motion_bindings(_MOTION_SCOPES, ("$", "<End>"), "line_end"),
    *_motion_bindings(_MOTION_SCOPES, (("g", "g"),), "document_start"),
    *_motion_bindings(_MOTION_SCOPES, ("G",), "document_end"),
    *_motion_bindings(_MOTION_SCOPES, ("f",), "find_char_forward"),
    *_motion_bindings(_MOTION_SCOPES, ("F",), "find_char_backward"),
    *_motion_bindings(_MOTION_SCOPES, ("t",), "till_char_forward"),
    *_motion_bindings(_MOTION_SCOPES, ("T",), "till_char_backward"),
    _bind(NORMAL, "n", "search.next"),
    _bind(NORMAL, "N", "search.previous"),
    _bind(VISUAL, "n", "search.next"),
    _bind(VISUAL, "N", "search.previous"),
    _bind(NORMAL, "d", "operator.delete"),
    _bind(NORMAL, "c", "operator.change"),
    _bind(NORMAL, "y", "operator.yank"),
    _bind(OPERATOR, "d", "operator.delete"),
    _bind(OPERATOR, "c", "operator.change"),
    _bind(OPERATOR, "y", "operator.yank"),
    _bind(NORMAL, "i", "mode.insert"),
    _bind(NORMAL, "a", "mode.append"),
    _bind(NORMAL, "A", "mode.append_line_end"),
    _bind(NORMAL, "I", "mode.insert_line_start"),
    _bind(NORMAL, "o", "mode.open_below"),
    _bind(NORMAL, "O", "mode.open_above"),
    _bind(NORMAL, "v", "mode.visual"),
    _bind(NORMAL, "R", "mode.replace"),
    _bind(NORMAL, ":", "command.open_ex"),
    _bind(NORMAL, "/", "command.search_forward"),
    _bind(NORMAL, "?", "command.search_backward"),
    _bind(NORMAL, "x", "edit.delete_char"),
    _bind(NORMAL, "<Del>", "edit.delete_char", name="delete_char.1"),
    _bind(NORMAL, "X", "edit.delete_char_before"),
    _bind(NORMAL, "D", "edit.delete_to_line_end"),
    _bind(NORMAL, "C", "edit.change_to_line_end"),
    _bind(NORMAL, "s", "edit.substitute"),
    _bind(NORMAL, "S", "edit.substitute_lines"),
    _bind(NORMAL, "J", "edit.join"),
    _bind(NORMAL, "p", "edit.put_after"),
    _bind(NORMAL, "P", "edit.put_before"),
    _bind(NORMAL, "r", "edit.replace_char"),
    _bind(NORMAL, "u", "history.undo"),
    _bind(NORMAL, "<C-r>", "history.redo"),
    _bind(NORMAL, '"', "register.select"),
    _bind(VISUAL, '"', "register.select"),
    _bind(VISUAL, "d", "visual.delete"),
    _bind(VISUAL, "x", "visual.delete", name="delete.1"),
    _bind(VISUAL, "c", "visual.change"),
    _bind(VISUAL, "s", "visual.change", name="change.1"),
    _bind(VISUAL, "y", "visual.yank"),
    _bind(VISUAL, "o", "visual.swap_anchor"),
    _bind(VISUAL, "<Esc>", "mode.normal"),
    _bind(VISUAL, "v", "mode.normal", name="normal.1"),
    _bind(INSERT, "<Esc>", "mode.normal"),
    _bind(INSERT, "<BS>", "insert.backspace"),
    _bind(INSERT, "<CR>", "insert.newline"),
    _bind(INSERT, "<Tab>", "insert.tab"),
    _bind(REPLACE, "<Esc>", "mode.normal"),
    _bind(REPLACE, "<BS>", "replace.backspace"),
    _bind(COMMAND, "<Esc>", "mode.normal"),
    _bind(COMMAND, "<CR>", "command.submit"),
    _bind(COMMAND, "<BS>", "command.backspace"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    default_sequence_timeout_ms: int | None = None,
    include_commands: Sequence[str] | None = None,
    exclude_commands: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in commands and bindings for every scope.

    Bindings whose command was filtered out are skipped.
    """

    allowed = _build_filters(include_commands, exclude_commands)
    registered = set()
    for command in DEFAULT_COMMANDS:
        if not _selected(command.id, allowed):
            continue
        registry.register_command(command, replace=replace)
        registered.add(command.id)

    for binding in DEFAULT_BINDINGS:
        if binding.command_id not in registered:
            continue
        registry.register_binding(
            _binding_with_timeout(binding, default_sequence_timeout_ms),
            replace=replace,
        )

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


def _binding_with_timeout(binding: Binding, timeout_ms: int | None) -> Binding:
    if timeout_ms is None:
        return binding
    sequence = KeySequence(binding.sequence.strokes, timeout_ms=timeout_ms)
    return replace(binding, sequence=sequence)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = ["DEFAULT_BINDINGS", "DEFAULT_COMMANDS", "load_default_keymaps"]
