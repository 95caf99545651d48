from __future__ import annotations

from typing import Any, Dict, List

import pytest

from vimdoc_engine import Engine, EngineConfig
from vimdoc_engine.adapters.textual import (
    TextualEngineAdapter,
    TextualUIHooks,
    translate_textual_key,
)
from vimdoc_engine.buffer import EngineSnapshot


def make_engine(text: str = "") -> Engine:
    return Engine(EngineConfig(initial_text=text))


@pytest.mark.parametrize(
    ("key", "character", "expected"),
    [
        ("escape", None, ("<Esc>", None, ())),
        ("enter", "\r", ("<CR>", None, ())),
        ("colon", ":", (":", ":", ())),
        ("A", "A", ("A", "A", ())),
        ("space", " ", (" ", " ", ())),
        ("ctrl+r", "\x12", ("r", None, ("ctrl",))),
        ("ctrl+left", None, ("<Left>", None, ("ctrl",))),
        ("f5", None, ("f5", None, ())),
    ],
)
def test_translate_textual_key(key, character, expected) -> None:
    assert translate_textual_key(key, character) == expected


def test_adapter_renders_initial_snapshot_and_status() -> None:
    views: List[EngineSnapshot] = []
    statuses: List[str] = []
    hooks = TextualUIHooks(update_view=views.append, update_status=statuses.append)
    adapter = TextualEngineAdapter(make_engine("abc"), hooks)

    assert views[0].document_text == "abc"
    adapter.handle_textual_key("i", character="i")
    adapter.handle_textual_key("x", character="x")
    adapter.handle_textual_key("escape")

    assert statuses[:2] == ["-- NORMAL --  Line 1, Col 1", "-- INSERT --  Line 1, Col 1"]
    assert statuses[-1] == "-- NORMAL --  Line 1, Col 1"
    assert views[-1].document_text == "xabc"


def test_status_shows_pending_keys() -> None:
    statuses: List[str] = []
    hooks = TextualUIHooks(update_view=lambda snapshot: None, update_status=statuses.append)
    adapter = TextualEngineAdapter(make_engine("abc"), hooks)

    adapter.handle_textual_key("2", character="2")
    adapter.handle_textual_key("d", character="d")

    assert statuses[-1] == "-- NORMAL -- 2d  Line 1, Col 1"


def test_status_reports_one_based_cursor() -> None:
    statuses: List[str] = []
    hooks = TextualUIHooks(update_view=lambda snapshot: None, update_status=statuses.append)
    adapter = TextualEngineAdapter(make_engine("abc\ndef"), hooks)

    adapter.handle_textual_key("j", character="j")
    adapter.handle_textual_key("l", character="l")

    assert statuses[-1] == "-- NORMAL --  Line 2, Col 2"


def test_adapter_relays_command_events() -> None:
    command_lines: List[str] = []
    events: List[tuple[str, object | None]] = []
    hooks = TextualUIHooks(
        update_view=lambda snapshot: None,
        show_command=command_lines.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    adapter = TextualEngineAdapter(make_engine("hello"), hooks)

    adapter.handle_textual_key("colon", character=":")
    adapter.handle_textual_key("w", character="w")
    adapter.handle_textual_key("q", character="q")
    adapter.handle_textual_key("enter")

    assert ":wq" in command_lines
    assert command_lines[-1] == ""
    assert ("command.submit", ":wq") in events
    written = next(payload for name, payload in events if name == "command.write")
    assert isinstance(written, dict)
    assert written["force"] is False
    assert written["text"] == "hello"
    assert ("command.quit", {"force": False}) in events


def test_adapter_surfaces_visual_selection_events() -> None:
    events: List[Dict[str, Any]] = []
    hooks = TextualUIHooks(
        update_view=lambda snapshot: None,
        handle_event=lambda name, payload: events.append({"name": name, "payload": payload}),
    )
    adapter = TextualEngineAdapter(make_engine("abc"), hooks)

    adapter.handle_textual_key("v", character="v")
    adapter.handle_textual_key("l", character="l")

    visual_payloads = [event for event in events if event["name"] == "visual.selection"]
    assert visual_payloads[-1]["payload"] == {"anchor": (0, 0), "head": (0, 1)}


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_view=lambda snapshot: None, log=logs.append)
    adapter = TextualEngineAdapter(make_engine(), hooks)

    adapter.handle_textual_key("i", character="i")

    assert any(line.startswith("key ->") for line in logs)
    assert any(line.startswith("event -> mode.changed") for line in logs)


def test_close_stops_view_updates() -> None:
    views: List[EngineSnapshot] = []
    adapter = TextualEngineAdapter(make_engine("abc"), TextualUIHooks(update_view=views.append))

    adapter.close()
    adapter.handle_textual_key("x", character="x")

    assert len(views) == 1
    assert adapter.state_metadata()["mode"] == "normal"


def test_render_document_highlights_cursor_and_selection() -> None:
    app = pytest.importorskip("vimdoc_engine.adapters.textual.app")
    engine = make_engine("abcd\nef")
    engine.feed("v", "l")

    rendered = app.render_document(engine.snapshot())

    assert rendered.plain == "abcd \nef "
    styles = {(span.start, span.end, str(span.style)) for span in rendered.spans}
    assert (0, 2, "reverse") in styles
    assert (1, 2, "reverse bold") in styles
