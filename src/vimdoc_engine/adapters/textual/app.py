"""Executable Textual app that hosts the editing engine."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use vimdoc_engine.adapters.textual.app"
    ) from exc

from vimdoc_engine.buffer import EngineSnapshot
from vimdoc_engine.config import EngineConfig
from vimdoc_engine.engine import Engine
from vimdoc_engine.runtime import telemetry

from .controller import TextualEngineAdapter, TextualUIHooks


def render_document(snapshot: EngineSnapshot) -> Text:
    """Document text with the cursor and primary selection highlighted."""

    text = Text()
    row, col = snapshot.cursor
    selection = None
    if snapshot.mode == "visual" and snapshot.selections:
        selection = tuple(sorted(snapshot.selections[0]))
    for index, line in enumerate(snapshot.lines):
        rendered = Text(line + " ")
        if selection is not None:
            (start_row, start_col), (end_row, end_col) = selection
            if start_row <= index <= end_row:
                begin = start_col if index == start_row else 0
                finish = end_col + 1 if index == end_row else len(line) + 1
                rendered.stylize("reverse", begin, max(begin + 1, finish))
        if index == row:
            rendered.stylize("reverse bold", col, col + 1)
        text.append_text(rendered)
        if index < len(snapshot.lines) - 1:
            text.append("\n")
    return text


class VimDocApp(App[None]):
    """Minimal Textual UI embedding the engine over one file."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #document-view {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    #status-line {
        height: 1;
    }

    #command-line {
        height: 1;
    }
    """

    def __init__(self, *, path: Optional[Path] = None, config: Optional[EngineConfig] = None) -> None:
        super().__init__()
        self.path = path
        initial = path.read_text(encoding="utf-8") if path and path.exists() else ""
        if initial.endswith("\n"):
            initial = initial[:-1]
        base = config or EngineConfig.from_env()
        self.engine = Engine(replace(base, initial_text=initial))
        self.adapter: Optional[TextualEngineAdapter] = None
        self._document_widget: Optional[Static] = None
        self._status_widget: Optional[Static] = None
        self._command_widget: Optional[Static] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical():
            self._document_widget = Static("", id="document-view")
            yield self._document_widget
        self._status_widget = Static("", id="status-line")
        self._command_widget = Static("", id="command-line")
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    async def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            show_command=self._show_command,
            handle_event=self._handle_event,
        )
        self.adapter = TextualEngineAdapter(self.engine, hooks)
        self.title = str(self.path) if self.path else "[No Name]"
        self.set_interval(0.1, self._process_timeouts)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+c", "ctrl+q"}:
            return
        self.adapter.handle_textual_key(event.key, character=event.character)
        event.stop()

    def _update_view(self, snapshot: EngineSnapshot) -> None:
        if self._document_widget:
            self._document_widget.update(render_document(snapshot))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _show_command(self, command: str) -> None:
        if self._command_widget:
            self._command_widget.update(command)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "command.write" and isinstance(payload, dict):
            self._write(payload)
        elif name == "command.quit":
            self.exit()
        elif name == "command.echo":
            self._show_command(str(payload))
        elif name == "command.error":
            self._show_command(f"E492: Not an editor command: {payload}")
        elif name == "search.not_found":
            self._show_command(f"E486: Pattern not found: {payload}")

    def _write(self, payload: dict) -> None:
        args = payload.get("args") or []
        target = Path(args[0]) if args else self.path
        if target is None:
            self._show_command("E32: No file name")
            return
        text = str(payload.get("text", ""))
        target.write_text(text + "\n", encoding="utf-8")
        if self.path is None:
            self.path = target
            self.title = str(target)
        telemetry.record_event("file.write", data={"path": str(target), "bytes": len(text)})
        self._show_command(f'"{target}" {text.count(chr(10)) + 1}L written')


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a text file with vim-style keys.")
    parser.add_argument("file", nargs="?", type=Path, help="File to open")
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Pending key sequence window (default: VIMDOC_KEY_TIMEOUT_MS or 1000)",
    )
    parser.add_argument(
        "--telemetry-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Telemetry preset to apply before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.telemetry_preset:
        telemetry.configure(preset=args.telemetry_preset)
    overrides = {}
    if args.timeout_ms is not None:
        overrides["key_buffer_timeout_ms"] = args.timeout_ms
    app = VimDocApp(path=args.file, config=EngineConfig.from_env(**overrides))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
