"""Command-line mode: collects an Ex command or a search pattern."""

from __future__ import annotations

from typing import List, Optional

from .base_mode import KeyInput, Mode, ModeContext
from .controller import EditorMode

PROMPTS = (":", "/", "?")


class CommandLineMode(Mode):
    mode = EditorMode.COMMAND

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.prompt = ":"
        self._typed: List[str] = []
        self.history: List[str] = []

    def open(self, prompt: str) -> None:
        """Prepare the prompt; called before the transition into this mode."""

        if prompt not in PROMPTS:
            raise ValueError(f"Unknown command-line prompt '{prompt}'")
        self.prompt = prompt
        self._typed.clear()

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        self.context.bus.emit("command.start", self.prompt)

    def on_exit(self, next_mode: EditorMode) -> None:
        del next_mode
        self.context.bus.emit("command.end", self.text)
        self._typed.clear()

    @property
    def text(self) -> str:
        return "".join(self._typed)

    @property
    def display(self) -> str:
        return f"{self.prompt}{self.text}"

    def handle_text(self, key: KeyInput) -> bool:
        text = key.char
        if text is None:
            return False
        self._typed.append(text)
        return True

    def backspace(self) -> bool:
        """Drop the last typed character; ``False`` when there was none."""

        if not self._typed:
            return False
        self._typed.pop()
        return True

    def take(self) -> str:
        text = self.text
        self._typed.clear()
        if text:
            self.history.append(f"{self.prompt}{text}")
        return text
