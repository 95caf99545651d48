"""Yank/put registers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

UNNAMED = '"'


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # or "line"

    @property
    def linewise(self) -> bool:
        return self.type == "line"


class RegisterBank:
    """Tracks the unnamed register plus named ``a``-``z`` and yank ``0``."""

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue(text="")}
        self.active = UNNAMED

    def get(self, name: str = UNNAMED) -> RegisterValue:
        return self._registers.get(name, RegisterValue(text=""))

    def set(self, name: str, value: RegisterValue) -> None:
        if name.isupper():
            existing = self.get(name.lower())
            value = RegisterValue(text=existing.text + value.text, type=value.type)
            name = name.lower()
        self._registers[name] = value
        if name != UNNAMED:
            self._registers[UNNAMED] = value

    def store(self, text: str, *, linewise: bool = False, yank: bool = False) -> str:
        """Write into the active register, then reset it to the unnamed one."""

        name, self.active = self.active, UNNAMED
        value = RegisterValue(text=text, type="line" if linewise else "character")
        self.set(name, value)
        if yank:
            self._registers["0"] = value
        return name

    def take(self) -> RegisterValue:
        name, self.active = self.active, UNNAMED
        return self.get(name)


__all__ = ["RegisterBank", "RegisterValue", "UNNAMED"]
