"""Key dispatch: pending sequences, counts, operators and execution."""

from .dispatcher import CommandDispatcher, CountParser
from .outcome import DispatchOutcome

__all__ = ["CommandDispatcher", "CountParser", "DispatchOutcome"]
