"""Textual host. ``app`` needs the ``textual`` package; the controller does not."""

from .controller import TextualEngineAdapter, TextualUIHooks, translate_textual_key

__all__ = ["TextualEngineAdapter", "TextualUIHooks", "translate_textual_key"]
