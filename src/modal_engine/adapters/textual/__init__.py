"""Textual host adapter; the demo app itself needs the ``textual`` extra."""

from .controller import TextualUIHooks, TextualVimAdapter, translate_key

__all__ = ["TextualUIHooks", "TextualVimAdapter", "translate_key"]
