"""Formatting utilities for note content."""

from .inline import format_inline, truncate

__all__ = [
    "format_inline",
    "truncate",
]
