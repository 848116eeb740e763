"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .black_formatter import BlackFormatter, Formatter, format_with_black

__all__ = [
    "Formatter",
    "BlackFormatter",
    "format_with_black",
]
