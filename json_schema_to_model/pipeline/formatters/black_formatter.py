"""
Black formatter for generated modules.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """A post-processing pass over a rendered module."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str: ...

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the formatter's dependencies are installed."""


class BlackFormatter(Formatter):
    """Formatter using black. black is an optional dependency (the "dev" extra)."""

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format a generated module with black.

        Args:
            code: Python source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or `code` unchanged when black is missing or rejects it
        """
        if not self.is_available():
            logger.warning("black is not installed; generated code is left unformatted")
            return code

        black = self._black

        target_versions = set()
        if config.target_version:
            target_version = getattr(black.TargetVersion, config.target_version.upper(), None)
            if target_version is None:
                # Newer interpreter than this black release knows about
                target_version = black.TargetVersion.PY312
            target_versions.add(target_version)

        mode = black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            logger.warning("black could not format the generated code: %s", e)
            return code


def format_with_black(code: str, line_length: int = 100, target_version: str = "py312") -> str:
    """
    Convenience function to format Python code with black.

    Args:
        code: Python source code
        line_length: Maximum line length
        target_version: Python version target (e.g., "py312")

    Returns:
        Formatted code
    """
    config = FormatterConfig(enabled=True, line_length=line_length, target_version=target_version)
    return BlackFormatter().format(code, config)
