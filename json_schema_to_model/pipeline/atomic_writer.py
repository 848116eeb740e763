"""
Atomic file writer for generated modules.

Ensures that an interrupted write never leaves a half-written module
behind.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from .errors import GenerationError

logger = logging.getLogger(__name__)


def validate_python(content: str) -> None:
    """
    Check that generated code parses.

    Raises:
        GenerationError: If the code is not valid Python
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise GenerationError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Writes files atomically, with validation.

    The content is written to a temporary file in the target directory,
    validated, and then moved over the target in one rename.
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """
        Initialize the writer.

        Args:
            validate: Validation function; raises on invalid content
        """
        self._validate = validate or validate_python

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """
        Write content to a file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before replacing the target

        Raises:
            GenerationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory as the target, so the final rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(content)

            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info("Wrote %s", path)
