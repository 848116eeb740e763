"""
Errors raised by the object model generation pipeline.

Every error aborts the whole generation batch; nothing is written when one
is raised.
"""

from __future__ import annotations

from typing import Any


class GenerationError(Exception):
    """Base class for all object model generation failures.

    Args:
        message: Human readable description of the failure
        scope: Hint scope or schema path where the problem was found
        type_name: Generated type being built, if known
        property_name: Property being built, if known
        expected: Expected value (e.g. a count), where relevant
        actual: Actual value, where relevant
    """

    def __init__(
        self,
        message: str,
        *,
        scope: str | None = None,
        type_name: str | None = None,
        property_name: str | None = None,
        expected: Any = None,
        actual: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.scope = scope
        self.type_name = type_name
        self.property_name = property_name
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        details = []
        if self.scope is not None:
            details.append(f"scope={self.scope!r}")
        if self.type_name is not None:
            details.append(f"type={self.type_name!r}")
        if self.property_name is not None:
            details.append(f"property={self.property_name!r}")
        if self.expected is not None or self.actual is not None:
            details.append(f"expected={self.expected!r}, actual={self.actual!r}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class HintConfigurationError(GenerationError):
    """A hint is malformed or inconsistent with the schema it targets."""

    pass


class SchemaShapeError(GenerationError):
    """The schema contains a construct the type model builder cannot classify."""

    pass


class NameCollisionError(GenerationError):
    """Two distinct schemas resolve to the same generated type name."""

    pass


class SchemaReadFailedError(GenerationError):
    """The schema document could not be read.

    Args:
        errors: The errors reported by the schema reader
    """

    def __init__(self, errors: list):
        lines = "; ".join(str(error) for error in errors)
        super().__init__(f"Schema document is invalid: {lines}")
        self.errors = list(errors)


class OutputExistsError(GenerationError):
    """The output file already exists and overwriting was not requested."""

    pass
