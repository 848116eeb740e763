"""
Runtime support imported by generated object models.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from urllib.parse import urlsplit


class UriKind(Enum):
    """Whether a URI reference is absolute or relative."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class Uri:
    """An absolute or relative URI reference that remembers its original text.

    Args:
        original_string: The URI text, kept verbatim
        kind: The expected kind; inferred from the presence of a scheme when omitted

    Raises:
        ValueError: If `kind` contradicts the text
    """

    __slots__ = ("_original_string", "_is_absolute_uri")

    def __init__(self, original_string: str, kind: UriKind | None = None):
        if original_string is None:
            raise ValueError("original_string must not be None")
        is_absolute = bool(urlsplit(original_string).scheme)
        if kind == UriKind.ABSOLUTE and not is_absolute:
            raise ValueError(f"Not an absolute URI: {original_string!r}")
        if kind == UriKind.RELATIVE and is_absolute:
            raise ValueError(f"Not a relative URI: {original_string!r}")
        self._original_string = original_string
        self._is_absolute_uri = is_absolute

    @property
    def original_string(self) -> str:
        return self._original_string

    @property
    def is_absolute_uri(self) -> bool:
        return self._is_absolute_uri

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uri):
            return NotImplemented
        return self._original_string == other._original_string

    def __hash__(self) -> int:
        return hash(self._original_string)

    def __repr__(self) -> str:
        return f"Uri({self._original_string!r})"

    def __str__(self) -> str:
        return self._original_string


def hash_value(value: Any) -> int:
    """Hash a JSON-like value consistently with `==`.

    Objects hash order-independently and arrays order-dependently, so
    values decoded from JSON can take part in generated hash codes.
    """
    if isinstance(value, dict):
        result = 0
        for key, item in value.items():
            result ^= hash(key) ^ hash_value(item)
        return result
    if isinstance(value, (list, tuple)):
        result = 17
        for item in value:
            result = (result * 31 + hash_value(item)) & 0xFFFFFFFF
        return result
    return hash(value)
