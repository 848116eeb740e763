"""
Schema tree and reader.
"""

from .nodes import JsonSchema, JsonType
from .reader import ReadResult, SchemaReader, SchemaReadError

__all__ = [
    "JsonSchema",
    "JsonType",
    "ReadResult",
    "SchemaReadError",
    "SchemaReader",
]
