"""
Node definitions for the input JSON Schema tree.

The tree handed to the generator is already read and reference-checked:
every `$ref` names an entry of the root's `definitions`, and references to
array-shaped definitions have been inlined.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFINITIONS_PREFIXES = ("#/definitions/", "#/$defs/")


class JsonType(str, Enum):
    """JSON types understood by the generator."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"


@dataclass
class JsonSchema:
    """A schema node: the root document, a definition, or any nested schema."""

    # Location in the source document (for error messages)
    source_path: str = "#"

    type: JsonType | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None

    # Object keywords; properties keep the document's declaration order
    properties: dict[str, JsonSchema] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool | JsonSchema | None = None

    # Array keywords
    items: JsonSchema | None = None

    enum: list[Any] | None = None
    default: Any = None
    has_default: bool = False

    # Raw "$ref" value, e.g. "#/definitions/d"
    reference: str | None = None

    # Only populated on the root node
    definitions: dict[str, JsonSchema] = field(default_factory=dict)

    @property
    def reference_name(self) -> str | None:
        """Definition name targeted by `reference`, if any."""
        if self.reference is None:
            return None
        for prefix in DEFINITIONS_PREFIXES:
            if self.reference.startswith(prefix):
                return self.reference[len(prefix) :]
        return None

    @property
    def is_array_shaped(self) -> bool:
        return self.type == JsonType.ARRAY

    def is_required(self, property_name: str) -> bool:
        return property_name in self.required
