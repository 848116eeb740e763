"""
JSON Schema reader that builds the schema tree.

Phase 1 of the pipeline: turn a decoded JSON document into `JsonSchema`
nodes, check the keywords the generator relies on, and resolve `$ref`
types against the document's definitions. Problems are collected and
returned, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .nodes import DEFINITIONS_PREFIXES, JsonSchema, JsonType

_JSON_TYPES = {t.value: t for t in JsonType}


@dataclass
class SchemaReadError:
    """A problem found while reading a schema document."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ReadResult:
    """Outcome of reading a schema document: a schema or a list of errors."""

    schema: JsonSchema | None = None
    errors: list[SchemaReadError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.schema is not None and not self.errors


class SchemaReader:
    """Reads a decoded JSON Schema document into a `JsonSchema` tree."""

    def read(self, document: Any) -> ReadResult:
        """
        Read a JSON Schema document.

        Args:
            document: The decoded JSON document

        Returns:
            ReadResult holding either the root schema or the errors found
        """
        errors: list[SchemaReadError] = []
        if not isinstance(document, dict):
            errors.append(SchemaReadError("#", "schema document must be a JSON object"))
            return ReadResult(errors=errors)

        root = self._read_node(document, "#", errors)

        for key in ("definitions", "$defs"):
            raw_definitions = document.get(key)
            if raw_definitions is None:
                continue
            if not isinstance(raw_definitions, dict):
                errors.append(SchemaReadError(f"#/{key}", "must be an object"))
                continue
            for name, raw_definition in raw_definitions.items():
                root.definitions[name] = self._read_node(raw_definition, f"#/{key}/{name}", errors)

        self._resolve_references(root, root.definitions, errors)
        for definition in root.definitions.values():
            self._resolve_references(definition, root.definitions, errors)

        if errors:
            return ReadResult(errors=errors)
        return ReadResult(schema=root)

    def _read_node(self, raw: Any, path: str, errors: list[SchemaReadError]) -> JsonSchema:
        """Read one schema node and its children."""
        node = JsonSchema(source_path=path)
        if not isinstance(raw, dict):
            errors.append(SchemaReadError(path, "schema must be a JSON object"))
            return node

        raw_type = raw.get("type")
        if isinstance(raw_type, list):
            errors.append(SchemaReadError(path, f"type arrays are not supported: {raw_type}"))
        elif raw_type is not None:
            if raw_type not in _JSON_TYPES:
                errors.append(SchemaReadError(path, f"unsupported type {raw_type!r}"))
            else:
                node.type = _JSON_TYPES[raw_type]

        node.format = raw.get("format")
        node.title = raw.get("title")
        node.description = raw.get("description")

        if "default" in raw:
            node.default = raw["default"]
            node.has_default = True

        raw_properties = raw.get("properties")
        if raw_properties is not None:
            if not isinstance(raw_properties, dict):
                errors.append(SchemaReadError(f"{path}/properties", "must be an object"))
            else:
                for name, raw_property in raw_properties.items():
                    node.properties[name] = self._read_node(raw_property, f"{path}/properties/{name}", errors)

        raw_required = raw.get("required")
        if raw_required is not None:
            if not isinstance(raw_required, list) or not all(isinstance(r, str) for r in raw_required):
                errors.append(SchemaReadError(f"{path}/required", "must be an array of strings"))
            else:
                node.required = list(raw_required)

        raw_items = raw.get("items")
        if raw_items is not None:
            if isinstance(raw_items, list):
                errors.append(SchemaReadError(f"{path}/items", "tuple validation is not supported"))
            else:
                node.items = self._read_node(raw_items, f"{path}/items", errors)

        raw_additional = raw.get("additionalProperties")
        if isinstance(raw_additional, bool):
            node.additional_properties = raw_additional
        elif raw_additional is not None:
            node.additional_properties = self._read_node(raw_additional, f"{path}/additionalProperties", errors)

        raw_enum = raw.get("enum")
        if raw_enum is not None:
            if not isinstance(raw_enum, list):
                errors.append(SchemaReadError(f"{path}/enum", "must be an array"))
            else:
                node.enum = list(raw_enum)

        raw_ref = raw.get("$ref")
        if raw_ref is not None:
            if not isinstance(raw_ref, str) or not raw_ref.startswith(DEFINITIONS_PREFIXES):
                errors.append(SchemaReadError(path, f"only local definition references are supported: {raw_ref!r}"))
            else:
                node.reference = raw_ref

        return node

    def _resolve_references(
        self,
        node: JsonSchema,
        definitions: dict[str, JsonSchema],
        errors: list[SchemaReadError],
    ) -> None:
        """Give every `$ref` node the type of its target, inlining array targets."""
        if node.reference is not None:
            target = self._find_target(node, definitions, errors)
            if target is not None:
                if target.is_array_shaped:
                    node.type = JsonType.ARRAY
                    node.items = target.items
                    node.reference = None
                else:
                    if node.type is None:
                        node.type = target.type
                    if node.enum is None:
                        node.enum = target.enum
                    if node.format is None:
                        node.format = target.format

        for child in node.properties.values():
            self._resolve_references(child, definitions, errors)
        if node.items is not None:
            self._resolve_references(node.items, definitions, errors)
        if isinstance(node.additional_properties, JsonSchema):
            self._resolve_references(node.additional_properties, definitions, errors)

    def _find_target(
        self,
        node: JsonSchema,
        definitions: dict[str, JsonSchema],
        errors: list[SchemaReadError],
    ) -> JsonSchema | None:
        """Follow a chain of definition references to the first concrete schema."""
        seen: set[str] = set()
        current = node
        while current.reference is not None:
            name = current.reference_name
            if name not in definitions:
                errors.append(SchemaReadError(node.source_path, f"unresolved reference {current.reference!r}"))
                return None
            if name in seen:
                errors.append(SchemaReadError(node.source_path, f"circular reference through {name!r}"))
                return None
            seen.add(name)
            target = definitions[name]
            if target.reference is None or target is node:
                return target
            current = target
        return current
