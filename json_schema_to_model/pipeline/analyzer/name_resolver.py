"""
Name resolver for generated types and attributes.

Declares the name and kind of every type the schema's definitions produce
before any descriptor is built, so that self and mutual references
resolve to an already known name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...utils import pascal_to_snake_case, snake_to_pascal_case, to_python_identifier
from ..errors import NameCollisionError, SchemaShapeError
from ..hints.hint_nodes import NON_PUBLIC_MODIFIERS, ClassNameHint, EnumHint, HintKind
from ..hints.hint_resolver import HintResolver
from ..schema_ast.nodes import JsonSchema, JsonType
from .ir_nodes import RegistryKind

logger = logging.getLogger(__name__)

# Members every generated record defines; properties must not shadow them
RESERVED_MEMBER_NAMES = frozenset(
    {
        "self",
        "cls",
        "other",
        "_init",
        "__init__",
        "__eq__",
        "__hash__",
        "copy_of",
        "deep_clone",
        "value_equals",
        "value_get_hash_code",
    }
)


@dataclass
class DeclaredType:
    """A type name reserved before generation starts."""

    schema_name: str  # Definition key, or the root class name
    type_name: str
    kind: RegistryKind
    schema: JsonSchema
    enum_hint: EnumHint | None = None


@dataclass
class NameMapping:
    """Result of name declaration."""

    root: DeclaredType

    # Definition key -> declared type; array-shaped definitions are absent
    definitions: dict[str, DeclaredType] = field(default_factory=dict)

    def by_type_name(self) -> dict[str, DeclaredType]:
        declared = {d.type_name: d for d in self.definitions.values()}
        declared[self.root.type_name] = self.root
        return declared


class NameResolver:
    """Resolves generated type and attribute names."""

    def __init__(self, hints: HintResolver, type_name_suffix: str = "", extra_member_names: tuple[str, ...] = ()):
        """
        Initialize the resolver.

        Args:
            hints: Hint lookup
            type_name_suffix: Text appended to every generated type name
            extra_member_names: Further members the generated records define (e.g. the node kind property)
        """
        self.hints = hints
        self.type_name_suffix = type_name_suffix
        self.reserved_member_names = RESERVED_MEMBER_NAMES.union(extra_member_names)

    def type_name(self, base_name: str) -> str:
        """Apply PascalCase and the configured suffix to a base name."""
        pascal = base_name if base_name[:1].isupper() else snake_to_pascal_case(base_name)
        return to_python_identifier(f"{pascal or base_name}{self.type_name_suffix}")

    def declare(self, root: JsonSchema, root_class_name: str) -> NameMapping:
        """
        Declare the root record and every non-array definition.

        Args:
            root: The root schema
            root_class_name: Name of the root record

        Returns:
            NameMapping from definition keys to declared types

        Raises:
            SchemaShapeError: If the root is not object-shaped
            NameCollisionError: If two schemas resolve to the same type name
        """
        if root.type not in (None, JsonType.OBJECT):
            raise SchemaShapeError(
                f"Root schema must be an object, not {root.type.value!r}",
                scope=root.source_path,
                type_name=root_class_name,
            )

        mapping = NameMapping(
            root=DeclaredType(
                schema_name=root_class_name,
                type_name=self.type_name(root_class_name),
                kind=RegistryKind.RECORD,
                schema=root,
            )
        )
        sources = {mapping.root.type_name: root.source_path}

        for definition_name, definition in root.definitions.items():
            if self._is_structural(definition_name, definition):
                logger.debug("Definition %r is not a record; it is inlined where referenced", definition_name)
                continue

            declared = self._declare_definition(definition_name, definition)
            previous = sources.get(declared.type_name)
            if previous is not None:
                raise NameCollisionError(
                    f"Generated type name {declared.type_name!r} is produced by both {previous!r} and {definition.source_path!r}",
                    type_name=declared.type_name,
                    scope=definition.source_path,
                )
            sources[declared.type_name] = definition.source_path
            mapping.definitions[definition_name] = declared

        return mapping

    def _is_structural(self, definition_name: str, definition: JsonSchema) -> bool:
        """Arrays and plain scalars are never named in the output."""
        if definition.is_array_shaped:
            return True
        if definition.type in (None, JsonType.OBJECT):
            return False
        return self.hints.type_hint(definition_name, HintKind.ENUM) is None

    def _declare_definition(self, definition_name: str, definition: JsonSchema) -> DeclaredType:
        enum_hint: EnumHint | None = self.hints.type_hint(definition_name, HintKind.ENUM)
        class_name_hint: ClassNameHint | None = self.hints.type_hint(definition_name, HintKind.CLASS_NAME)

        if enum_hint is not None:
            base_name = enum_hint.type_name or (class_name_hint.class_name if class_name_hint else definition_name)
            kind = RegistryKind.ENUM
        else:
            base_name = class_name_hint.class_name if class_name_hint else definition_name
            kind = RegistryKind.RECORD

        return DeclaredType(
            schema_name=definition_name,
            type_name=self.type_name(base_name),
            kind=kind,
            schema=definition,
            enum_hint=enum_hint,
        )

    def attribute_name(self, property_name: str, name_override: str | None = None, modifiers: tuple[str, ...] = ()) -> str:
        """
        Python attribute name of a property.

        Args:
            property_name: The property's name in the schema
            name_override: Name given by a property hint, used as is
            modifiers: Modifier tokens from a property hint

        Returns:
            A valid identifier, prefixed with "_" for non-public properties and
            suffixed with "_" where it would shadow a record member
        """
        name = name_override or pascal_to_snake_case(property_name) or property_name
        name = to_python_identifier(name)
        if NON_PUBLIC_MODIFIERS.intersection(modifiers) and not name.startswith("_"):
            name = f"_{name}"
        if name in self.reserved_member_names:
            name = f"{name}_"
        return name
