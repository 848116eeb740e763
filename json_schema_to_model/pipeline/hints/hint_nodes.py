"""
Hint variants.

A hint is an out-of-band instruction that overrides the default inference
of a property's type or the shape of a generated type. Each kind of hint
is its own frozen dataclass; `HintKind` names them for lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

VALID_MODIFIERS = frozenset({"public", "internal", "protected", "private", "override"})

# Modifiers that hide a property from the public surface of its record
NON_PUBLIC_MODIFIERS = frozenset({"internal", "protected", "private"})


class HintKind(str, Enum):
    """The `kind` string of each recognized hint."""

    CLASS_NAME = "ClassNameHint"
    BASE_TYPE = "BaseTypeHint"
    INTERFACE = "InterfaceHint"
    ENUM = "EnumHint"
    DICTIONARY = "DictionaryHint"
    PROPERTY = "PropertyHint"
    PROPERTY_NAME = "PropertyNameHint"
    PROPERTY_TYPE = "PropertyTypeHint"
    PROPERTY_MODIFIERS = "PropertyModifiersHint"
    ATTRIBUTE = "AttributeHint"


@dataclass(frozen=True)
class ClassNameHint:
    """Renames the record generated for a definition."""

    class_name: str
    kind: ClassVar[HintKind] = HintKind.CLASS_NAME


@dataclass(frozen=True)
class BaseTypeHint:
    """Adds base classes to a generated record."""

    base_type_names: tuple[str, ...]
    kind: ClassVar[HintKind] = HintKind.BASE_TYPE


@dataclass(frozen=True)
class InterfaceHint:
    """Requests a structural interface alongside a generated record."""

    description: str | None = None
    kind: ClassVar[HintKind] = HintKind.INTERFACE


@dataclass(frozen=True)
class EnumHint:
    """Generates an enum from a schema's `enum` literals.

    On a property, `type_name` names the new enum and is required. On a
    definition it may be omitted; the definition's own name is used.
    """

    type_name: str | None = None
    description: str | None = None
    member_names: tuple[str, ...] | None = None
    member_values: tuple[int, ...] | None = None
    flags: bool = False
    zero_value_name: str | None = None
    allow_member_count_mismatch: bool = False
    kind: ClassVar[HintKind] = HintKind.ENUM


@dataclass(frozen=True)
class DictionaryHint:
    """Types a property-less object schema as a key/value map."""

    key_type_name: str = "string"
    value_type_name: str | None = None
    kind: ClassVar[HintKind] = HintKind.DICTIONARY


@dataclass(frozen=True)
class PropertyHint:
    """Combined name, type and modifier override for one property."""

    name: str | None = None
    type_name: str | None = None
    modifiers: tuple[str, ...] = ()
    kind: ClassVar[HintKind] = HintKind.PROPERTY


@dataclass(frozen=True)
class PropertyNameHint:
    name: str
    kind: ClassVar[HintKind] = HintKind.PROPERTY_NAME


@dataclass(frozen=True)
class PropertyTypeHint:
    type_name: str
    kind: ClassVar[HintKind] = HintKind.PROPERTY_TYPE


@dataclass(frozen=True)
class PropertyModifiersHint:
    modifiers: tuple[str, ...]
    kind: ClassVar[HintKind] = HintKind.PROPERTY_MODIFIERS


@dataclass(frozen=True)
class AttributeHint:
    """Attaches annotation metadata to a property's declared type."""

    type_name: str
    arguments: tuple[Any, ...] = ()
    properties: tuple[tuple[str, Any], ...] = ()
    kind: ClassVar[HintKind] = HintKind.ATTRIBUTE


Hint = Union[
    ClassNameHint,
    BaseTypeHint,
    InterfaceHint,
    EnumHint,
    DictionaryHint,
    PropertyHint,
    PropertyNameHint,
    PropertyTypeHint,
    PropertyModifiersHint,
    AttributeHint,
]
