"""
Reader for hint documents.

A hint document is a JSON object mapping scopes ("Type.Property",
"*.Property" or a bare type name) to arrays of `{"kind", "arguments"}`
entries. Entries whose kind is not recognized are logged and skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..errors import HintConfigurationError
from .hint_nodes import (
    VALID_MODIFIERS,
    AttributeHint,
    BaseTypeHint,
    ClassNameHint,
    DictionaryHint,
    EnumHint,
    Hint,
    HintKind,
    InterfaceHint,
    PropertyHint,
    PropertyModifiersHint,
    PropertyNameHint,
    PropertyTypeHint,
)

logger = logging.getLogger(__name__)

HintDictionary = dict[str, list[Hint]]


def _required(arguments: dict[str, Any], name: str, scope: str, kind: str) -> Any:
    if arguments.get(name) is None:
        raise HintConfigurationError(f"{kind} requires argument {name!r}", scope=scope)
    return arguments[name]


def _modifiers(arguments: dict[str, Any], scope: str) -> tuple[str, ...]:
    modifiers = tuple(arguments.get("modifiers") or ())
    for modifier in modifiers:
        if modifier not in VALID_MODIFIERS:
            raise HintConfigurationError(f"Invalid modifier {modifier!r}", scope=scope)
    return modifiers


def _optional_tuple(value: Any) -> tuple | None:
    return None if value is None else tuple(value)


def _class_name_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return ClassNameHint(class_name=_required(arguments, "className", scope, "ClassNameHint"))


def _base_type_hint(arguments: dict[str, Any], scope: str) -> Hint:
    names = _required(arguments, "baseTypeNames", scope, "BaseTypeHint")
    return BaseTypeHint(base_type_names=tuple(names))


def _interface_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return InterfaceHint(description=arguments.get("description"))


def _enum_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return EnumHint(
        type_name=arguments.get("typeName"),
        description=arguments.get("description"),
        member_names=_optional_tuple(arguments.get("memberNames")),
        member_values=_optional_tuple(arguments.get("memberValues")),
        flags=bool(arguments.get("flags", False)),
        zero_value_name=arguments.get("zeroValueName"),
        allow_member_count_mismatch=bool(arguments.get("allowMemberCountMismatch", False)),
    )


def _dictionary_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return DictionaryHint(
        key_type_name=arguments.get("keyTypeName") or "string",
        value_type_name=arguments.get("valueTypeName"),
    )


def _property_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return PropertyHint(
        name=arguments.get("name"),
        type_name=arguments.get("typeName"),
        modifiers=_modifiers(arguments, scope),
    )


def _property_name_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return PropertyNameHint(name=_required(arguments, "name", scope, "PropertyNameHint"))


def _property_type_hint(arguments: dict[str, Any], scope: str) -> Hint:
    return PropertyTypeHint(type_name=_required(arguments, "typeName", scope, "PropertyTypeHint"))


def _property_modifiers_hint(arguments: dict[str, Any], scope: str) -> Hint:
    _required(arguments, "modifiers", scope, "PropertyModifiersHint")
    return PropertyModifiersHint(modifiers=_modifiers(arguments, scope))


def _attribute_hint(arguments: dict[str, Any], scope: str) -> Hint:
    properties = arguments.get("properties") or {}
    return AttributeHint(
        type_name=_required(arguments, "typeName", scope, "AttributeHint"),
        arguments=tuple(arguments.get("arguments") or ()),
        properties=tuple(properties.items()),
    )


_HINT_BUILDERS: dict[HintKind, Callable[[dict[str, Any], str], Hint]] = {
    HintKind.CLASS_NAME: _class_name_hint,
    HintKind.BASE_TYPE: _base_type_hint,
    HintKind.INTERFACE: _interface_hint,
    HintKind.ENUM: _enum_hint,
    HintKind.DICTIONARY: _dictionary_hint,
    HintKind.PROPERTY: _property_hint,
    HintKind.PROPERTY_NAME: _property_name_hint,
    HintKind.PROPERTY_TYPE: _property_type_hint,
    HintKind.PROPERTY_MODIFIERS: _property_modifiers_hint,
    HintKind.ATTRIBUTE: _attribute_hint,
}

_KNOWN_KINDS = {kind.value: kind for kind in HintKind}


def read_hints(document: dict[str, Any]) -> HintDictionary:
    """
    Build a hint dictionary from a decoded hint document.

    Args:
        document: Mapping of scope to a list of `{"kind", "arguments"}` entries

    Returns:
        Mapping of scope to hints, in declaration order

    Raises:
        HintConfigurationError: If a recognized hint has invalid arguments
    """
    if not isinstance(document, dict):
        raise HintConfigurationError("Hint document must be a JSON object")

    hints: HintDictionary = {}
    for scope, entries in document.items():
        if not isinstance(entries, list):
            raise HintConfigurationError("Hints for a scope must be an array", scope=scope)

        scope_hints: list[Hint] = []
        for entry in entries:
            kind_name = entry.get("kind") if isinstance(entry, dict) else None
            kind = _KNOWN_KINDS.get(kind_name)
            if kind is None:
                logger.warning("Ignoring hint of unknown kind %r for scope %r", kind_name, scope)
                continue
            arguments = entry.get("arguments") or {}
            if not isinstance(arguments, dict):
                raise HintConfigurationError(f"{kind_name} arguments must be an object", scope=scope)
            scope_hints.append(_HINT_BUILDERS[kind](arguments, scope))

        hints[scope] = scope_hints
    return hints


def load_hints(path: str | Path) -> HintDictionary:
    """Read a hint document from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return read_hints(json.load(f))
