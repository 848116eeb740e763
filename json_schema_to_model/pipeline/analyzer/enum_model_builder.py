"""
Enum model builder.

Turns an ordered list of `enum` literals plus an optional EnumHint into
enum members with names and integer values.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ...utils import snake_to_pascal_case
from ..errors import HintConfigurationError, NameCollisionError
from ..hints.hint_nodes import EnumHint
from .ir_nodes import EnumMember, EnumModel


def _literal_member_name(literal: Any, index: int) -> str:
    name = snake_to_pascal_case(str(literal))
    return name or f"Value{index}"


def _check_count(hint: EnumHint, values: Sequence | None, literal_count: int, what: str, type_name: str, scope: str | None) -> None:
    if values is None or len(values) == literal_count or hint.allow_member_count_mismatch:
        return
    raise HintConfigurationError(
        f"EnumHint {what} count does not match the number of enum values",
        scope=scope,
        type_name=type_name,
        expected=literal_count,
        actual=len(values),
    )


def build_enum_model(
    type_name: str,
    literals: Sequence[Any] | None,
    hint: EnumHint | None = None,
    scope: str | None = None,
) -> EnumModel:
    """
    Build the members of an enum.

    Member names default to the PascalCase form of each literal, or come
    from `hint.member_names`. A `zero_value_name` adds a member with value
    0 ahead of the literal members. Literal members take their values from
    `hint.member_values` (one per literal member), else ascending powers of
    two when `hint.flags` is set, else consecutive integers.

    Args:
        type_name: Name of the enum
        literals: The schema's `enum` values, in order
        hint: EnumHint customizing names and values
        scope: Hint scope, for error messages

    Returns:
        EnumModel with members in declaration order

    Raises:
        HintConfigurationError: If member names or values do not match the literal count
        NameCollisionError: If two members end up with the same name
    """
    literals = list(literals or [])
    hint = hint or EnumHint()

    _check_count(hint, hint.member_names, len(literals), "member name", type_name, scope)
    _check_count(hint, hint.member_values, len(literals), "member value", type_name, scope)

    members: list[EnumMember] = []
    if hint.zero_value_name:
        members.append(EnumMember(name=snake_to_pascal_case(hint.zero_value_name) or hint.zero_value_name, value=0))

    next_value = len(members)
    for index, literal in enumerate(literals):
        if hint.member_names is not None and index < len(hint.member_names):
            name = hint.member_names[index]
        else:
            name = _literal_member_name(literal, index)

        if hint.member_values is not None and index < len(hint.member_values):
            value, explicit = hint.member_values[index], True
        elif hint.flags:
            value, explicit = 1 << index, True
        else:
            value, explicit = next_value, False

        members.append(EnumMember(name=name, value=value, literal=literal, has_explicit_value=explicit))
        next_value = value + 1

    seen: set[str] = set()
    for member in members:
        if member.python_name in seen:
            raise NameCollisionError(
                f"Enum member name {member.python_name!r} is produced more than once",
                scope=scope,
                type_name=type_name,
            )
        seen.add(member.python_name)

    return EnumModel(
        type_name=type_name,
        members=members,
        description=hint.description,
        flags=hint.flags,
    )
