"""
Hint lookup.

Resolves the hint that applies to a type or property. Property hints are
looked up by exact scope ("Type.Property") and then by wildcard scope
("*.Property"); type-level hints are looked up by bare type name.
"""

from __future__ import annotations

from collections.abc import Iterable

from ...utils import snake_to_pascal_case, to_camel_case
from .hint_nodes import Hint, HintKind
from .hint_reader import HintDictionary

WILDCARD = "*"


def make_property_scope(type_name: str, property_key: str) -> str:
    """Build the exact scope of a property, e.g. ("C", "DictProp") -> "C.DictProp"."""
    return f"{type_name}.{property_key}"


def make_wildcard_scope(property_key: str) -> str:
    return f"{WILDCARD}.{property_key}"


class HintResolver:
    """Looks up hints by scope and kind.

    At most one hint is returned per lookup: the first hint of the
    requested kind, in declaration order, under the first scope that has
    one.
    """

    def __init__(self, hints: HintDictionary | None = None):
        self._hints: HintDictionary = dict(hints or {})

    def __bool__(self) -> bool:
        return bool(self._hints)

    def lookup(self, scope: str, kind: HintKind) -> Hint | None:
        """
        Find the hint of `kind` for `scope`.

        Args:
            scope: "Type.Property" for property hints, or a bare type name
            kind: The hint kind to look for

        Returns:
            The matching hint, or None
        """
        for candidate in self._candidate_scopes(scope):
            hint = self._first_of_kind(self._hints.get(candidate, ()), kind)
            if hint is not None:
                return hint
        return None

    def property_hint(self, type_names: Iterable[str], property_key: str, kind: HintKind) -> Hint | None:
        """Find a property hint trying each of the type's names, then the wildcard."""
        for type_name in type_names:
            hint = self._first_of_kind(self._hints.get(make_property_scope(type_name, property_key), ()), kind)
            if hint is not None:
                return hint
        return self._first_of_kind(self._hints.get(make_wildcard_scope(property_key), ()), kind)

    def type_hint(self, type_name: str, kind: HintKind) -> Hint | None:
        """Find a type-level hint by bare type name."""
        return self.lookup(type_name, kind)

    def _candidate_scopes(self, scope: str) -> list[str]:
        if "." in scope:
            type_name, _, property_key = scope.partition(".")
            candidates = [scope]
            if type_name != WILDCARD:
                candidates.append(make_wildcard_scope(property_key))
            return candidates

        # Bare type names: as given, camelCase ("color") and PascalCase ("Color")
        candidates = []
        for candidate in (scope, to_camel_case(scope), snake_to_pascal_case(scope)):
            if candidate and candidate not in candidates:
                candidates.append(candidate)
        return candidates

    @staticmethod
    def _first_of_kind(hints: Iterable[Hint], kind: HintKind) -> Hint | None:
        for hint in hints:
            if hint.kind == kind:
                return hint
        return None
