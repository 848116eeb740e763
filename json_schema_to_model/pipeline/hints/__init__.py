"""
Hints: out-of-band overrides of type inference and generated type shape.
"""

from .hint_nodes import (
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
from .hint_reader import HintDictionary, load_hints, read_hints
from .hint_resolver import HintResolver, make_property_scope, make_wildcard_scope

__all__ = [
    "AttributeHint",
    "BaseTypeHint",
    "ClassNameHint",
    "DictionaryHint",
    "EnumHint",
    "Hint",
    "HintDictionary",
    "HintKind",
    "HintResolver",
    "InterfaceHint",
    "PropertyHint",
    "PropertyModifiersHint",
    "PropertyNameHint",
    "PropertyTypeHint",
    "load_hints",
    "make_property_scope",
    "make_wildcard_scope",
    "read_hints",
]
