"""
Analyzer: name declaration, type inference and the IR.
"""

from .enum_model_builder import build_enum_model
from .ir_nodes import (
    AdditionalTypeRequest,
    CloneKind,
    ComparisonKind,
    EnumMember,
    EnumMemberDefault,
    EnumModel,
    HashKind,
    RegistryEntry,
    RegistryKind,
    ScalarKind,
    SignatureKind,
    TypeDescriptor,
    TypeModel,
    TypeRegistry,
    TypeSignature,
)
from .name_resolver import DeclaredType, NameMapping, NameResolver
from .type_model_builder import TypeModelBuilder

__all__ = [
    "AdditionalTypeRequest",
    "CloneKind",
    "ComparisonKind",
    "DeclaredType",
    "EnumMember",
    "EnumMemberDefault",
    "EnumModel",
    "HashKind",
    "NameMapping",
    "NameResolver",
    "RegistryEntry",
    "RegistryKind",
    "ScalarKind",
    "SignatureKind",
    "TypeDescriptor",
    "TypeModel",
    "TypeModelBuilder",
    "TypeRegistry",
    "TypeSignature",
    "build_enum_model",
]
