"""
IR (Intermediate Representation) node definitions.

These nodes describe the object model to generate: the inferred signature
of every property, the algorithm tags derived from it, enum members, and
the registry of generated types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ...utils import to_python_identifier
from ..errors import NameCollisionError
from ..hints.hint_nodes import AttributeHint, EnumHint
from ..schema_ast.nodes import JsonSchema

# Suffixes of the synthetic descriptor keys for one nesting layer
ELEMENT_SUFFIX = "[]"
VALUE_SUFFIX = "{}"


class ScalarKind(Enum):
    """Kind of scalar value."""

    BOOLEAN = "bool"
    INTEGER = "int"
    NUMBER = "float"
    DECIMAL = "Decimal"
    STRING = "str"
    DATE_TIME = "datetime"
    URI = "Uri"
    UUID = "UUID"


# Scalars compared and hashed as values (never None-guarded when hashed)
VALUE_SCALARS = frozenset(
    {
        ScalarKind.BOOLEAN,
        ScalarKind.INTEGER,
        ScalarKind.NUMBER,
        ScalarKind.DECIMAL,
        ScalarKind.DATE_TIME,
        ScalarKind.UUID,
    }
)


class SignatureKind(Enum):
    """Kind of type signature."""

    SCALAR = "scalar"
    RECORD = "record"  # A generated record
    ENUM = "enum"  # A generated enum
    LIST = "list"  # list[T]
    MAP = "map"  # dict[K, V]
    UNTYPED_OBJECT = "untyped_object"  # Any, or an externally named type


@dataclass(frozen=True)
class TypeSignature:
    """The inferred structural type of a property or of one nesting layer."""

    kind: SignatureKind

    # For SCALAR
    scalar_kind: ScalarKind | None = None

    # Generated type name for RECORD/ENUM; optional external name for UNTYPED_OBJECT
    name: str | None = None

    # Element of a LIST, value of a MAP
    element: TypeSignature | None = None

    # Key type of a MAP (annotation only)
    key_type_name: str = "string"

    @staticmethod
    def scalar(scalar_kind: ScalarKind) -> TypeSignature:
        return TypeSignature(SignatureKind.SCALAR, scalar_kind=scalar_kind)

    @staticmethod
    def record(name: str) -> TypeSignature:
        return TypeSignature(SignatureKind.RECORD, name=name)

    @staticmethod
    def enum(name: str) -> TypeSignature:
        return TypeSignature(SignatureKind.ENUM, name=name)

    @staticmethod
    def list_of(element: TypeSignature) -> TypeSignature:
        return TypeSignature(SignatureKind.LIST, element=element)

    @staticmethod
    def map_of(value: TypeSignature, key_type_name: str = "string") -> TypeSignature:
        return TypeSignature(SignatureKind.MAP, element=value, key_type_name=key_type_name)

    @staticmethod
    def untyped(type_name: str | None = None) -> TypeSignature:
        return TypeSignature(SignatureKind.UNTYPED_OBJECT, name=type_name)

    @property
    def is_container(self) -> bool:
        return self.kind in (SignatureKind.LIST, SignatureKind.MAP)

    def innermost_through_lists(self) -> TypeSignature:
        """Strip LIST layers (but not MAP layers)."""
        signature = self
        while signature.kind == SignatureKind.LIST:
            signature = signature.element
        return signature

    def __str__(self) -> str:
        if self.kind == SignatureKind.SCALAR:
            return self.scalar_kind.value
        if self.kind in (SignatureKind.RECORD, SignatureKind.ENUM):
            return self.name
        if self.kind == SignatureKind.LIST:
            return f"List<{self.element}>"
        if self.kind == SignatureKind.MAP:
            return f"Map<{self.key_type_name},{self.element}>"
        return self.name or "object"


class ComparisonKind(Enum):
    """How a value is compared for equality."""

    NONE = "none"
    VALUE_EQUALS = "value_equals"  # l != r
    STRUCTURAL_EQUALS = "structural_equals"  # identity, None check, then l != r
    COLLECTION = "collection"
    DICTIONARY = "dictionary"


class HashKind(Enum):
    """How a value contributes to a hash code."""

    NONE = "none"
    SCALAR_VALUE = "scalar_value"  # never None
    SCALAR_REF = "scalar_ref"  # None-guarded
    COLLECTION = "collection"
    DICTIONARY = "dictionary"


class CloneKind(Enum):
    """How a value is copied by the initializer."""

    NONE = "none"
    ASSIGN = "assign"
    CLONE = "clone"  # copy constructor of a generated record
    COLLECTION = "collection"
    DICTIONARY = "dictionary"
    URI = "uri"


def algorithm_kinds(signature: TypeSignature) -> tuple[ComparisonKind, HashKind, CloneKind]:
    """Select the equality, hash and clone algorithms for a signature."""
    match signature.kind:
        case SignatureKind.SCALAR:
            if signature.scalar_kind in VALUE_SCALARS:
                return ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN
            if signature.scalar_kind == ScalarKind.URI:
                return ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_REF, CloneKind.URI
            return ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_REF, CloneKind.ASSIGN
        case SignatureKind.ENUM:
            return ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN
        case SignatureKind.RECORD:
            return ComparisonKind.STRUCTURAL_EQUALS, HashKind.SCALAR_REF, CloneKind.CLONE
        case SignatureKind.UNTYPED_OBJECT:
            return ComparisonKind.STRUCTURAL_EQUALS, HashKind.SCALAR_REF, CloneKind.ASSIGN
        case SignatureKind.LIST:
            return ComparisonKind.COLLECTION, HashKind.COLLECTION, CloneKind.COLLECTION
        case SignatureKind.MAP:
            return ComparisonKind.DICTIONARY, HashKind.DICTIONARY, CloneKind.DICTIONARY
    return ComparisonKind.NONE, HashKind.NONE, CloneKind.NONE


def required_import(signature: TypeSignature) -> tuple[str, str] | None:
    """The import a signature's own layer needs in generated code."""
    if signature.kind != SignatureKind.SCALAR:
        return None
    return {
        ScalarKind.DECIMAL: ("decimal", "Decimal"),
        ScalarKind.DATE_TIME: ("datetime", "datetime"),
        ScalarKind.URI: ("json_schema_to_model.runtime", "Uri"),
        ScalarKind.UUID: ("uuid", "UUID"),
    }.get(signature.scalar_kind)


@dataclass(frozen=True)
class EnumMemberDefault:
    """A default value that selects a member of a generated enum."""

    enum_name: str
    member_name: str


@dataclass
class TypeDescriptor:
    """Signature and algorithm tags of one property or synthetic nesting layer.

    The algorithm tags are derived from the signature and cannot be set
    independently.
    """

    # Key in the owning model: "Items" for a property, "Items[]" / "Items{}" for layers
    key: str
    signature: TypeSignature
    declaration_order: int = 0

    # Property-only fields (None/empty for synthetic layers)
    serialized_name: str | None = None
    python_name: str | None = None
    description: str | None = None
    is_required: bool = False
    default_value: Any = None
    has_default: bool = False
    modifiers: tuple[str, ...] = ()
    attribute: AttributeHint | None = None

    comparison_kind: ComparisonKind = field(init=False)
    hash_kind: HashKind = field(init=False)
    clone_kind: CloneKind = field(init=False)
    required_import: tuple[str, str] | None = field(init=False)
    is_schema_defined_type: bool = field(init=False)

    def __post_init__(self):
        self.comparison_kind, self.hash_kind, self.clone_kind = algorithm_kinds(self.signature)
        self.required_import = required_import(self.signature)
        innermost = self.signature.innermost_through_lists()
        self.is_schema_defined_type = innermost.kind in (SignatureKind.RECORD, SignatureKind.ENUM)

    @property
    def is_synthetic(self) -> bool:
        return self.serialized_name is None

    @property
    def child_key(self) -> str | None:
        """Key of the descriptor for this layer's elements or values."""
        if self.signature.kind == SignatureKind.LIST:
            return self.key + ELEMENT_SUFFIX
        if self.signature.kind == SignatureKind.MAP:
            return self.key + VALUE_SUFFIX
        return None


@dataclass
class AdditionalTypeRequest:
    """A type discovered while building another one, generated after the definitions."""

    hint: EnumHint
    schema: JsonSchema

    # Scope of the property that asked for the type
    requested_by: str = ""


@dataclass
class TypeModel:
    """Everything needed to synthesize one record."""

    type_name: str
    description: str | None = None

    # Ordered by declaration order; includes synthetic layer descriptors
    descriptors: dict[str, TypeDescriptor] = field(default_factory=dict)

    # Capability set
    base_type_names: tuple[str, ...] = ()
    interface_names: list[str] = field(default_factory=list)

    additional_requests: list[AdditionalTypeRequest] = field(default_factory=list)

    @property
    def properties(self) -> list[TypeDescriptor]:
        """Property descriptors in declaration order."""
        return sorted(
            (d for d in self.descriptors.values() if not d.is_synthetic),
            key=lambda d: d.declaration_order,
        )

    def child_of(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Descriptor of the elements (list) or values (map) of `descriptor`."""
        return self.descriptors[descriptor.child_key]

    def imports(self) -> set[tuple[str, str]]:
        return {d.required_import for d in self.descriptors.values() if d.required_import}


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int
    literal: Any = None  # None for the zero member
    has_explicit_value: bool = False

    @property
    def python_name(self) -> str:
        return to_python_identifier(self.name)


@dataclass
class EnumModel:
    """Everything needed to synthesize one enum."""

    type_name: str
    members: list[EnumMember] = field(default_factory=list)
    description: str | None = None
    flags: bool = False

    def member_for_literal(self, literal: Any) -> EnumMember | None:
        for member in self.members:
            if member.literal is not None and member.literal == literal:
                return member
        return None


class RegistryKind(Enum):
    RECORD = "record"
    INTERFACE = "interface"
    ENUM = "enum"


@dataclass(frozen=True)
class RegistryEntry:
    """A generated type. Entries are never modified once registered."""

    name: str
    kind: RegistryKind
    type_model: TypeModel | None = None
    enum_model: EnumModel | None = None

    # Schema scope the type was generated from (for collision messages)
    source: str = ""


class TypeRegistry:
    """All types generated in one run, in generation order."""

    def __init__(self):
        self._entries: dict[str, RegistryEntry] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, entry: RegistryEntry) -> RegistryEntry:
        """
        Add an entry.

        Raises:
            NameCollisionError: If a type with the same name was already registered
        """
        existing = self._entries.get(entry.name)
        if existing is not None:
            raise NameCollisionError(
                f"Generated type name {entry.name!r} is produced by both {existing.source!r} and {entry.source!r}",
                type_name=entry.name,
                scope=entry.source,
            )
        self._entries[entry.name] = entry
        return entry

    def get(self, name: str) -> RegistryEntry | None:
        return self._entries.get(name)

    def entries(self, kind: RegistryKind | None = None) -> list[RegistryEntry]:
        return [e for e in self._entries.values() if kind is None or e.kind == kind]

    def record_names(self) -> list[str]:
        """Names of generated records, sorted by name."""
        return sorted(e.name for e in self.entries(RegistryKind.RECORD))
