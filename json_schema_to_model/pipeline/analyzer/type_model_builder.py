"""
Type model builder.

Phase 2 of the pipeline: infer, for every property of a record, a type
signature and the equality/hash/clone algorithm tags that follow from it.
Arrays and maps get one synthetic descriptor per nesting layer ("Prop[]"
for list elements, "Prop{}" for map values), built by applying the same
per-layer rule at each depth.
"""

from __future__ import annotations

import logging
from typing import Any

from ...utils import snake_to_pascal_case
from ..errors import HintConfigurationError, NameCollisionError, SchemaShapeError
from ..hints.hint_nodes import (
    AttributeHint,
    DictionaryHint,
    EnumHint,
    Hint,
    HintKind,
    PropertyHint,
    PropertyModifiersHint,
    PropertyNameHint,
    PropertyTypeHint,
)
from ..hints.hint_resolver import HintResolver, make_property_scope
from ..schema_ast.nodes import JsonSchema, JsonType
from .enum_model_builder import build_enum_model
from .ir_nodes import (
    ELEMENT_SUFFIX,
    VALUE_SUFFIX,
    AdditionalTypeRequest,
    EnumMemberDefault,
    RegistryKind,
    ScalarKind,
    SignatureKind,
    TypeDescriptor,
    TypeModel,
    TypeSignature,
)
from .name_resolver import DeclaredType, NameMapping, NameResolver

logger = logging.getLogger(__name__)

# Type names accepted by PropertyTypeHint, PropertyHint and DictionaryHint (case-insensitive)
HINTED_SCALARS = {
    "int": ScalarKind.INTEGER,
    "long": ScalarKind.INTEGER,
    "biginteger": ScalarKind.INTEGER,
    "double": ScalarKind.NUMBER,
    "float": ScalarKind.NUMBER,
    "decimal": ScalarKind.DECIMAL,
    "datetime": ScalarKind.DATE_TIME,
    "uri": ScalarKind.URI,
    "guid": ScalarKind.UUID,
    "uuid": ScalarKind.UUID,
    "bool": ScalarKind.BOOLEAN,
    "boolean": ScalarKind.BOOLEAN,
    "string": ScalarKind.STRING,
    "str": ScalarKind.STRING,
}

_JSON_SCALARS = {
    JsonType.BOOLEAN: ScalarKind.BOOLEAN,
    JsonType.INTEGER: ScalarKind.INTEGER,
    JsonType.NUMBER: ScalarKind.NUMBER,
    JsonType.STRING: ScalarKind.STRING,
}

_STRING_FORMATS = {
    "date-time": ScalarKind.DATE_TIME,
    "uri": ScalarKind.URI,
    "uri-reference": ScalarKind.URI,
}


def _literal_json_type(value: Any) -> JsonType | None:
    if isinstance(value, bool):
        return JsonType.BOOLEAN
    if isinstance(value, int):
        return JsonType.INTEGER
    if isinstance(value, float):
        return JsonType.NUMBER
    if isinstance(value, str):
        return JsonType.STRING
    return None


def infer_type_from_enum(schema: JsonSchema) -> JsonType | None:
    """The JSON type shared by all of a schema's `enum` literals, if there is one."""
    if not schema.enum:
        return None
    types = {_literal_json_type(value) for value in schema.enum}
    if types == {JsonType.INTEGER, JsonType.NUMBER}:
        return JsonType.NUMBER
    if len(types) == 1:
        return types.pop()
    return None


class TypeModelBuilder:
    """Builds the type model of one record at a time.

    Args:
        hints: Hint lookup
        names: Types declared for the root and the definitions
        resolver: Resolver used for attribute and enum names
    """

    def __init__(self, hints: HintResolver, names: NameMapping, resolver: NameResolver):
        self.hints = hints
        self.names = names
        self.resolver = resolver
        self._declared_by_type_name = names.by_type_name()

    def build(self, declared: DeclaredType) -> TypeModel:
        """
        Build the type model of a record.

        Args:
            declared: The record's declared name and schema

        Returns:
            TypeModel with property and layer descriptors, capability set and
            any additional type requests

        Raises:
            HintConfigurationError: If a hint cannot be applied
            SchemaShapeError: If a property cannot be classified
            NameCollisionError: If two properties map to the same attribute
        """
        schema = declared.schema
        model = TypeModel(type_name=declared.type_name, description=schema.description)
        scope_names = self._scope_names(declared)

        base_hint = self.hints.type_hint(declared.schema_name, HintKind.BASE_TYPE)
        if base_hint is not None:
            model.base_type_names = tuple(base_hint.base_type_names)
        if self.hints.type_hint(declared.schema_name, HintKind.INTERFACE) is not None:
            model.interface_names.append(f"I{declared.type_name}")

        attribute_names: dict[str, str] = {}
        for order, (property_name, property_schema) in enumerate(schema.properties.items()):
            key = snake_to_pascal_case(property_name) or property_name
            scope = make_property_scope(scope_names[0], key)

            name_hint = self._property_hint(scope_names, key, HintKind.PROPERTY_NAME)
            property_hint = self._property_hint(scope_names, key, HintKind.PROPERTY)
            modifiers_hint = self._property_hint(scope_names, key, HintKind.PROPERTY_MODIFIERS)
            attribute_hint: AttributeHint | None = self._property_hint(scope_names, key, HintKind.ATTRIBUTE)

            name_override = self._first_name(name_hint, property_hint)
            modifiers = self._modifiers(modifiers_hint, property_hint)
            python_name = self.resolver.attribute_name(property_name, name_override, modifiers)
            if python_name in attribute_names:
                raise NameCollisionError(
                    f"Properties {attribute_names[python_name]!r} and {property_name!r} both map to attribute {python_name!r}",
                    scope=scope,
                    type_name=model.type_name,
                    property_name=property_name,
                )
            attribute_names[python_name] = property_name

            descriptor = self._describe(
                model,
                scope_names,
                key,
                property_schema,
                order,
                serialized_name=property_name,
                python_name=python_name,
                description=property_schema.description,
                is_required=schema.is_required(property_name),
                modifiers=modifiers,
                attribute=attribute_hint,
            )
            self._apply_default(model, descriptor, property_schema, scope)

        logger.debug("Built type model for %s with %d properties", model.type_name, len(attribute_names))
        return model

    def _scope_names(self, declared: DeclaredType) -> list[str]:
        """Type names under which property hints of a record may be scoped."""
        names = []
        for name in (snake_to_pascal_case(declared.schema_name), declared.schema_name, declared.type_name):
            if name and name not in names:
                names.append(name)
        return names

    def _property_hint(self, scope_names: list[str], key: str, kind: HintKind) -> Hint | None:
        return self.hints.property_hint(scope_names, key, kind)

    @staticmethod
    def _first_name(name_hint: PropertyNameHint | None, property_hint: PropertyHint | None) -> str | None:
        if name_hint is not None:
            return name_hint.name
        if property_hint is not None:
            return property_hint.name
        return None

    @staticmethod
    def _modifiers(modifiers_hint: PropertyModifiersHint | None, property_hint: PropertyHint | None) -> tuple[str, ...]:
        if modifiers_hint is not None:
            return modifiers_hint.modifiers
        if property_hint is not None:
            return property_hint.modifiers
        return ()

    def _describe(
        self,
        model: TypeModel,
        scope_names: list[str],
        key: str,
        schema: JsonSchema,
        order: int,
        **property_fields: Any,
    ) -> TypeDescriptor:
        """Describe one property or nesting layer, registering its descendants after it."""
        model.descriptors[key] = None  # keep the outer layer ahead of its children
        signature = self._infer_signature(model, scope_names, key, schema, order)
        descriptor = TypeDescriptor(key=key, signature=signature, declaration_order=order, **property_fields)
        model.descriptors[key] = descriptor
        return descriptor

    def _describe_signature(self, model: TypeModel, key: str, signature: TypeSignature, order: int) -> TypeDescriptor:
        """Describe a layer whose signature is already known (hinted map values)."""
        descriptor = TypeDescriptor(key=key, signature=signature, declaration_order=order)
        model.descriptors[key] = descriptor
        return descriptor

    def _infer_signature(
        self,
        model: TypeModel,
        scope_names: list[str],
        key: str,
        schema: JsonSchema,
        order: int,
    ) -> TypeSignature:
        scope = make_property_scope(scope_names[0], key)

        # Explicit type override
        hinted_type = self._hinted_type_name(scope_names, key)
        if hinted_type is not None:
            if schema.type == JsonType.ARRAY:
                raise HintConfigurationError(
                    f"A type hint cannot replace an array; hint its elements with {key + ELEMENT_SUFFIX!r}",
                    scope=scope,
                    type_name=model.type_name,
                )
            return TypeSignature.scalar(self._hinted_scalar(hinted_type, scope))

        # Formatted strings
        if schema.type == JsonType.STRING and schema.format in _STRING_FORMATS:
            return TypeSignature.scalar(_STRING_FORMATS[schema.format])

        # Dictionaries
        dictionary_hint: DictionaryHint | None = self._property_hint(scope_names, key, HintKind.DICTIONARY)
        if dictionary_hint is not None and self._can_be_dictionary(schema):
            return self._dictionary_signature(model, scope_names, key, schema, order, dictionary_hint)

        # References to hinted enums
        declared = self._referenced_type(schema, model, key)
        if declared is not None and declared.kind == RegistryKind.ENUM:
            return TypeSignature.enum(declared.type_name)

        # Inline enums
        enum_hint: EnumHint | None = self._property_hint(scope_names, key, HintKind.ENUM)
        if enum_hint is not None:
            return self._inline_enum_signature(model, scope, schema, enum_hint)

        json_type = schema.type or infer_type_from_enum(schema)
        match json_type:
            case JsonType.BOOLEAN | JsonType.INTEGER | JsonType.NUMBER | JsonType.STRING:
                return TypeSignature.scalar(_JSON_SCALARS[json_type])
            case JsonType.OBJECT:
                if declared is not None:
                    return TypeSignature.record(declared.type_name)
                return TypeSignature.untyped()
            case JsonType.ARRAY:
                items = schema.items if schema.items is not None else JsonSchema(source_path=f"{schema.source_path}/items")
                element = self._describe(model, scope_names, key + ELEMENT_SUFFIX, items, order)
                return TypeSignature.list_of(element.signature)
            case None:
                if declared is not None:
                    return TypeSignature.record(declared.type_name)
                return TypeSignature.untyped()

        raise SchemaShapeError(
            f"Cannot classify schema of type {json_type!r}",
            scope=schema.source_path,
            type_name=model.type_name,
            property_name=key,
        )

    def _hinted_type_name(self, scope_names: list[str], key: str) -> str | None:
        type_hint: PropertyTypeHint | None = self._property_hint(scope_names, key, HintKind.PROPERTY_TYPE)
        if type_hint is not None:
            return type_hint.type_name
        property_hint: PropertyHint | None = self._property_hint(scope_names, key, HintKind.PROPERTY)
        if property_hint is not None:
            return property_hint.type_name
        return None

    @staticmethod
    def _hinted_scalar(type_name: str, scope: str) -> ScalarKind:
        scalar_kind = HINTED_SCALARS.get(type_name.lower())
        if scalar_kind is None:
            raise HintConfigurationError(f"Unsupported property type name {type_name!r}", scope=scope)
        return scalar_kind

    @staticmethod
    def _can_be_dictionary(schema: JsonSchema) -> bool:
        return schema.type == JsonType.OBJECT and not schema.properties and schema.reference is None

    def _dictionary_signature(
        self,
        model: TypeModel,
        scope_names: list[str],
        key: str,
        schema: JsonSchema,
        order: int,
        hint: DictionaryHint,
    ) -> TypeSignature:
        value_key = key + VALUE_SUFFIX
        if hint.value_type_name is not None:
            value = self._describe_signature(model, value_key, self._named_value_signature(hint.value_type_name), order)
        else:
            value_schema = schema.additional_properties
            if not isinstance(value_schema, JsonSchema):
                value_schema = JsonSchema(source_path=f"{schema.source_path}/additionalProperties", type=JsonType.STRING)
            value = self._describe(model, scope_names, value_key, value_schema, order)
        return TypeSignature.map_of(value.signature, key_type_name=hint.key_type_name)

    def _named_value_signature(self, type_name: str) -> TypeSignature:
        """Signature of a map value named by DictionaryHint.valueTypeName."""
        declared = self._declared_by_type_name.get(type_name) or self._declared_by_type_name.get(self.resolver.type_name(type_name))
        if declared is not None:
            if declared.kind == RegistryKind.ENUM:
                return TypeSignature.enum(declared.type_name)
            return TypeSignature.record(declared.type_name)
        scalar_kind = HINTED_SCALARS.get(type_name.lower())
        if scalar_kind is not None:
            return TypeSignature.scalar(scalar_kind)
        return TypeSignature.untyped(type_name)

    def _referenced_type(self, schema: JsonSchema, model: TypeModel, key: str) -> DeclaredType | None:
        definition_name = schema.reference_name
        if definition_name is None:
            return None
        declared = self.names.definitions.get(definition_name)
        if declared is None and definition_name in self.names.root.schema.definitions:
            # Scalar definitions are not named; the reference carries their type
            return None
        if declared is None:
            raise SchemaShapeError(
                f"Reference {schema.reference!r} does not name a generated type",
                scope=schema.source_path,
                type_name=model.type_name,
                property_name=key,
            )
        return declared

    def _inline_enum_signature(self, model: TypeModel, scope: str, schema: JsonSchema, hint: EnumHint) -> TypeSignature:
        if not hint.type_name:
            raise HintConfigurationError("EnumHint requires a type name", scope=scope, type_name=model.type_name)
        if not schema.enum:
            raise HintConfigurationError("EnumHint targets a schema without enum values", scope=scope, type_name=model.type_name)
        model.additional_requests.append(AdditionalTypeRequest(hint=hint, schema=schema, requested_by=scope))
        return TypeSignature.enum(self.resolver.type_name(hint.type_name))

    def _apply_default(self, model: TypeModel, descriptor: TypeDescriptor, schema: JsonSchema, scope: str) -> None:
        """Record a schema default that can be expressed as a parameter default."""
        if not schema.has_default or schema.default is None:
            return

        value = schema.default
        signature = descriptor.signature
        if signature.kind == SignatureKind.ENUM:
            member = self._enum_member_for(model, signature.name, schema, scope, value)
            if member is not None:
                descriptor.default_value = EnumMemberDefault(signature.name, member)
                descriptor.has_default = True
                return
        elif signature.kind == SignatureKind.SCALAR and self._default_matches(signature.scalar_kind, value):
            descriptor.default_value = value
            descriptor.has_default = True
            return

        logger.debug("Ignoring default %r of %s: not representable for %s", value, scope, signature)

    @staticmethod
    def _default_matches(scalar_kind: ScalarKind, value: Any) -> bool:
        if scalar_kind == ScalarKind.BOOLEAN:
            return isinstance(value, bool)
        if scalar_kind == ScalarKind.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        if scalar_kind == ScalarKind.NUMBER:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if scalar_kind == ScalarKind.STRING:
            return isinstance(value, str)
        return False

    def _enum_member_for(self, model: TypeModel, enum_name: str, schema: JsonSchema, scope: str, literal: Any) -> str | None:
        declared = self._declared_by_type_name.get(enum_name)
        if declared is not None:
            enum_model = build_enum_model(enum_name, declared.schema.enum, declared.enum_hint, scope)
        else:
            hint = next((r.hint for r in model.additional_requests if r.schema is schema), None)
            enum_model = build_enum_model(enum_name, schema.enum, hint, scope)
        member = enum_model.member_for_literal(literal)
        return member.python_name if member is not None else None
