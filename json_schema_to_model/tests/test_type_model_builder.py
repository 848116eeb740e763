import pytest

from json_schema_to_model.pipeline import read_schema
from json_schema_to_model.pipeline.analyzer import (
    CloneKind,
    ComparisonKind,
    EnumMemberDefault,
    HashKind,
    NameResolver,
    RegistryKind,
    ScalarKind,
    SignatureKind,
    TypeModelBuilder,
    TypeSignature,
)
from json_schema_to_model.pipeline.errors import HintConfigurationError, NameCollisionError, SchemaShapeError
from json_schema_to_model.pipeline.hints import HintResolver, read_hints


def build_models(document: dict, hints: dict | None = None, root_class_name: str = "Root") -> dict:
    schema = read_schema(document)
    resolver = HintResolver(read_hints(hints) if hints else None)
    names = NameResolver(resolver)
    mapping = names.declare(schema, root_class_name)
    builder = TypeModelBuilder(resolver, mapping, names)
    models = {mapping.root.type_name: builder.build(mapping.root)}
    for declared in mapping.definitions.values():
        if declared.kind == RegistryKind.RECORD:
            models[declared.type_name] = builder.build(declared)
    return models


def root_with(properties: dict, definitions: dict | None = None) -> dict:
    document = {"type": "object", "properties": properties}
    if definitions:
        document["definitions"] = definitions
    return document


class TestSignatures:
    """Signature inference and the algorithm tags derived from it"""

    @pytest.mark.parametrize(
        "schema, scalar_kind, kinds",
        [
            ({"type": "boolean"}, ScalarKind.BOOLEAN, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN)),
            ({"type": "integer"}, ScalarKind.INTEGER, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN)),
            ({"type": "number"}, ScalarKind.NUMBER, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN)),
            ({"type": "string"}, ScalarKind.STRING, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_REF, CloneKind.ASSIGN)),
            ({"type": "string", "format": "date-time"}, ScalarKind.DATE_TIME, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_VALUE, CloneKind.ASSIGN)),
            ({"type": "string", "format": "uri"}, ScalarKind.URI, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_REF, CloneKind.URI)),
            ({"type": "string", "format": "uri-reference"}, ScalarKind.URI, (ComparisonKind.VALUE_EQUALS, HashKind.SCALAR_REF, CloneKind.URI)),
        ],
    )
    def test_scalars(self, schema, scalar_kind, kinds):
        descriptor = build_models(root_with({"p": schema}))["Root"].descriptors["P"]
        assert descriptor.signature == TypeSignature.scalar(scalar_kind)
        assert (descriptor.comparison_kind, descriptor.hash_kind, descriptor.clone_kind) == kinds
        assert not descriptor.is_schema_defined_type

    def test_record_reference(self):
        models = build_models(root_with({"d": {"$ref": "#/definitions/d"}}, {"d": {"type": "object"}}))
        descriptor = models["Root"].descriptors["D"]
        assert descriptor.signature == TypeSignature.record("D")
        assert descriptor.comparison_kind == ComparisonKind.STRUCTURAL_EQUALS
        assert descriptor.hash_kind == HashKind.SCALAR_REF
        assert descriptor.clone_kind == CloneKind.CLONE
        assert descriptor.is_schema_defined_type

    def test_untyped_object(self):
        descriptor = build_models(root_with({"blob": {"type": "object"}}))["Root"].descriptors["Blob"]
        assert descriptor.signature.kind == SignatureKind.UNTYPED_OBJECT
        assert descriptor.clone_kind == CloneKind.ASSIGN
        assert descriptor.comparison_kind == ComparisonKind.STRUCTURAL_EQUALS

    def test_nested_lists_get_one_descriptor_per_layer(self):
        models = build_models(
            root_with(
                {"grid": {"type": "array", "items": {"type": "array", "items": {"$ref": "#/definitions/d"}}}},
                {"d": {"type": "object"}},
            )
        )
        model = models["Root"]
        assert list(model.descriptors) == ["Grid", "Grid[]", "Grid[][]"]
        grid = model.descriptors["Grid"]
        assert str(grid.signature) == "List<List<D>>"
        assert grid.clone_kind == CloneKind.COLLECTION
        assert grid.is_schema_defined_type
        assert model.child_of(model.child_of(grid)).clone_kind == CloneKind.CLONE
        assert [d.key for d in model.properties] == ["Grid"]

    def test_declaration_order_follows_schema(self):
        model = build_models(root_with({"zeta": {"type": "string"}, "alpha": {"type": "integer"}}))["Root"]
        assert [d.serialized_name for d in model.properties] == ["zeta", "alpha"]
        assert [d.declaration_order for d in model.properties] == [0, 1]

    @pytest.mark.parametrize(
        "literals, expected",
        [
            (["a", "b"], TypeSignature.scalar(ScalarKind.STRING)),
            ([1, 2], TypeSignature.scalar(ScalarKind.INTEGER)),
            ([1, 2.5], TypeSignature.scalar(ScalarKind.NUMBER)),
            (["a", 1], TypeSignature.untyped()),
        ],
    )
    def test_type_inferred_from_enum_literals(self, literals, expected):
        descriptor = build_models(root_with({"p": {"enum": literals}}))["Root"].descriptors["P"]
        assert descriptor.signature == expected

    def test_root_must_be_object(self):
        with pytest.raises(SchemaShapeError):
            build_models({"type": "array", "items": {"type": "string"}})


class TestDictionaries:
    """Map typing through DictionaryHint"""

    def test_bare_hint_types_string_map(self):
        models = build_models(root_with({"props": {"type": "object"}}), {"Root.Props": [{"kind": "DictionaryHint"}]})
        descriptor = models["Root"].descriptors["Props"]
        assert str(descriptor.signature) == "Map<string,str>"
        assert descriptor.comparison_kind == ComparisonKind.DICTIONARY
        assert descriptor.hash_kind == HashKind.DICTIONARY
        assert descriptor.clone_kind == CloneKind.DICTIONARY

    def test_additional_properties_record(self):
        models = build_models(
            root_with(
                {"props": {"type": "object", "additionalProperties": {"$ref": "#/definitions/d"}}},
                {"d": {"type": "object", "properties": {"x": {"type": "integer"}}}},
            ),
            {"Root.Props": [{"kind": "DictionaryHint"}]},
        )
        model = models["Root"]
        assert str(model.descriptors["Props"].signature) == "Map<string,D>"
        assert model.descriptors["Props{}"].clone_kind == CloneKind.CLONE
        assert not model.descriptors["Props"].is_schema_defined_type

    def test_without_hint_object_stays_untyped(self):
        descriptor = build_models(root_with({"props": {"type": "object"}}))["Root"].descriptors["Props"]
        assert descriptor.signature == TypeSignature.untyped()

    def test_value_type_name(self):
        models = build_models(
            root_with({"props": {"type": "object"}}, {"d": {"type": "object"}}),
            {
                "Root.Props": [{"kind": "DictionaryHint", "arguments": {"keyTypeName": "int", "valueTypeName": "D"}}],
            },
        )
        assert str(models["Root"].descriptors["Props"].signature) == "Map<int,D>"

    def test_wildcard_hint_applies_to_two_types(self):
        models = build_models(
            root_with(
                {"properties": {"type": "object"}, "other": {"$ref": "#/definitions/other"}},
                {"other": {"type": "object", "properties": {"properties": {"type": "object"}}}},
            ),
            {"*.Properties": [{"kind": "DictionaryHint"}]},
        )
        root_signature = models["Root"].descriptors["Properties"].signature
        other_signature = models["Other"].descriptors["Properties"].signature
        assert root_signature == other_signature == TypeSignature.map_of(TypeSignature.scalar(ScalarKind.STRING))

    def test_element_hint_makes_list_of_maps(self):
        models = build_models(
            root_with({"items": {"type": "array", "items": {"type": "object"}}}),
            {"Root.Items[]": [{"kind": "DictionaryHint"}]},
        )
        model = models["Root"]
        assert str(model.descriptors["Items"].signature) == "List<Map<string,str>>"
        assert list(model.descriptors) == ["Items", "Items[]", "Items[]{}"]


class TestHintedProperties:
    """Enums, type overrides, names and modifiers"""

    def test_inline_enum_hint_queues_request(self):
        models = build_models(
            root_with({"color": {"type": "string", "enum": ["red", "green"], "default": "green"}}),
            {"Root.Color": [{"kind": "EnumHint", "arguments": {"typeName": "Color"}}]},
        )
        model = models["Root"]
        descriptor = model.descriptors["Color"]
        assert descriptor.signature == TypeSignature.enum("Color")
        assert descriptor.default_value == EnumMemberDefault("Color", "Green")
        assert [r.hint.type_name for r in model.additional_requests] == ["Color"]

    def test_enum_hint_requires_type_name(self):
        with pytest.raises(HintConfigurationError, match="EnumHint requires a type name"):
            build_models(
                root_with({"color": {"type": "string", "enum": ["red"]}}),
                {"Root.Color": [{"kind": "EnumHint"}]},
            )

    def test_reference_to_enum_definition(self):
        models = build_models(
            root_with({"color": {"$ref": "#/definitions/color"}}, {"color": {"type": "string", "enum": ["red"]}}),
            {"color": [{"kind": "EnumHint", "arguments": {"typeName": "Color"}}]},
        )
        descriptor = models["Root"].descriptors["Color"]
        assert descriptor.signature == TypeSignature.enum("Color")
        assert descriptor.is_schema_defined_type
        assert "Color" not in models

    def test_scalar_definition_is_inlined(self):
        models = build_models(root_with({"id": {"$ref": "#/definitions/id"}}, {"id": {"type": "string", "format": "uri"}}))
        assert models["Root"].descriptors["Id"].signature == TypeSignature.scalar(ScalarKind.URI)
        assert "Id" not in models

    def test_property_type_hint(self):
        models = build_models(
            root_with({"amount": {"type": "number"}, "key": {"type": "string"}}),
            {
                "Root.Amount": [{"kind": "PropertyTypeHint", "arguments": {"typeName": "Decimal"}}],
                "Root.Key": [{"kind": "PropertyHint", "arguments": {"typeName": "Guid"}}],
            },
        )
        model = models["Root"]
        assert model.descriptors["Amount"].signature == TypeSignature.scalar(ScalarKind.DECIMAL)
        assert model.descriptors["Key"].signature == TypeSignature.scalar(ScalarKind.UUID)
        assert model.imports() == {("decimal", "Decimal"), ("uuid", "UUID")}

    def test_property_type_hint_on_array(self):
        with pytest.raises(HintConfigurationError):
            build_models(
                root_with({"values": {"type": "array", "items": {"type": "number"}}}),
                {"Root.Values": [{"kind": "PropertyTypeHint", "arguments": {"typeName": "Decimal"}}]},
            )

    def test_unknown_property_type_name(self):
        with pytest.raises(HintConfigurationError, match="Unsupported property type name"):
            build_models(
                root_with({"amount": {"type": "number"}}),
                {"Root.Amount": [{"kind": "PropertyTypeHint", "arguments": {"typeName": "Money"}}]},
            )

    def test_names_and_modifiers(self):
        model = build_models(
            root_with({"firstName": {"type": "string"}, "secret": {"type": "string"}, "class": {"type": "string"}}),
            {
                "Root.FirstName": [{"kind": "PropertyNameHint", "arguments": {"name": "given_name"}}],
                "Root.Secret": [{"kind": "PropertyModifiersHint", "arguments": {"modifiers": ["private"]}}],
            },
        )["Root"]
        assert [d.python_name for d in model.properties] == ["given_name", "_secret", "class_"]

    def test_record_member_names_are_suffixed(self):
        model = build_models(
            root_with({"init": {"type": "string"}, "copyOf": {"type": "string"}}),
            {"Root.Init": [{"kind": "PropertyModifiersHint", "arguments": {"modifiers": ["private"]}}]},
        )["Root"]
        assert [d.python_name for d in model.properties] == ["_init_", "copy_of_"]

    def test_extra_member_names(self):
        names = NameResolver(HintResolver(), extra_member_names=("root_node_kind",))
        assert names.attribute_name("rootNodeKind") == "root_node_kind_"
        assert names.attribute_name("nodeKind") == "node_kind"

    def test_attribute_name_collision(self):
        with pytest.raises(NameCollisionError):
            build_models(root_with({"fooBar": {"type": "string"}, "foo_bar": {"type": "string"}}))

    def test_base_types_and_interfaces(self):
        models = build_models(
            root_with({}, {"shape": {"type": "object"}}),
            {
                "shape": [
                    {"kind": "BaseTypeHint", "arguments": {"baseTypeNames": ["Base"]}},
                    {"kind": "InterfaceHint"},
                ]
            },
        )
        assert models["Shape"].base_type_names == ("Base",)
        assert models["Shape"].interface_names == ["IShape"]
        assert models["Root"].interface_names == []


if __name__ == "__main__":
    pytest.main([__file__])
