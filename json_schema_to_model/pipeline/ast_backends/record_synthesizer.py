"""
Record synthesizer.

Builds the class of a record from its type model: attribute declarations,
constructors, the initializer that copies every property, value equality,
and hash code. Container properties are handled one nesting layer at a
time; each layer's elements or values are processed by the same routine
with the layer's own descriptor, so lists of maps of lists need no special
cases.
"""

from __future__ import annotations

import ast
from collections.abc import Callable

from ..analyzer.ir_nodes import (
    CloneKind,
    ComparisonKind,
    EnumMemberDefault,
    HashKind,
    SignatureKind,
    TypeDescriptor,
    TypeModel,
)
from ..config import DataModelGeneratorConfig
from ..errors import HintConfigurationError
from ..hints.hint_nodes import AttributeHint
from .base import HASH_MASK, RUNTIME_MODULE, ArtifactKind, GeneratedArtifact, Synthesizer, node_kind_attribute

Sink = Callable[[str], ast.stmt]


class RecordSynthesizer(Synthesizer):
    """Synthesizes record classes and their optional equality comparers.

    Args:
        config: Code generation configuration
        node_kind_enum: Name of the node kind enum; records get a kind property when set
    """

    def __init__(self, config: DataModelGeneratorConfig | None = None, node_kind_enum: str | None = None):
        super().__init__(config)
        self.node_kind_enum = node_kind_enum

    def synthesize(self, model: TypeModel) -> list[GeneratedArtifact]:
        """
        Build the record class, and its equality comparer when configured.

        Args:
            model: The record's type model

        Returns:
            The record artifact, followed by the comparer artifact if any
        """
        imports: set[tuple[str, str]] = set()
        name = model.type_name
        properties = model.properties

        body: list[ast.stmt] = [self._declaration(d, imports) for d in properties]
        body.append(self._constructor(model, properties))
        body.append(self._copy_constructor(model, properties))
        if self.node_kind_enum:
            body.append(self._node_kind_property(model))
        body.append(self._deep_clone(model))
        body.append(self._initializer(model, properties, imports))

        comparer: GeneratedArtifact | None = None
        if self.config.generate_equality_comparers:
            comparer = self._comparer(model, properties, imports)
            body.extend(self._delegating_equality(model, comparer.name))
        else:
            body.append(self._value_equals(model, properties))
            body.append(self._value_get_hash_code(model, properties, imports))
        body.extend(self._dunder_equality(model))

        decorators = []
        if self.config.seal_classes:
            decorators.append("final")
            imports.add(("typing", "final"))

        for descriptor in model.descriptors.values():
            imports |= self.signature_imports(descriptor.signature)

        node = self._class(
            name,
            body,
            bases=model.base_type_names,
            decorators=decorators,
            docstring=model.description,
        )
        artifacts = [
            GeneratedArtifact(
                name=name,
                kind=ArtifactKind.RECORD,
                node=node,
                imports=imports,
                depends_on=tuple(model.base_type_names),
            )
        ]
        if comparer is not None:
            comparer.imports |= imports
            artifacts.append(comparer)
        return artifacts

    # Declarations and constructors

    def _annotation(self, descriptor: TypeDescriptor, optional: bool = True) -> str:
        annotation = self.translate_type(descriptor.signature)
        if optional:
            annotation = f"{annotation} | None"
        return annotation

    def _declaration(self, descriptor: TypeDescriptor, imports: set[tuple[str, str]]) -> ast.AnnAssign:
        """Class-level annotation of one property."""
        annotation = self._annotation(descriptor, optional=not descriptor.is_required)
        if descriptor.attribute is not None:
            annotation = f"Annotated[{annotation}, {self._attribute_call(descriptor.attribute, descriptor)}]"
            imports.add(("typing", "Annotated"))
        return ast.AnnAssign(
            target=ast.Name(id=descriptor.python_name, ctx=ast.Store()),
            annotation=self._parse_expr(annotation),
            value=None,
            simple=1,
        )

    def _attribute_call(self, hint: AttributeHint, descriptor: TypeDescriptor) -> str:
        arguments = [repr(argument) for argument in hint.arguments]
        for key, value in hint.properties:
            if not key.isidentifier():
                raise HintConfigurationError(
                    f"AttributeHint property {key!r} is not a valid keyword",
                    property_name=descriptor.serialized_name,
                )
            arguments.append(f"{key}={value!r}")
        return f"{hint.type_name}({', '.join(arguments)})"

    def _default_expr(self, descriptor: TypeDescriptor) -> ast.expr:
        if not descriptor.has_default:
            return ast.Constant(value=None)
        value = descriptor.default_value
        if isinstance(value, EnumMemberDefault):
            return self._parse_expr(f"{value.enum_name}.{value.member_name}")
        return ast.Constant(value=value)

    def _constructor(self, model: TypeModel, properties: list[TypeDescriptor]) -> ast.FunctionDef:
        """`__init__` taking every property, defaulting to the schema default or None."""
        args = [self._arg("self")] + [self._arg(d.python_name, self._annotation(d)) for d in properties]
        call = ", ".join(d.python_name for d in properties)
        return self._function(
            "__init__",
            args,
            [self._parse_stmt(f"self._init({call})")],
            returns="None",
            defaults=[self._default_expr(d) for d in properties],
        )

    def _copy_constructor(self, model: TypeModel, properties: list[TypeDescriptor]) -> ast.FunctionDef:
        call = ", ".join(f"other.{d.python_name}" for d in properties)
        body = [
            self._docstring(f"Create a deep copy of another {model.type_name}."),
            self._if("other is None", [self._parse_stmt("raise ValueError('other must not be None')")]),
            self._parse_stmt("instance = cls.__new__(cls)"),
            self._parse_stmt(f"instance._init({call})"),
            self._parse_stmt("return instance"),
        ]
        return self._function(
            "copy_of",
            [self._arg("cls"), self._arg("other", model.type_name)],
            body,
            returns=model.type_name,
            decorators=["classmethod"],
        )

    def _node_kind_property(self, model: TypeModel) -> ast.FunctionDef:
        return self._function(
            node_kind_attribute(self.node_kind_enum),
            [self._arg("self")],
            [self._parse_stmt(f"return {self.node_kind_enum}.{model.type_name}")],
            returns=self.node_kind_enum,
            decorators=["property"],
        )

    def _deep_clone(self, model: TypeModel) -> ast.FunctionDef:
        return self._function(
            "deep_clone",
            [self._arg("self")],
            [self._parse_stmt(f"return {model.type_name}.copy_of(self)")],
            returns=model.type_name,
        )

    # Initializer (clone)

    def _initializer(self, model: TypeModel, properties: list[TypeDescriptor], imports: set[tuple[str, str]]) -> ast.FunctionDef:
        """`_init` storing a copy of each argument according to its clone kind."""
        self.names.reset()
        body: list[ast.stmt] = []
        for descriptor in properties:
            target = f"self.{descriptor.python_name}"
            body.extend(
                self.copy_statements(
                    model,
                    descriptor,
                    descriptor.python_name,
                    lambda expr, target=target: self._parse_stmt(f"{target} = {expr}"),
                    imports,
                )
            )
        args = [self._arg("self")] + [self._arg(d.python_name) for d in properties]
        return self._function("_init", args, body, returns="None")

    def copy_statements(
        self,
        model: TypeModel,
        descriptor: TypeDescriptor,
        source: str,
        sink: Sink,
        imports: set[tuple[str, str]],
    ) -> list[ast.stmt]:
        """
        Statements that hand a copy of `source` to `sink`.

        Args:
            model: Model owning the layer descriptors
            descriptor: Descriptor of the value held by `source`
            source: Expression for the value (a name, evaluated more than once)
            sink: Builds the statement consuming the copied expression
            imports: Collected imports

        Returns:
            Statements; None is passed through unchanged
        """
        match descriptor.clone_kind:
            case CloneKind.CLONE:
                return [self._if(f"{source} is None", [sink("None")], [sink(f"{descriptor.signature.name}.copy_of({source})")])]
            case CloneKind.URI:
                imports.add((RUNTIME_MODULE, "Uri"))
                imports.add((RUNTIME_MODULE, "UriKind"))
                rebuilt = f"Uri({source}.original_string, UriKind.ABSOLUTE if {source}.is_absolute_uri else UriKind.RELATIVE)"
                return [self._if(f"{source} is None", [sink("None")], [sink(rebuilt)])]
            case CloneKind.COLLECTION:
                suffix = self.names.next_suffix()
                destination, value = f"destination_{suffix}", f"value_{suffix}"
                inner = self.copy_statements(
                    model,
                    model.child_of(descriptor),
                    value,
                    lambda expr: self._parse_stmt(f"{destination}.append({expr})"),
                    imports,
                )
                copy = [
                    self._parse_stmt(f"{destination} = []"),
                    self._for(value, source, inner),
                    sink(destination),
                ]
                return [self._if(f"{source} is None", [sink("None")], copy)]
            case CloneKind.DICTIONARY:
                suffix = self.names.next_suffix()
                destination, key, value = f"destination_{suffix}", f"key_{suffix}", f"value_{suffix}"
                inner = self.copy_statements(
                    model,
                    model.child_of(descriptor),
                    value,
                    lambda expr: self._parse_stmt(f"{destination}[{key}] = {expr}"),
                    imports,
                )
                copy = [
                    self._parse_stmt(f"{destination} = {{}}"),
                    self._for(f"{key}, {value}", f"{source}.items()", inner),
                    sink(destination),
                ]
                return [self._if(f"{source} is None", [sink("None")], copy)]
        return [sink(source)]

    # Equality

    def equality_statements(self, model: TypeModel, descriptor: TypeDescriptor, left: str, right: str) -> list[ast.stmt]:
        """Statements that `return False` as soon as `left` and `right` differ."""
        fail = [self._parse_stmt("return False")]
        match descriptor.comparison_kind:
            case ComparisonKind.VALUE_EQUALS:
                return [self._if(f"{left} != {right}", fail)]
            case ComparisonKind.STRUCTURAL_EQUALS:
                return [self._if(f"{left} is not {right} and {left} != {right}", fail)]
            case ComparisonKind.COLLECTION:
                suffix = self.names.next_suffix()
                index, value, other = f"index_{suffix}", f"value_{suffix}", f"other_value_{suffix}"
                element = self.equality_statements(model, model.child_of(descriptor), value, other)
                loop = self._for(
                    index,
                    f"range(len({left}))",
                    [
                        self._parse_stmt(f"{value} = {left}[{index}]"),
                        self._parse_stmt(f"{other} = {right}[{index}]"),
                        *element,
                    ],
                )
                return [
                    self._if(
                        f"{left} is not {right}",
                        [self._if(f"{left} is None or {right} is None or len({left}) != len({right})", fail), loop],
                    )
                ]
            case ComparisonKind.DICTIONARY:
                suffix = self.names.next_suffix()
                key, value, other = f"key_{suffix}", f"value_{suffix}", f"other_value_{suffix}"
                entry = self.equality_statements(model, model.child_of(descriptor), value, other)
                loop = self._for(
                    f"{key}, {value}",
                    f"{left}.items()",
                    [
                        self._if(f"{key} not in {right}", fail),
                        self._parse_stmt(f"{other} = {right}[{key}]"),
                        *entry,
                    ],
                )
                return [
                    self._if(
                        f"{left} is not {right}",
                        [self._if(f"{left} is None or {right} is None or len({left}) != len({right})", fail), loop],
                    )
                ]
        return []

    def _equality_body(self, model: TypeModel, properties: list[TypeDescriptor], left: str, right: str) -> list[ast.stmt]:
        self.names.reset()
        body: list[ast.stmt] = []
        for descriptor in properties:
            body.extend(self.equality_statements(model, descriptor, f"{left}.{descriptor.python_name}", f"{right}.{descriptor.python_name}"))
        body.append(self._parse_stmt("return True"))
        return body

    def _value_equals(self, model: TypeModel, properties: list[TypeDescriptor]) -> ast.FunctionDef:
        body = [self._if("other is None", [self._parse_stmt("return False")])]
        body.extend(self._equality_body(model, properties, "self", "other"))
        return self._function(
            "value_equals",
            [self._arg("self"), self._arg("other", f"{model.type_name} | None")],
            body,
            returns="bool",
        )

    # Hash code

    def _contribution(self, descriptor: TypeDescriptor, subject: str, imports: set[tuple[str, str]]) -> str:
        """Hash expression of a non-container value."""
        if descriptor.signature.kind == SignatureKind.UNTYPED_OBJECT and descriptor.signature.name is None:
            imports.add((RUNTIME_MODULE, "hash_value"))
            return f"hash_value({subject})"
        return f"hash({subject})"

    def hash_statements(
        self,
        model: TypeModel,
        descriptor: TypeDescriptor,
        subject: str,
        accumulator: str,
        imports: set[tuple[str, str]],
    ) -> list[ast.stmt]:
        """Statements folding the hash of `subject` into `accumulator`."""

        def fold(value: str) -> ast.stmt:
            return self._parse_stmt(f"{accumulator} = ({accumulator} * 31 + {value}) & {HASH_MASK}")

        match descriptor.hash_kind:
            case HashKind.SCALAR_VALUE:
                return [fold(self._contribution(descriptor, subject, imports))]
            case HashKind.SCALAR_REF:
                return [self._if(f"{subject} is not None", [fold(self._contribution(descriptor, subject, imports))])]
            case HashKind.COLLECTION:
                value = f"value_{self.names.next_suffix()}"
                element = self.hash_statements(model, model.child_of(descriptor), value, accumulator, imports)
                loop = self._for(
                    value,
                    subject,
                    [self._parse_stmt(f"{accumulator} = ({accumulator} * 31) & {HASH_MASK}"), *element],
                )
                return [self._if(f"{subject} is not None", [loop])]
            case HashKind.DICTIONARY:
                suffix = self.names.next_suffix()
                xor, key, value, entry = f"xor_{suffix}", f"key_{suffix}", f"value_{suffix}", f"entry_{suffix}"
                value_descriptor = model.child_of(descriptor)
                if value_descriptor.signature.is_container:
                    entry_hash = [
                        self._parse_stmt(f"{entry} = 17"),
                        *self.hash_statements(model, value_descriptor, value, entry, imports),
                    ]
                elif value_descriptor.hash_kind == HashKind.SCALAR_VALUE:
                    entry_hash = [self._parse_stmt(f"{entry} = {self._contribution(value_descriptor, value, imports)}")]
                else:
                    contribution = self._contribution(value_descriptor, value, imports)
                    entry_hash = [self._parse_stmt(f"{entry} = {contribution} if {value} is not None else 0")]
                loop = self._for(
                    f"{key}, {value}",
                    f"{subject}.items()",
                    [*entry_hash, self._parse_stmt(f"{xor} ^= hash({key}) ^ {entry}")],
                )
                return [self._if(f"{subject} is not None", [self._parse_stmt(f"{xor} = 0"), loop, fold(xor)])]
        return []

    def _hash_body(self, model: TypeModel, properties: list[TypeDescriptor], subject: str, imports: set[tuple[str, str]]) -> list[ast.stmt]:
        self.names.reset()
        body: list[ast.stmt] = [self._parse_stmt("result = 17")]
        for descriptor in properties:
            body.extend(self.hash_statements(model, descriptor, f"{subject}.{descriptor.python_name}", "result", imports))
        body.append(self._parse_stmt("return result"))
        return body

    def _value_get_hash_code(self, model: TypeModel, properties: list[TypeDescriptor], imports: set[tuple[str, str]]) -> ast.FunctionDef:
        return self._function(
            "value_get_hash_code",
            [self._arg("self")],
            self._hash_body(model, properties, "self", imports),
            returns="int",
        )

    def _dunder_equality(self, model: TypeModel) -> list[ast.FunctionDef]:
        eq = self._function(
            "__eq__",
            [self._arg("self"), self._arg("other", "object")],
            [
                self._if(f"not isinstance(other, {model.type_name})", [self._parse_stmt("return NotImplemented")]),
                self._parse_stmt("return self.value_equals(other)"),
            ],
            returns="bool",
        )
        hash_ = self._function(
            "__hash__",
            [self._arg("self")],
            [self._parse_stmt("return self.value_get_hash_code()")],
            returns="int",
        )
        return [eq, hash_]

    # Equality comparer

    def _comparer(self, model: TypeModel, properties: list[TypeDescriptor], imports: set[tuple[str, str]]) -> GeneratedArtifact:
        name = f"{model.type_name}EqualityComparer"
        optional = f"{model.type_name} | None"

        equals_body = [
            self._if("left is right", [self._parse_stmt("return True")]),
            self._if("left is None or right is None", [self._parse_stmt("return False")]),
            *self._equality_body(model, properties, "left", "right"),
        ]
        equals = self._function(
            "equals",
            [self._arg("left", optional), self._arg("right", optional)],
            equals_body,
            returns="bool",
            decorators=["staticmethod"],
        )

        hash_body = [
            self._if("obj is None", [self._parse_stmt("return 0")]),
            *self._hash_body(model, properties, "obj", imports),
        ]
        get_hash_code = self._function(
            "get_hash_code",
            [self._arg("obj", optional)],
            hash_body,
            returns="int",
            decorators=["staticmethod"],
        )

        node = self._class(
            name,
            [equals, get_hash_code],
            docstring=f"Defines methods to support the comparison of objects of type {model.type_name} for equality.",
        )
        return GeneratedArtifact(name=name, kind=ArtifactKind.EQUALITY_COMPARER, node=node)

    def _delegating_equality(self, model: TypeModel, comparer_name: str) -> list[ast.FunctionDef]:
        value_equals = self._function(
            "value_equals",
            [self._arg("self"), self._arg("other", f"{model.type_name} | None")],
            [self._parse_stmt(f"return {comparer_name}.equals(self, other)")],
            returns="bool",
        )
        value_get_hash_code = self._function(
            "value_get_hash_code",
            [self._arg("self")],
            [self._parse_stmt(f"return {comparer_name}.get_hash_code(self)")],
            returns="int",
        )
        return [value_equals, value_get_hash_code]
