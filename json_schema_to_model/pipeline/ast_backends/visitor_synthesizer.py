"""
Rewriting visitor synthesizer.

Builds the node kind enum, the node protocol and the rewriting visitor of
an object model. It needs the complete registry, so it runs only after
every other type has been generated.
"""

from __future__ import annotations

import ast

from ...utils import pascal_to_snake_case
from ..analyzer.ir_nodes import EnumMember, EnumModel, SignatureKind, TypeModel, TypeRegistry, TypeSignature
from ..errors import NameCollisionError
from .base import ArtifactKind, GeneratedArtifact, Synthesizer, node_kind_attribute
from .enum_synthesizer import EnumSynthesizer
from .interface_synthesizer import InterfaceSynthesizer

# Kind of a node that is not part of the object model
NO_NODE_KIND = "None_"

# Methods every rewriting visitor defines besides the per-record ones
VISITOR_METHOD_NAMES = frozenset({"visit", "visit_actual", "_visit_null_checked"})


def node_kind_enum_name(schema_name: str) -> str:
    return f"{schema_name}NodeKind"


def node_interface_name(schema_name: str) -> str:
    return f"I{schema_name}Node"


def rewriting_visitor_name(schema_name: str) -> str:
    return f"{schema_name}RewritingVisitor"


def visit_method_name(type_name: str) -> str:
    return f"visit_{pascal_to_snake_case(type_name)}"


class VisitorSynthesizer(Synthesizer):
    """Synthesizes the visitor artifacts of one object model."""

    def synthesize(self, registry: TypeRegistry, schema_name: str) -> list[GeneratedArtifact]:
        """
        Build the node kind enum, node protocol and rewriting visitor.

        Args:
            registry: Registry holding every generated type
            schema_name: Prefix of the visitor type names

        Returns:
            The three artifacts

        Raises:
            NameCollisionError: If a record name clashes with the reserved kind member
                or two records share a visit method
        """
        record_names = registry.record_names()
        if NO_NODE_KIND in record_names:
            raise NameCollisionError(
                f"Record name {NO_NODE_KIND!r} clashes with the node kind reserved for non-model nodes",
                type_name=NO_NODE_KIND,
            )
        self._check_visit_methods(record_names)

        kind_enum = node_kind_enum_name(schema_name)
        kind_model = EnumModel(
            type_name=kind_enum,
            members=[EnumMember(NO_NODE_KIND, 0)]
            + [EnumMember(name, index) for index, name in enumerate(record_names, start=1)],
            description=f"Identifies the type of a node in the {schema_name} object model.",
        )
        kind_artifact = EnumSynthesizer(self.config).synthesize(kind_model, kind=ArtifactKind.NODE_KIND)

        interface = node_interface_name(schema_name)
        interface_artifact = InterfaceSynthesizer(self.config).synthesize_node_interface(interface, kind_enum, schema_name)

        models = [registry.get(name).type_model for name in record_names]
        visitor_artifact = self._visitor(schema_name, kind_enum, interface, models)
        return [kind_artifact, interface_artifact, visitor_artifact]

    @staticmethod
    def _check_visit_methods(record_names: list[str]) -> None:
        owners: dict[str, str] = {}
        for type_name in record_names:
            method = visit_method_name(type_name)
            if method in VISITOR_METHOD_NAMES:
                raise NameCollisionError(
                    f"Record name {type_name!r} produces visit method {method!r}, which the rewriting visitor already defines",
                    type_name=type_name,
                )
            if method in owners:
                raise NameCollisionError(
                    f"Records {owners[method]!r} and {type_name!r} both produce visit method {method!r}",
                    type_name=type_name,
                )
            owners[method] = type_name

    def _visitor(self, schema_name: str, kind_enum: str, interface: str, models: list[TypeModel]) -> GeneratedArtifact:
        name = rewriting_visitor_name(schema_name)
        body: list[ast.stmt] = [
            self._visit(interface),
            self._visit_actual(kind_enum, interface, models),
            self._visit_null_checked(interface),
        ]
        body.extend(self._visit_record(model) for model in models)
        node = self._class(
            name,
            body,
            docstring=(
                f"Rewriting visitor for the {schema_name} object model.\n\n"
                "Subclasses override the visit methods of the node types they rewrite; "
                "every child is replaced in place by the value its visit returns."
            ),
        )
        return GeneratedArtifact(name=name, kind=ArtifactKind.REWRITING_VISITOR, node=node)

    def _visit(self, interface: str) -> ast.FunctionDef:
        return self._function(
            "visit",
            [self._arg("self"), self._arg("node", interface)],
            [self._parse_stmt("return self.visit_actual(node)")],
            returns="object",
        )

    def _visit_actual(self, kind_enum: str, interface: str, models: list[TypeModel]) -> ast.FunctionDef:
        """Dispatcher: one match case per record kind, identity by default."""
        cases = [
            ast.match_case(
                pattern=ast.MatchValue(value=self._parse_expr(f"{kind_enum}.{model.type_name}")),
                guard=None,
                body=[self._parse_stmt(f"return self.{visit_method_name(model.type_name)}(node)")],
            )
            for model in models
        ]
        cases.append(
            ast.match_case(
                pattern=ast.MatchAs(pattern=None, name=None),
                guard=None,
                body=[self._parse_stmt("return node")],
            )
        )
        body = [
            self._if("node is None", [self._parse_stmt("raise ValueError('node must not be None')")]),
            ast.Match(subject=self._parse_expr(f"node.{node_kind_attribute(kind_enum)}"), cases=cases),
        ]
        return self._function(
            "visit_actual",
            [self._arg("self"), self._arg("node", interface)],
            body,
            returns="object",
        )

    def _visit_null_checked(self, interface: str) -> ast.FunctionDef:
        return self._function(
            "_visit_null_checked",
            [self._arg("self"), self._arg("node", f"{interface} | None")],
            [
                self._if("node is None", [self._parse_stmt("return None")]),
                self._parse_stmt("return self.visit(node)"),
            ],
            returns="object",
        )

    def _visit_record(self, model: TypeModel) -> ast.FunctionDef:
        """Visit method rewriting every record-valued property of one record."""
        self.names.reset()
        rewrites: list[ast.stmt] = []
        for descriptor in model.properties:
            if not descriptor.is_schema_defined_type:
                continue
            if descriptor.signature.innermost_through_lists().kind != SignatureKind.RECORD:
                continue
            rewrites.extend(self.rewrite_statements(descriptor.signature, f"node.{descriptor.python_name}"))

        body: list[ast.stmt] = []
        if rewrites:
            body.append(self._if("node is not None", rewrites))
        body.append(self._parse_stmt("return node"))
        return self._function(
            visit_method_name(model.type_name),
            [self._arg("self"), self._arg("node", model.type_name)],
            body,
            returns=model.type_name,
        )

    def rewrite_statements(self, signature: TypeSignature, target: str) -> list[ast.stmt]:
        """
        Statements replacing the record(s) held by `target` with their visited value.

        Args:
            signature: Signature of the value held by `target` (a record, or lists of records)
            target: Assignable expression

        Returns:
            Statements; list layers loop while the index is below the live length
        """
        if signature.kind != SignatureKind.LIST:
            return [self._parse_stmt(f"{target} = self._visit_null_checked({target})")]

        suffix = self.names.next_suffix()
        index = f"index_{suffix}"
        element = signature.element
        if element.kind == SignatureKind.LIST:
            value = f"value_{suffix}"
            inner = [self._parse_stmt(f"{value} = {target}[{index}]"), *self.rewrite_statements(element, value)]
        else:
            inner = self.rewrite_statements(element, f"{target}[{index}]")

        loop = [
            self._parse_stmt(f"{index} = 0"),
            self._while(f"{index} < len({target})", [*inner, self._parse_stmt(f"{index} += 1")]),
        ]
        return [self._if(f"{target} is not None", loop)]
