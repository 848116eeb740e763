"""
Interface synthesizer.

Builds `typing.Protocol` classes. A record satisfies its interface
structurally; it never inherits from it.
"""

from __future__ import annotations

import ast

from ..analyzer.ir_nodes import TypeModel
from ..hints.hint_nodes import NON_PUBLIC_MODIFIERS
from .base import ArtifactKind, GeneratedArtifact, Synthesizer, node_kind_attribute


class InterfaceSynthesizer(Synthesizer):
    """Synthesizes runtime-checkable protocols."""

    DECORATORS = ["runtime_checkable"]
    IMPORTS = {("typing", "Protocol"), ("typing", "runtime_checkable")}

    def synthesize(self, model: TypeModel, interface_name: str, description: str | None = None) -> GeneratedArtifact:
        """
        Build the interface of a record: its public properties, read-only.

        Args:
            model: The record's type model
            interface_name: Name of the protocol
            description: Protocol docstring

        Returns:
            The interface artifact
        """
        imports = set(self.IMPORTS)
        body: list[ast.stmt] = []
        for descriptor in model.properties:
            if NON_PUBLIC_MODIFIERS.intersection(descriptor.modifiers):
                continue
            annotation = self.translate_type(descriptor.signature)
            if not descriptor.is_required:
                annotation = f"{annotation} | None"
            imports |= self.signature_imports(descriptor.signature)
            body.append(
                ast.AnnAssign(
                    target=ast.Name(id=descriptor.python_name, ctx=ast.Store()),
                    annotation=self._parse_expr(annotation),
                    value=None,
                    simple=1,
                )
            )

        node = self._class(
            interface_name,
            body,
            bases=["Protocol"],
            decorators=self.DECORATORS,
            docstring=description or model.description,
        )
        return GeneratedArtifact(name=interface_name, kind=ArtifactKind.INTERFACE, node=node, imports=imports)

    def synthesize_node_interface(self, interface_name: str, node_kind_enum: str, schema_name: str) -> GeneratedArtifact:
        """
        Build the protocol every record of the model satisfies.

        Args:
            interface_name: Name of the protocol (e.g. "ISNode")
            node_kind_enum: Name of the node kind enum
            schema_name: Name of the object model, for the docstring

        Returns:
            The node interface artifact
        """
        kind_property = self._function(
            node_kind_attribute(node_kind_enum),
            [self._arg("self")],
            [ast.Expr(value=ast.Constant(value=...))],
            returns=node_kind_enum,
            decorators=["property"],
        )
        deep_clone = self._function(
            "deep_clone",
            [self._arg("self")],
            [ast.Expr(value=ast.Constant(value=...))],
            returns=interface_name,
        )
        node = self._class(
            interface_name,
            [kind_property, deep_clone],
            bases=["Protocol"],
            decorators=self.DECORATORS,
            docstring=f"An object in the {schema_name} object model.",
        )
        return GeneratedArtifact(
            name=interface_name,
            kind=ArtifactKind.NODE_INTERFACE,
            node=node,
            imports=set(self.IMPORTS),
        )
