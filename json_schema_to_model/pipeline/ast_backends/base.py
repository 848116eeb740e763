"""
Base class for the AST synthesizers.

Synthesizers turn IR models into `ast.ClassDef` nodes. Each result is a
`GeneratedArtifact` that also records the imports its code needs.
"""

from __future__ import annotations

import ast
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ...utils import pascal_to_snake_case
from ..analyzer.ir_nodes import ScalarKind, SignatureKind, TypeSignature, required_import
from ..analyzer.type_model_builder import HINTED_SCALARS
from ..config import DataModelGeneratorConfig

RUNTIME_MODULE = "json_schema_to_model.runtime"

# 32-bit mask applied after every hash combination step
HASH_MASK = "0xFFFFFFFF"


def node_kind_attribute(node_kind_enum: str) -> str:
    """Name of the record property returning the node kind (e.g. "s_node_kind")."""
    return pascal_to_snake_case(node_kind_enum)


class ArtifactKind(Enum):
    """Kind of generated artifact, in module emission order."""

    ENUM = 1
    NODE_KIND = 2
    INTERFACE = 3
    NODE_INTERFACE = 4
    RECORD = 5
    EQUALITY_COMPARER = 6
    REWRITING_VISITOR = 7


@dataclass
class GeneratedArtifact:
    """One generated class, ready to be emitted."""

    name: str
    kind: ArtifactKind
    node: ast.ClassDef

    # (module, name) pairs the class needs
    imports: set[tuple[str, str]] = field(default_factory=set)

    # Names of other artifacts that must be emitted before this one (base classes)
    depends_on: tuple[str, ...] = ()


class LocalVariableNameGenerator:
    """Hands out numbered local variable names within one generated method.

    All names created for the same nesting layer share a number
    ("value_0", "destination_0"), so nested loops never reuse a name.
    """

    def __init__(self):
        self._next = 0

    def reset(self) -> None:
        self._next = 0

    def next_suffix(self) -> int:
        suffix = self._next
        self._next += 1
        return suffix


class Synthesizer:
    """Common helpers for building Python AST nodes."""

    # Annotation names of scalar kinds
    SCALAR_ANNOTATIONS = {kind: kind.value for kind in ScalarKind}

    def __init__(self, config: DataModelGeneratorConfig | None = None):
        """
        Initialize the synthesizer.

        Args:
            config: Code generation configuration
        """
        self.config = config or DataModelGeneratorConfig()
        self.names = LocalVariableNameGenerator()

    # Parsing helpers

    def _parse_expr(self, expr_str: str) -> ast.expr:
        """Parse an expression string into an AST expression."""
        return ast.parse(expr_str, mode="eval").body

    def _parse_stmt(self, stmt_str: str) -> ast.stmt:
        """Parse a single statement."""
        return ast.parse(stmt_str).body[0]

    def _if(self, test: str, body: list[ast.stmt], orelse: list[ast.stmt] | None = None) -> ast.If:
        return ast.If(test=self._parse_expr(test), body=body, orelse=orelse or [])

    def _for(self, target: str, iterable: str, body: list[ast.stmt]) -> ast.For:
        return ast.For(
            target=self._parse_expr(target),
            iter=self._parse_expr(iterable),
            body=body,
            orelse=[],
        )

    def _while(self, test: str, body: list[ast.stmt]) -> ast.While:
        return ast.While(test=self._parse_expr(test), body=body, orelse=[])

    def _docstring(self, text: str) -> ast.Expr:
        return ast.Expr(value=ast.Constant(value=text))

    def _arg(self, name: str, annotation: str | None = None) -> ast.arg:
        return ast.arg(arg=name, annotation=self._parse_expr(annotation) if annotation else None)

    def _function(
        self,
        name: str,
        args: Iterable[ast.arg],
        body: list[ast.stmt],
        returns: str | None = None,
        decorators: Iterable[str] = (),
        defaults: Iterable[ast.expr] = (),
    ) -> ast.FunctionDef:
        """Build a function definition."""
        return ast.FunctionDef(
            name=name,
            args=ast.arguments(
                posonlyargs=[],
                args=list(args),
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=list(defaults),
            ),
            body=body or [ast.Pass()],
            decorator_list=[self._parse_expr(d) for d in decorators],
            returns=self._parse_expr(returns) if returns else None,
            type_params=[],
        )

    def _class(
        self,
        name: str,
        body: list[ast.stmt],
        bases: Iterable[str] = (),
        decorators: Iterable[str] = (),
        docstring: str | None = None,
    ) -> ast.ClassDef:
        """Build a class definition."""
        class_body: list[ast.stmt] = []
        if docstring:
            class_body.append(self._docstring(docstring))
        class_body.extend(body)
        if not class_body:
            class_body.append(ast.Pass())
        return ast.ClassDef(
            name=name,
            bases=[self._parse_expr(b) for b in bases],
            keywords=[],
            body=class_body,
            decorator_list=[self._parse_expr(d) for d in decorators],
            type_params=[],
        )

    # Type translation

    def translate_type(self, signature: TypeSignature) -> str:
        """
        Translate a signature to a Python annotation string.

        Args:
            signature: The type signature

        Returns:
            Annotation such as "list[dict[str, D]]"
        """
        match signature.kind:
            case SignatureKind.SCALAR:
                return self.SCALAR_ANNOTATIONS[signature.scalar_kind]
            case SignatureKind.RECORD | SignatureKind.ENUM:
                return signature.name
            case SignatureKind.LIST:
                return f"list[{self.translate_type(signature.element)}]"
            case SignatureKind.MAP:
                return f"dict[{self.translate_key_type(signature.key_type_name)}, {self.translate_type(signature.element)}]"
        return signature.name or "Any"

    def translate_key_type(self, key_type_name: str) -> str:
        scalar_kind = HINTED_SCALARS.get(key_type_name.lower())
        if scalar_kind is not None:
            return self.SCALAR_ANNOTATIONS[scalar_kind]
        return key_type_name

    def signature_imports(self, signature: TypeSignature) -> set[tuple[str, str]]:
        """Imports needed to spell a signature's annotation."""
        imports: set[tuple[str, str]] = set()
        match signature.kind:
            case SignatureKind.SCALAR:
                scalar_import = required_import(signature)
                if scalar_import is not None:
                    imports.add(scalar_import)
            case SignatureKind.LIST:
                imports |= self.signature_imports(signature.element)
            case SignatureKind.MAP:
                imports |= self.signature_imports(signature.element)
                key_annotation = self.translate_key_type(signature.key_type_name)
                imports |= self.signature_imports(_scalar_for_annotation(key_annotation))
            case SignatureKind.UNTYPED_OBJECT:
                if signature.name is None:
                    imports.add(("typing", "Any"))
        return imports


def _scalar_for_annotation(annotation: str) -> TypeSignature:
    for kind in ScalarKind:
        if kind.value == annotation:
            return TypeSignature.scalar(kind)
    return TypeSignature.untyped(annotation)
