"""
Object model generator.

Drives one generation run: declares every type name, builds the root
record and the definitions, drains the queue of types discovered along
the way until no request is left, and only then builds the rewriting
visitor, which needs the complete registry.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from ..utils import snake_to_pascal_case, to_python_identifier
from .analyzer.enum_model_builder import build_enum_model
from .analyzer.ir_nodes import AdditionalTypeRequest, RegistryEntry, RegistryKind, TypeModel, TypeRegistry
from .analyzer.name_resolver import DeclaredType, NameResolver
from .analyzer.type_model_builder import TypeModelBuilder
from .ast_backends import (
    EnumSynthesizer,
    GeneratedArtifact,
    InterfaceSynthesizer,
    RecordSynthesizer,
    VisitorSynthesizer,
    node_kind_attribute,
    node_kind_enum_name,
)
from .config import DataModelGeneratorConfig
from .errors import NameCollisionError, SchemaReadFailedError
from .hints.hint_nodes import EnumHint, HintKind, InterfaceHint
from .hints.hint_reader import HintDictionary, read_hints
from .hints.hint_resolver import HintResolver
from .schema_ast.nodes import JsonSchema
from .schema_ast.reader import SchemaReader

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Output of one generation run."""

    # Generated type name -> artifact, in generation order
    artifacts: dict[str, GeneratedArtifact] = field(default_factory=dict)

    registry: TypeRegistry = field(default_factory=TypeRegistry)


class DataModelGenerator:
    """Generates the object model of one schema.

    Args:
        schema: The root schema
        hints: Hints, as a resolver or as read from a hint document
        config: Generation configuration
    """

    def __init__(
        self,
        schema: JsonSchema,
        hints: HintResolver | HintDictionary | None = None,
        config: DataModelGeneratorConfig | None = None,
    ):
        self.schema = schema
        self.hints = hints if isinstance(hints, HintResolver) else HintResolver(hints)
        self.config = config or DataModelGeneratorConfig()
        node_kind_member = (node_kind_attribute(node_kind_enum_name(self.schema_name)),) if self.config.generate_rewriting_visitor else ()
        self.names = NameResolver(self.hints, self.config.type_name_suffix, node_kind_member)

    @property
    def schema_name(self) -> str:
        """Prefix of the visitor type names."""
        name = self.config.effective_schema_name
        if not name[:1].isupper():
            name = snake_to_pascal_case(name) or name
        return to_python_identifier(name)

    def generate(self) -> GenerationResult:
        """
        Generate every type of the object model.

        Returns:
            GenerationResult with all artifacts and the registry

        Raises:
            GenerationError: On any hint, schema or naming problem; nothing is returned partially
        """
        result = GenerationResult()
        mapping = self.names.declare(self.schema, self.config.root_class_name)
        builder = TypeModelBuilder(self.hints, mapping, self.names)

        node_kind_enum = node_kind_enum_name(self.schema_name) if self.config.generate_rewriting_visitor else None
        records = RecordSynthesizer(self.config, node_kind_enum)
        interfaces = InterfaceSynthesizer(self.config)
        enums = EnumSynthesizer(self.config)

        pending: deque[AdditionalTypeRequest] = deque()

        self._generate_record(mapping.root, builder, records, interfaces, result, pending)
        for declared in mapping.definitions.values():
            if declared.kind == RegistryKind.ENUM:
                self._generate_enum(
                    declared.type_name,
                    declared.schema,
                    declared.enum_hint,
                    declared.schema.source_path,
                    enums,
                    result,
                )
            else:
                self._generate_record(declared, builder, records, interfaces, result, pending)

        self._drain(pending, enums, result)

        if self.config.generate_rewriting_visitor:
            for artifact in VisitorSynthesizer(self.config).synthesize(result.registry, self.schema_name):
                self._add_artifact(result, artifact)

        logger.info("Generated %d types for %s", len(result.artifacts), self.schema_name)
        return result

    def _generate_record(
        self,
        declared: DeclaredType,
        builder: TypeModelBuilder,
        records: RecordSynthesizer,
        interfaces: InterfaceSynthesizer,
        result: GenerationResult,
        pending: deque[AdditionalTypeRequest],
    ) -> TypeModel:
        model = builder.build(declared)
        result.registry.register(
            RegistryEntry(
                name=model.type_name,
                kind=RegistryKind.RECORD,
                type_model=model,
                source=declared.schema.source_path,
            )
        )
        for artifact in records.synthesize(model):
            self._add_artifact(result, artifact)

        for interface_name in model.interface_names:
            hint: InterfaceHint | None = self.hints.type_hint(declared.schema_name, HintKind.INTERFACE)
            result.registry.register(
                RegistryEntry(
                    name=interface_name,
                    kind=RegistryKind.INTERFACE,
                    type_model=model,
                    source=declared.schema.source_path,
                )
            )
            description = hint.description if hint is not None else None
            self._add_artifact(result, interfaces.synthesize(model, interface_name, description))

        pending.extend(model.additional_requests)
        logger.debug("Generated record %s", model.type_name)
        return model

    def _generate_enum(
        self,
        type_name: str,
        schema: JsonSchema,
        hint: EnumHint | None,
        source: str,
        enums: EnumSynthesizer,
        result: GenerationResult,
    ) -> None:
        enum_model = build_enum_model(type_name, schema.enum, hint, source)
        if enum_model.description is None:
            enum_model.description = schema.description
        result.registry.register(
            RegistryEntry(
                name=type_name,
                kind=RegistryKind.ENUM,
                enum_model=enum_model,
                source=source,
            )
        )
        self._add_artifact(result, enums.synthesize(enum_model))
        logger.debug("Generated enum %s", type_name)

    def _drain(self, pending: deque[AdditionalTypeRequest], enums: EnumSynthesizer, result: GenerationResult) -> None:
        """Generate requested types until no request is left.

        Identical requests (same name, hint and literals) from different
        properties produce one type.
        """
        generated: dict[str, tuple] = {}
        drained = 0
        while pending:
            request = pending.popleft()
            type_name = self.names.type_name(request.hint.type_name)
            identity = (request.hint, tuple(request.schema.enum or ()))
            if generated.get(type_name) == identity:
                continue
            self._generate_enum(type_name, request.schema, request.hint, request.requested_by, enums, result)
            generated[type_name] = identity
            drained += 1
        if drained:
            logger.info("Generated %d additional types", drained)

    @staticmethod
    def _add_artifact(result: GenerationResult, artifact: GeneratedArtifact) -> None:
        if artifact.name in result.artifacts:
            raise NameCollisionError(
                f"Generated type name {artifact.name!r} is produced more than once",
                type_name=artifact.name,
            )
        result.artifacts[artifact.name] = artifact


def read_schema(document: Any) -> JsonSchema:
    """
    Read a schema document.

    Raises:
        SchemaReadFailedError: If the document has errors
    """
    read_result = SchemaReader().read(document)
    if not read_result.ok:
        raise SchemaReadFailedError(read_result.errors)
    return read_result.schema


def generate_model(
    schema_document: dict[str, Any],
    hints_document: dict[str, Any] | None = None,
    config: DataModelGeneratorConfig | None = None,
) -> GenerationResult:
    """
    Generate the object model of a schema document.

    Args:
        schema_document: The JSON schema, as decoded JSON
        hints_document: The hint document, as decoded JSON
        config: Generation configuration

    Returns:
        GenerationResult
    """
    schema = read_schema(schema_document)
    hints = read_hints(hints_document) if hints_document else None
    return DataModelGenerator(schema, hints, config).generate()
