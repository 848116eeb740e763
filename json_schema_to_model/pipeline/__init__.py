"""
Pipeline - JSON Schema to object model generator.

Generation runs in phases:

1. Phase 1 (Reader): Read the JSON Schema into a schema tree
2. Phase 2 (Analyzer): Declare type names, then build a type model per record
3. Phase 3 (AST Backend): Synthesize records, enums, interfaces and the visitor as Python AST
4. Phase 4 (Emitter): Render the module header and `ast.unparse` the classes
5. Phase 5 (Formatter): Optional post-processing with black
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .config import DataModelGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .emitter import ModuleEmitter
from .errors import (
    GenerationError,
    HintConfigurationError,
    NameCollisionError,
    OutputExistsError,
    SchemaReadFailedError,
    SchemaShapeError,
)
from .generator import DataModelGenerator, GenerationResult, generate_model, read_schema

__all__ = [
    "AtomicWriter",
    "DataModelGenerator",
    "DataModelGeneratorConfig",
    "FormatterConfig",
    "GenerationError",
    "GenerationResult",
    "HintConfigurationError",
    "ModuleEmitter",
    "NameCollisionError",
    "OutputConfig",
    "OutputExistsError",
    "OutputMode",
    "SchemaReadFailedError",
    "SchemaShapeError",
    "generate_model",
    "read_schema",
]
