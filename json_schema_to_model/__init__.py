"""JSON Schema to Object Model Generator

Generates Python object models from JSON Schema definitions: record
classes with deep cloning, value equality and hash codes, enums,
structural interfaces and a rewriting visitor.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .pipeline import (
    DataModelGenerator,
    DataModelGeneratorConfig,
    FormatterConfig,
    GenerationError,
    ModuleEmitter,
    OutputConfig,
    OutputMode,
    generate_model,
)

__all__ = [
    "DataModelGenerator",
    "DataModelGeneratorConfig",
    "FormatterConfig",
    "GenerationError",
    "ModuleEmitter",
    "OutputConfig",
    "OutputMode",
    "generate_model",
]
