"""
Configuration for the object model generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse the generated module before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for the black post-processing pass."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    magic_trailing_comma: bool = True


@dataclass
class DataModelGeneratorConfig:
    """Configuration options for object model generation."""

    # Name of the record generated for the root schema
    root_class_name: str = "Root"

    # Prefix of the visitor types ("{schema_name}NodeKind", ...); defaults to root_class_name
    schema_name: str = ""

    # Appended to every generated type name
    type_name_suffix: str = ""

    # Text placed as comments at the top of the generated module
    copyright_notice: str = ""

    # Emit "<Record>EqualityComparer" classes holding equality and hash code
    generate_equality_comparers: bool = False

    # Emit the node kind enum, node protocol and rewriting visitor
    generate_rewriting_visitor: bool = True

    # Decorate records with typing.final
    seal_classes: bool = False

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def effective_schema_name(self) -> str:
        return self.schema_name or self.root_class_name

    @staticmethod
    def from_dict(d: dict) -> DataModelGeneratorConfig:
        """Create a config from a dictionary."""
        config = DataModelGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k) and k != "effective_schema_name":
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "root_class_name": self.root_class_name,
            "schema_name": self.schema_name,
            "type_name_suffix": self.type_name_suffix,
            "copyright_notice": self.copyright_notice,
            "generate_equality_comparers": self.generate_equality_comparers,
            "generate_rewriting_visitor": self.generate_rewriting_visitor,
            "seal_classes": self.seal_classes,
            "add_generation_comment": self.add_generation_comment,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
