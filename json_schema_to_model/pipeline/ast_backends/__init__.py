"""
AST synthesizers.

Each synthesizer turns an IR model into `ast.ClassDef` nodes wrapped in
`GeneratedArtifact`s.
"""

from .base import ArtifactKind, GeneratedArtifact, Synthesizer, node_kind_attribute
from .enum_synthesizer import EnumSynthesizer
from .interface_synthesizer import InterfaceSynthesizer
from .record_synthesizer import RecordSynthesizer
from .visitor_synthesizer import (
    VisitorSynthesizer,
    node_interface_name,
    node_kind_enum_name,
    rewriting_visitor_name,
)

__all__ = [
    "ArtifactKind",
    "GeneratedArtifact",
    "Synthesizer",
    "EnumSynthesizer",
    "InterfaceSynthesizer",
    "RecordSynthesizer",
    "VisitorSynthesizer",
    "node_interface_name",
    "node_kind_attribute",
    "node_kind_enum_name",
    "rewriting_visitor_name",
]
