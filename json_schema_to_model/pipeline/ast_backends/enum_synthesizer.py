"""
Enum synthesizer.

Builds `IntEnum` (or `IntFlag` for flag enums) classes from enum models.
"""

from __future__ import annotations

import ast

from ..analyzer.ir_nodes import EnumModel
from .base import ArtifactKind, GeneratedArtifact, Synthesizer


class EnumSynthesizer(Synthesizer):
    """Synthesizes enum classes."""

    def synthesize(self, model: EnumModel, kind: ArtifactKind = ArtifactKind.ENUM) -> GeneratedArtifact:
        """
        Build an enum class.

        Args:
            model: The enum model
            kind: Artifact kind (ENUM, or NODE_KIND for the visitor's kind enum)

        Returns:
            The enum artifact
        """
        base = "IntFlag" if model.flags else "IntEnum"
        body: list[ast.stmt] = [
            ast.Assign(
                targets=[ast.Name(id=member.python_name, ctx=ast.Store())],
                value=ast.Constant(value=member.value),
            )
            for member in model.members
        ]
        node = self._class(model.type_name, body, bases=[base], docstring=model.description)
        return GeneratedArtifact(
            name=model.type_name,
            kind=kind,
            node=node,
            imports={("enum", base)},
        )
