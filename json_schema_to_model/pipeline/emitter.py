"""
Module emitter.

Renders generated artifacts into one Python module: the header comes from
the `prefix.py.jinja2` template, the classes from `ast.unparse`.
"""

from __future__ import annotations

import ast
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

import jinja2

from .ast_backends.base import ArtifactKind, GeneratedArtifact
from .atomic_writer import AtomicWriter, validate_python
from .config import DataModelGeneratorConfig, OutputMode
from .errors import OutputExistsError
from .formatters import BlackFormatter

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "python"


def order_artifacts(artifacts: Iterable[GeneratedArtifact]) -> list[GeneratedArtifact]:
    """
    Order artifacts for emission.

    Artifacts are grouped by kind (enums first, visitor last), keeping
    generation order within a kind, except that a record always follows
    the generated records it derives from.
    """
    artifacts = list(artifacts)
    by_name = {artifact.name: artifact for artifact in artifacts}
    ordered: list[GeneratedArtifact] = []
    placed: set[str] = set()

    def place(artifact: GeneratedArtifact, path: tuple[str, ...]) -> None:
        if artifact.name in placed or artifact.name in path:
            return
        for dependency in artifact.depends_on:
            base = by_name.get(dependency)
            if base is not None and base.kind == artifact.kind:
                place(base, path + (artifact.name,))
        placed.add(artifact.name)
        ordered.append(artifact)

    for kind in ArtifactKind:
        for artifact in artifacts:
            if artifact.kind == kind:
                place(artifact, ())
    return ordered


def assemble_imports(imports: Iterable[tuple[str, str]]) -> list[str]:
    """
    Build import lines: `__future__` first, then the standard library, then
    everything else, each group sorted and separated by a blank line.
    """
    import_groups: dict[str, set[str]] = {}
    for module, name in imports:
        import_groups.setdefault(module, set()).add(name)

    future = {m: names for m, names in import_groups.items() if m == "__future__"}
    stdlib = {m: names for m, names in import_groups.items() if m != "__future__" and m.split(".")[0] in sys.stdlib_module_names}
    third_party = {m: names for m, names in import_groups.items() if m not in future and m not in stdlib}

    lines: list[str] = []
    for group in (future, stdlib, third_party):
        if not group:
            continue
        if lines:
            lines.append("")
        for module in sorted(group):
            lines.append(ast.unparse(ast.ImportFrom(module=module, names=[ast.alias(name=n) for n in sorted(group[module])], level=0)))
    return lines


class ModuleEmitter:
    """Renders and writes the generated module.

    Args:
        config: Generation configuration
        generation_comment: First line of the module, e.g. the command that produced it
    """

    def __init__(self, config: DataModelGeneratorConfig | None = None, generation_comment: str = ""):
        self.config = config or DataModelGeneratorConfig()
        self.generation_comment = generation_comment
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.prefix_template = self.jinja_env.get_template("prefix.py.jinja2")
        self.formatter = BlackFormatter()
        self.writer = AtomicWriter()

    def render(self, artifacts: Iterable[GeneratedArtifact]) -> str:
        """
        Render artifacts into module source.

        Args:
            artifacts: Generated artifacts, in any order

        Returns:
            The module source
        """
        ordered = order_artifacts(artifacts)

        imports = {("__future__", "annotations")}
        for artifact in ordered:
            imports |= artifact.imports

        copyright_lines = self.config.copyright_notice.splitlines() if self.config.copyright_notice else []
        out = self.prefix_template.render(
            generation_comment=self.generation_comment if self.config.add_generation_comment else "",
            copyright_lines=copyright_lines,
            required_imports=assemble_imports(imports),
        )
        classes = "\n\n\n".join(ast.unparse(ast.fix_missing_locations(artifact.node)) for artifact in ordered)
        out += "\n\n" + classes + "\n"

        if self.config.formatter.enabled:
            out = self.formatter.format(out, self.config.formatter)
        return out

    def write(self, code: str, path: str | Path) -> None:
        """
        Write module source according to the output configuration.

        Raises:
            OutputExistsError: If the file exists and the mode is ERROR_IF_EXISTS
            GenerationError: If the code does not parse
        """
        path = Path(path)
        output = self.config.output
        if output.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
            raise OutputExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        if output.atomic_write:
            self.writer.write(path, code, output.validate_before_write)
            return

        if output.validate_before_write:
            validate_python(code)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
        logger.info("Wrote %s", path)
