import json
import logging
from pathlib import Path

import click

from . import __version__
from .cli_utils import generation_comment
from .pipeline import DataModelGeneratorConfig, GenerationError, ModuleEmitter, OutputMode, read_schema
from .pipeline.generator import DataModelGenerator
from .pipeline.hints import load_hints


@click.command()
@click.option("--hints", "hints_path", default=None, type=click.Path(exists=True, resolve_path=True), help="Hint document (JSON)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True), help="Generator configuration (JSON)")
@click.option("--root-class-name", "-r", default=None, type=str, help="Name of the root record")
@click.option("--schema-name", "-s", default=None, type=str, help="Prefix of the visitor type names")
@click.option("--suffix", default=None, type=str, help="Suffix appended to every generated type name")
@click.option("--copyright", "copyright_path", default=None, type=click.Path(exists=True, resolve_path=True), help="File holding the copyright notice")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite the output file if it exists")
@click.option("--generate-equality-comparers", is_flag=True, default=False, help="Emit separate equality comparer classes")
@click.option("--no-visitor", is_flag=True, default=False, help="Do not emit the rewriting visitor")
@click.option("--seal-classes", is_flag=True, default=False, help="Decorate records with typing.final")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug information")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def json_schema_to_model(
    hints_path,
    config,
    root_class_name,
    schema_name,
    suffix,
    copyright_path,
    force,
    generate_equality_comparers,
    no_visitor,
    seal_classes,
    verbose,
    path,
    output,
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    with open(path) as f:
        schema_document = json.load(f)

    if config is not None:
        with open(config) as f:
            config = DataModelGeneratorConfig.from_dict(json.load(f))
    else:
        config = DataModelGeneratorConfig()

    # CLI flags override the config file
    if root_class_name is not None:
        config.root_class_name = root_class_name
    if schema_name is not None:
        config.schema_name = schema_name
    if suffix is not None:
        config.type_name_suffix = suffix
    if copyright_path is not None:
        config.copyright_notice = Path(copyright_path).read_text(encoding="utf-8").rstrip("\n")
    if force:
        config.output.mode = OutputMode.FORCE
    if generate_equality_comparers:
        config.generate_equality_comparers = True
    if no_visitor:
        config.generate_rewriting_visitor = False
    if seal_classes:
        config.seal_classes = True

    try:
        schema = read_schema(schema_document)
        hints = load_hints(hints_path) if hints_path is not None else None
        result = DataModelGenerator(schema, hints, config).generate()

        emitter = ModuleEmitter(config, generation_comment(json_schema_to_model, __version__))
        emitter.write(emitter.render(result.artifacts.values()), output)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e
