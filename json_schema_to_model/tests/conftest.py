import json
from pathlib import Path

import pytest

from json_schema_to_model.pipeline import DataModelGeneratorConfig, ModuleEmitter, generate_model

TEST_DATA = Path(__file__).parent / "test_data"


def load_test_data(name: str) -> dict:
    with open(TEST_DATA / name, encoding="utf-8") as f:
        return json.load(f)


def render_module(schema: dict, hints: dict | None = None, **config_options) -> str:
    """Generate the object model of `schema` and render it as module source."""
    config = DataModelGeneratorConfig(**config_options)
    result = generate_model(schema, hints, config)
    return ModuleEmitter(config).render(result.artifacts.values())


def load_module(code: str) -> dict:
    """Execute generated source and return its namespace."""
    namespace = {"__name__": "generated_model"}
    exec(compile(code, "<generated>", "exec"), namespace)
    return namespace


@pytest.fixture
def test_data():
    return load_test_data


@pytest.fixture
def generated():
    """Generate, render and execute an object model; returns (code, namespace)."""

    def _generated(schema: dict, hints: dict | None = None, **config_options):
        code = render_module(schema, hints, **config_options)
        return code, load_module(code)

    return _generated
