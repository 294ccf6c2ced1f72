"""Integration tests: emitted JSON Schema and types against real output."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from workflow_core import CompilationResult, Compiler, CompilerConfig

pytestmark = pytest.mark.integration


@pytest.fixture
def result(sample_specs: Path, tmp_path: Path) -> CompilationResult:
    """Build the sample tree with the JSON Schema artifact enabled."""
    config = CompilerConfig(json_schema_artifact_name="collection.schema.json")
    return Compiler(config).build(sample_specs, output_dir=tmp_path)


def _load_schema(result: CompilationResult) -> dict[str, Any]:
    assert result.artifacts.json_schema_path is not None
    schema: dict[str, Any] = json.loads(
        result.artifacts.json_schema_path.read_text(encoding="utf-8")
    )
    return schema


class TestSchemaMatchesOutput:
    """The exported schema describes what the compiler really produces."""

    def test_schema_is_valid_draft_2020_12(self, result: CompilationResult) -> None:
        jsonschema.Draft202012Validator.check_schema(_load_schema(result))

    def test_collection_validates_against_schema(self, result: CompilationResult) -> None:
        schema = _load_schema(result)

        jsonschema.Draft202012Validator(schema).validate(
            result.collection.model_dump(mode="json")
        )

    def test_search_index_validates_against_entry_schema(
        self, result: CompilationResult
    ) -> None:
        schema = _load_schema(result)
        entries = json.loads(result.artifacts.search_index_path.read_text(encoding="utf-8"))

        entries_schema = {
            "$schema": schema["$schema"],
            "$defs": schema["$defs"],
            "type": "array",
            "items": {"$ref": "#/$defs/SearchIndexEntry"},
        }
        jsonschema.Draft202012Validator(entries_schema).validate(entries)

    def test_unknown_keys_are_rejected(self, result: CompilationResult) -> None:
        schema = _load_schema(result)
        instance = result.collection.model_dump(mode="json")
        instance["workflows"][0]["extra"] = "not declared"

        with pytest.raises(jsonschema.ValidationError) as exc_info:
            jsonschema.Draft202012Validator(schema).validate(instance)

        assert exc_info.value.validator == "additionalProperties"

    def test_missing_required_field_is_rejected(self, result: CompilationResult) -> None:
        schema = _load_schema(result)
        instance = result.collection.model_dump(mode="json")
        del instance["search_index"][0]["searchable_text"]

        with pytest.raises(jsonschema.ValidationError) as exc_info:
            jsonschema.Draft202012Validator(schema).validate(instance)

        assert exc_info.value.validator == "required"


class TestTypesMatchOutput:
    """Every key in the data module is declared in the type module."""

    def test_workflow_keys_are_declared(self, result: CompilationResult) -> None:
        types = result.artifacts.types_path.read_text(encoding="utf-8")

        declared = set(re.findall(r"^  (\w+): ", types, flags=re.MULTILINE))
        for workflow in result.collection.workflows:
            assert set(workflow.model_dump()) <= declared
        for entry in result.collection.search_index:
            assert set(entry.model_dump()) <= declared
