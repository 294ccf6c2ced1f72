"""Schema export functions for workflow-core.

This module renders the hand-maintained entity descriptors into:
- TypeScript type declarations for statically typed consumers
- JSON Schema Draft 2020-12 for cross-language validation

Both renderings are deterministic: entity order, field order and JSON key
order come from the descriptors, never from hashing.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from workflow_core.schemas.descriptors import EntitySchema, entity_schemas

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"
COLLECTION_SCHEMA_ID = "https://workflow-core.dev/schemas/workflow-collection.schema.json"
ROOT_ENTITY = "WorkflowCollection"

GENERATED_HEADER = "// Auto-generated by workflow-core. Do not edit.\n"


def render_type_declaration(entity: EntitySchema) -> str:
    """Render one entity as a TypeScript interface.

    Example:
        >>> print(render_type_declaration(workflow_argument_schema()))
        /** A named parameter accepted by a workflow. */
        export interface WorkflowArgument {
          name: string;
          description: string | null;
          default_value: string | null;
          required: boolean | null;
        }
    """
    lines: list[str] = []
    if entity.description:
        lines.append(f"/** {entity.description} */")
    lines.append(f"export interface {entity.name} {{")
    for field in entity.fields:
        lines.append(f"  {field.name}: {field.type.to_typescript()};")
    lines.append("}")
    return "\n".join(lines)


def render_type_declarations(entities: tuple[EntitySchema, ...] | None = None) -> str:
    """Render the full type declaration module."""
    entities = entities if entities is not None else entity_schemas()
    body = "\n\n".join(render_type_declaration(e) for e in entities)
    return f"{GENERATED_HEADER}\n{body}\n"


def _object_schema(entity: EntitySchema) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object"}
    if entity.description:
        schema["description"] = entity.description
    properties: dict[str, Any] = {}
    for field in entity.fields:
        prop = field.type.to_json_schema()
        if field.description:
            prop = {**prop, "description": field.description}
        properties[field.name] = prop
    schema["properties"] = properties
    # Every field is always serialized; nullability lives in the type.
    schema["required"] = entity.field_names
    schema["additionalProperties"] = False
    return schema


def export_collection_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the WorkflowCollection JSON Schema.

    The root describes WorkflowCollection; every entity, the root included,
    is also available under ``$defs``.

    Args:
        output_path: Optional path to write the schema file. Parent
            directories are created as needed.

    Returns:
        Dictionary containing the JSON Schema.

    Example:
        >>> schema = export_collection_schema()
        >>> schema["$schema"]
        'https://json-schema.org/draft/2020-12/schema'
        >>> sorted(schema["$defs"])
        ['SearchIndexEntry', 'Workflow', 'WorkflowArgument', 'WorkflowCollection']
    """
    entities = entity_schemas()
    definitions = {e.name: _object_schema(e) for e in entities}

    schema: dict[str, Any] = {
        "$schema": JSON_SCHEMA_DRAFT,
        "$id": COLLECTION_SCHEMA_ID,
        "title": ROOT_ENTITY,
        **definitions[ROOT_ENTITY],
        "$defs": definitions,
    }

    if output_path is not None:
        _write_schema_file(schema, output_path)

    return schema


def render_json(value: Any) -> str:
    """Serialize a JSON value the same way for every artifact."""
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


def _write_schema_file(schema: dict[str, Any], path: Path | str) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_json(schema), encoding="utf-8", newline="\n")
