"""Hand-maintained structural descriptions of the output entities.

The emitted type declarations and JSON Schema are rendered from these
descriptors rather than from model introspection, so the external contract
only changes when this file does. The contract tests check that every
descriptor still lists exactly the fields of its pydantic model, in order.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TypeKind(str, Enum):
    """Kinds of value a field can hold.

    Attributes:
        STRING: Text value
        BOOLEAN: true/false
        ARRAY: Ordered sequence of ``items``
        REFERENCE: Another described entity, by name
    """

    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    REFERENCE = "reference"


class TypeDescriptor(BaseModel):
    """Language-neutral type of one field.

    Attributes:
        kind: Value kind.
        nullable: Whether null is allowed.
        items: Element type for arrays.
        ref: Entity name for references.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: TypeKind
    nullable: bool = False
    items: TypeDescriptor | None = None
    ref: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> TypeDescriptor:
        """Arrays carry ``items``, references carry ``ref``, nothing else does."""
        if (self.kind is TypeKind.ARRAY) != (self.items is not None):
            raise ValueError("items is required for arrays and only allowed on arrays")
        if (self.kind is TypeKind.REFERENCE) != (self.ref is not None):
            raise ValueError("ref is required for references and only allowed on references")
        return self

    @classmethod
    def string(cls) -> TypeDescriptor:
        return cls(kind=TypeKind.STRING)

    @classmethod
    def boolean(cls) -> TypeDescriptor:
        return cls(kind=TypeKind.BOOLEAN)

    @classmethod
    def array_of(cls, items: TypeDescriptor) -> TypeDescriptor:
        return cls(kind=TypeKind.ARRAY, items=items)

    @classmethod
    def reference(cls, name: str) -> TypeDescriptor:
        return cls(kind=TypeKind.REFERENCE, ref=name)

    def optional(self) -> TypeDescriptor:
        """Return a nullable copy of this type."""
        return self.model_copy(update={"nullable": True})

    def to_typescript(self) -> str:
        """Render as a TypeScript type expression.

        Example:
            >>> TypeDescriptor.array_of(TypeDescriptor.string()).optional().to_typescript()
            'Array<string> | null'
        """
        if self.items is not None:
            rendered = f"Array<{self.items.to_typescript()}>"
        elif self.ref is not None:
            rendered = self.ref
        else:
            rendered = self.kind.value
        return f"{rendered} | null" if self.nullable else rendered

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema fragment, using ``#/$defs`` for references."""
        schema: dict[str, Any]
        if self.items is not None:
            schema = {"type": "array", "items": self.items.to_json_schema()}
        elif self.ref is not None:
            schema = {"$ref": f"#/$defs/{self.ref}"}
        else:
            schema = {"type": self.kind.value}

        if not self.nullable:
            return schema
        if "type" in schema and schema["type"] != "array":
            return {"type": [schema["type"], "null"]}
        return {"anyOf": [schema, {"type": "null"}]}


class FieldDescriptor(BaseModel):
    """One field of a described entity."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    type: TypeDescriptor
    description: str = ""


class EntitySchema(BaseModel):
    """Structural declaration of one output entity.

    Attributes:
        name: Entity (type) name.
        description: One-line description rendered as a doc comment.
        fields: Fields in serialization order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    description: str = ""
    fields: tuple[FieldDescriptor, ...]

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


_STR = TypeDescriptor.string()
_OPT_STR = _STR.optional()
_STR_LIST = TypeDescriptor.array_of(_STR)


def workflow_argument_schema() -> EntitySchema:
    return EntitySchema(
        name="WorkflowArgument",
        description="A named parameter accepted by a workflow.",
        fields=(
            FieldDescriptor(name="name", type=_STR, description="Argument name"),
            FieldDescriptor(name="description", type=_OPT_STR, description="Argument description"),
            FieldDescriptor(name="default_value", type=_OPT_STR, description="Default value"),
            FieldDescriptor(
                name="required",
                type=TypeDescriptor.boolean().optional(),
                description="Whether the argument must be supplied",
            ),
        ),
    )


def workflow_schema() -> EntitySchema:
    return EntitySchema(
        name="Workflow",
        description="A compiled workflow.",
        fields=(
            FieldDescriptor(name="name", type=_STR, description="Display name"),
            FieldDescriptor(name="command", type=_STR, description="Command template"),
            FieldDescriptor(name="description", type=_OPT_STR, description="Description"),
            FieldDescriptor(name="tags", type=_STR_LIST.optional(), description="Tags"),
            FieldDescriptor(
                name="arguments",
                type=TypeDescriptor.array_of(
                    TypeDescriptor.reference("WorkflowArgument")
                ).optional(),
                description="Accepted arguments",
            ),
            FieldDescriptor(name="source_url", type=_OPT_STR, description="Source link"),
            FieldDescriptor(name="author", type=_OPT_STR, description="Author"),
            FieldDescriptor(name="author_url", type=_OPT_STR, description="Author link"),
            FieldDescriptor(
                name="shells", type=_STR_LIST.optional(), description="Compatible shells"
            ),
            FieldDescriptor(name="slug", type=_STR, description="Unique identifier"),
        ),
    )


def search_index_entry_schema() -> EntitySchema:
    return EntitySchema(
        name="SearchIndexEntry",
        description="Search projection of a workflow.",
        fields=(
            FieldDescriptor(name="slug", type=_STR, description="Workflow slug"),
            FieldDescriptor(name="name", type=_STR, description="Display name"),
            FieldDescriptor(name="description", type=_STR, description="Description"),
            FieldDescriptor(name="tags", type=_STR_LIST, description="Tags"),
            FieldDescriptor(name="command", type=_STR, description="Command template"),
            FieldDescriptor(name="author", type=_OPT_STR, description="Author"),
            FieldDescriptor(
                name="searchable_text", type=_STR, description="Lower-cased search text"
            ),
        ),
    )


def workflow_collection_schema() -> EntitySchema:
    return EntitySchema(
        name="WorkflowCollection",
        description="Every compiled workflow with its search index and tags.",
        fields=(
            FieldDescriptor(
                name="workflows",
                type=TypeDescriptor.array_of(TypeDescriptor.reference("Workflow")),
                description="Compiled workflows",
            ),
            FieldDescriptor(
                name="search_index",
                type=TypeDescriptor.array_of(TypeDescriptor.reference("SearchIndexEntry")),
                description="Search index entries",
            ),
            FieldDescriptor(name="tags", type=_STR_LIST, description="Unique tags"),
        ),
    )


def entity_schemas() -> tuple[EntitySchema, ...]:
    """Return every entity declaration in dependency order."""
    return (
        workflow_argument_schema(),
        workflow_schema(),
        search_index_entry_schema(),
        workflow_collection_schema(),
    )
