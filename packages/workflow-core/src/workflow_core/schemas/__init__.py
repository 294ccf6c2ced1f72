"""Schema definitions for workflow-core.

This module exports the core Pydantic models:

Compiled Models:
- WorkflowArgument: One named parameter of a workflow
- Workflow: Canonical workflow record
- SearchIndexEntry: Search projection of a workflow
- WorkflowCollection: Output contract of a compilation run

Parser Models:
- RawArgument / RawWorkflow: Manifest content before normalization

Reporting:
- ManifestIssue: One (path, reason) problem report

Structural Declarations:
- EntitySchema, FieldDescriptor, TypeDescriptor: Hand-maintained type
  descriptions used to render type declarations and JSON Schema
"""

from __future__ import annotations

from workflow_core.schemas.collection import WorkflowCollection
from workflow_core.schemas.descriptors import (
    EntitySchema,
    FieldDescriptor,
    TypeDescriptor,
    TypeKind,
    entity_schemas,
)
from workflow_core.schemas.issues import ManifestIssue
from workflow_core.schemas.search_index import SearchIndexEntry
from workflow_core.schemas.workflow import (
    SLUG_PATTERN,
    RawArgument,
    RawWorkflow,
    Workflow,
    WorkflowArgument,
)

__all__: list[str] = [
    # Compiled models
    "WorkflowArgument",
    "Workflow",
    "SearchIndexEntry",
    "WorkflowCollection",
    "SLUG_PATTERN",
    # Parser models
    "RawArgument",
    "RawWorkflow",
    # Reporting
    "ManifestIssue",
    # Structural declarations
    "EntitySchema",
    "FieldDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "entity_schemas",
]
