"""Compiler module for workflow-core.

This module exports the Compiler class and the pipeline stages it runs:
- Compiler: Main compiler class (compile, validate, build)
- discover_manifests: Find manifest files under a directory
- parse_manifest: Manifest text -> RawWorkflow
- normalize_workflow / slugify_filename: RawWorkflow -> Workflow
- build_collection: Workflows -> WorkflowCollection
- to_search_entry / build_search_index: Workflow -> SearchIndexEntry
- CompilationResult: Output of Compiler.build()
"""

from __future__ import annotations

from workflow_core.compiler.collection_builder import (
    build_collection,
    collect_tags,
    find_duplicate_slugs,
)
from workflow_core.compiler.compiler import Compiler
from workflow_core.compiler.discovery import discover_manifests, is_manifest
from workflow_core.compiler.indexer import (
    build_search_index,
    searchable_text,
    to_search_entry,
)
from workflow_core.compiler.models import CompilationResult
from workflow_core.compiler.normalizer import normalize_workflow, slugify_filename
from workflow_core.compiler.parser import parse_manifest

__all__: list[str] = [
    # Compiler class
    "Compiler",
    "CompilationResult",
    # Discovery
    "discover_manifests",
    "is_manifest",
    # Parsing and normalization
    "parse_manifest",
    "normalize_workflow",
    "slugify_filename",
    # Collection
    "build_collection",
    "collect_tags",
    "find_duplicate_slugs",
    # Search index
    "build_search_index",
    "searchable_text",
    "to_search_entry",
]
