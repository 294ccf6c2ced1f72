"""workflow-core: Manifest compiler for workflow definitions.

This package provides:
- Compiler: Transform a directory of workflow manifests → WorkflowCollection
- Workflow / WorkflowCollection: Canonical, immutable output models
- ArtifactEmitter: Deterministic data, type and search index artifacts
- Schema export: TypeScript declarations and JSON Schema
"""

from __future__ import annotations

from pathlib import Path

__version__ = "0.1.0"

# Compiler
from workflow_core.compiler import (
    CompilationResult,
    Compiler,
    normalize_workflow,
    parse_manifest,
    slugify_filename,
    to_search_entry,
)
from workflow_core.config import CompilerConfig

# Artifacts
from workflow_core.emitter import ArtifactEmitter, EmittedArtifacts, RenderedArtifacts

# Error types
from workflow_core.errors import (
    ArtifactWriteError,
    CompilationError,
    CompilationTimeoutError,
    ConfigurationError,
    DiscoveryLimitError,
    DuplicateArgumentError,
    DuplicateSlugError,
    FieldTypeError,
    MalformedManifestError,
    ManifestIOError,
    ManifestParseErrors,
    ParseError,
    WorkflowError,
)

# Schema export functions
from workflow_core.export import export_collection_schema, render_type_declarations
from workflow_core.observability import configure_logging

# Schema models
from workflow_core.schemas import (
    ManifestIssue,
    SearchIndexEntry,
    Workflow,
    WorkflowArgument,
    WorkflowCollection,
)


def compile_directory(
    directory: Path | str,
    config: CompilerConfig | None = None,
) -> WorkflowCollection:
    """Compile every manifest under ``directory``. See Compiler.compile()."""
    return Compiler(config).compile(directory)


def validate_directory(
    directory: Path | str,
    config: CompilerConfig | None = None,
) -> list[tuple[Path, WorkflowError]]:
    """Report every manifest problem under ``directory``. See Compiler.validate()."""
    return Compiler(config).validate(directory)


__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompilerConfig",
    "CompilationResult",
    "compile_directory",
    "validate_directory",
    "parse_manifest",
    "normalize_workflow",
    "slugify_filename",
    "to_search_entry",
    # Artifacts
    "ArtifactEmitter",
    "EmittedArtifacts",
    "RenderedArtifacts",
    "export_collection_schema",
    "render_type_declarations",
    "configure_logging",
    # Errors
    "WorkflowError",
    "ConfigurationError",
    "ParseError",
    "MalformedManifestError",
    "FieldTypeError",
    "DuplicateArgumentError",
    "CompilationError",
    "ManifestParseErrors",
    "DuplicateSlugError",
    "DiscoveryLimitError",
    "CompilationTimeoutError",
    "ManifestIOError",
    "ArtifactWriteError",
    # Schema models
    "WorkflowArgument",
    "Workflow",
    "SearchIndexEntry",
    "WorkflowCollection",
    "ManifestIssue",
]
