"""Artifact emitter for workflow-core.

Serializes a WorkflowCollection into the artifact set consumed downstream:
- Data module (workflows.ts): the collection as typed constants plus
  lookup and search helpers
- Type declarations (types.ts): interfaces for the four output entities
- Search index (search-index.json): the search index on its own
- JSON Schema (optional): structural schema of the collection

Every artifact is rendered in memory, then staged to a hidden temporary
file beside its target. Targets are replaced only once every file has been
staged, so a failure never leaves new and stale artifacts mixed.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath

import structlog
from pydantic import BaseModel, ConfigDict, Field

from workflow_core.config import CompilerConfig
from workflow_core.errors import ArtifactWriteError
from workflow_core.export import (
    GENERATED_HEADER,
    export_collection_schema,
    render_json,
    render_type_declarations,
)
from workflow_core.schemas import WorkflowCollection

logger = structlog.get_logger(__name__)

_ACCESSORS_TS = """\
export function getWorkflowBySlug(slug: string): Workflow | undefined {
  return WORKFLOWS.find((w) => w.slug === slug);
}

export function getWorkflowsByTag(tag: string): Workflow[] {
  return WORKFLOWS.filter((w) => w.tags?.includes(tag) ?? false);
}

export function searchWorkflows(query: string): Workflow[] {
  const lowerQuery = query.toLowerCase();
  const matches = new Set(
    SEARCH_INDEX.filter((entry) => entry.searchable_text.includes(lowerQuery)).map(
      (entry) => entry.slug,
    ),
  );
  return WORKFLOWS.filter((w) => matches.has(w.slug));
}
"""


class RenderedArtifacts(BaseModel):
    """Artifact contents, keyed by role.

    Attributes:
        data: Data module source.
        types: Type declaration source.
        search_index: Standalone search index JSON.
        json_schema: JSON Schema document, if configured.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: str
    types: str
    search_index: str
    json_schema: str | None = None


class EmittedArtifacts(BaseModel):
    """Paths of the artifacts written by one emission."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_path: Path = Field(..., description="Data module path")
    types_path: Path = Field(..., description="Type declaration path")
    search_index_path: Path = Field(..., description="Search index path")
    json_schema_path: Path | None = Field(default=None, description="JSON Schema path")

    @property
    def paths(self) -> list[Path]:
        paths = [self.data_path, self.types_path, self.search_index_path]
        if self.json_schema_path is not None:
            paths.append(self.json_schema_path)
        return paths


class ArtifactEmitter:
    """Render and write the artifact set for a WorkflowCollection.

    Example:
        >>> emitter = ArtifactEmitter(CompilerConfig(output_dir="web/generated"))
        >>> written = emitter.emit(collection)
        >>> written.data_path
        PosixPath('web/generated/workflows.ts')
    """

    def __init__(self, config: CompilerConfig | None = None) -> None:
        self.config = config or CompilerConfig()

    def render(self, collection: WorkflowCollection) -> RenderedArtifacts:
        """Render every artifact for ``collection`` without touching disk."""
        json_schema: str | None = None
        if self.config.json_schema_artifact_name is not None:
            json_schema = render_json(export_collection_schema())

        return RenderedArtifacts(
            data=self.render_data_module(collection),
            types=render_type_declarations(),
            search_index=render_json(
                [entry.model_dump(mode="json") for entry in collection.search_index]
            ),
            json_schema=json_schema,
        )

    def render_data_module(self, collection: WorkflowCollection) -> str:
        """Render the data module with constants and helper functions."""
        types_module = f"./{PurePath(self.config.types_artifact_name).stem}"
        workflows = [w.model_dump(mode="json") for w in collection.workflows]
        search_index = [e.model_dump(mode="json") for e in collection.search_index]

        sections = [
            GENERATED_HEADER
            + "import type { SearchIndexEntry, Workflow, WorkflowCollection } "
            + f'from "{types_module}";',
            f"export const WORKFLOWS: Workflow[] = {render_json(workflows).rstrip()};",
            f"export const SEARCH_INDEX: SearchIndexEntry[] = {render_json(search_index).rstrip()};",
            f"export const WORKFLOW_TAGS: string[] = {render_json(collection.tags).rstrip()};",
            "export const WORKFLOW_COLLECTION: WorkflowCollection = {\n"
            "  workflows: WORKFLOWS,\n"
            "  search_index: SEARCH_INDEX,\n"
            "  tags: WORKFLOW_TAGS,\n"
            "};",
            _ACCESSORS_TS.rstrip(),
        ]
        return "\n\n".join(sections) + "\n"

    def emit(
        self,
        collection: WorkflowCollection,
        output_dir: Path | str | None = None,
    ) -> EmittedArtifacts:
        """Render and write all artifacts.

        Args:
            collection: Compiled collection.
            output_dir: Target directory; defaults to ``config.output_dir``.

        Returns:
            Paths of the written artifacts.

        Raises:
            ArtifactWriteError: If the directory or a file cannot be written.
        """
        rendered = self.render(collection)
        target = Path(output_dir if output_dir is not None else self.config.output_dir)

        written = EmittedArtifacts(
            data_path=target / self.config.data_artifact_name,
            types_path=target / self.config.types_artifact_name,
            search_index_path=target / self.config.search_index_artifact_name,
            json_schema_path=(
                target / self.config.json_schema_artifact_name
                if self.config.json_schema_artifact_name is not None
                else None
            ),
        )
        contents = [rendered.data, rendered.types, rendered.search_index]
        if rendered.json_schema is not None:
            contents.append(rendered.json_schema)

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(
                "Cannot create output directory", path=target, internal_details=str(e)
            ) from e

        staged: list[tuple[Path, Path]] = []
        try:
            for path, content in zip(written.paths, contents):
                staged.append((_stage_artifact(path, content), path))
            for temp_path, path in staged:
                try:
                    os.replace(temp_path, path)
                except OSError as e:
                    raise ArtifactWriteError(
                        "Cannot write artifact", path=path, internal_details=str(e)
                    ) from e
        finally:
            for temp_path, _path in staged:
                temp_path.unlink(missing_ok=True)

        logger.info(
            "artifacts_written",
            output_dir=str(target),
            files=[p.name for p in written.paths],
        )
        return written


def _stage_artifact(path: Path, content: str) -> Path:
    """Write ``content`` to a hidden file beside ``path`` and return its path."""
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        temp_path.write_text(content, encoding="utf-8", newline="\n")
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise ArtifactWriteError(
            "Cannot write artifact", path=path, internal_details=str(e)
        ) from e
    return temp_path
