"""Compiler output models for workflow-core."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from workflow_core.emitter import EmittedArtifacts
from workflow_core.schemas import WorkflowCollection


class CompilationResult(BaseModel):
    """Outcome of a successful compile-and-emit run.

    Attributes:
        collection: The compiled collection.
        artifacts: Paths of the written artifacts.

    Example:
        >>> result = Compiler().build("specs", output_dir="web/generated")
        >>> result.workflow_count, result.tag_count
        (12, 7)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    collection: WorkflowCollection = Field(..., description="Compiled collection")
    artifacts: EmittedArtifacts = Field(..., description="Written artifact paths")

    @property
    def workflow_count(self) -> int:
        return len(self.collection.workflows)

    @property
    def tag_count(self) -> int:
        return len(self.collection.tags)
