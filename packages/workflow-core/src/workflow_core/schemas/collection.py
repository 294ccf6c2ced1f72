"""WorkflowCollection: compiled output contract.

The collection is the single object handed to the artifact emitter and to
any in-process consumer. Its accessors mirror the helper functions emitted
into the data artifact so both sides answer queries the same way.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from workflow_core.schemas.search_index import SearchIndexEntry
from workflow_core.schemas.workflow import Workflow


class WorkflowCollection(BaseModel):
    """Immutable result of one compilation run.

    Contract Rules:
    - Model is immutable (frozen=True)
    - Unknown fields are rejected (extra="forbid")
    - workflows and search_index share order (sorted manifest path)
    - tags is deduplicated and sorted

    Attributes:
        workflows: Compiled workflows in sorted manifest path order.
        search_index: One entry per workflow, same order.
        tags: Every tag used by any workflow, each exactly once.

    Example:
        >>> collection = compiler.compile("specs")
        >>> collection.get_workflow_by_slug("git-status").command
        'git status'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    workflows: list[Workflow] = Field(
        default_factory=list,
        description="Compiled workflows",
    )
    search_index: list[SearchIndexEntry] = Field(
        default_factory=list,
        description="Search index entries, one per workflow",
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Deduplicated union of all workflow tags",
    )

    def get_workflow_by_slug(self, slug: str) -> Workflow | None:
        """Return the workflow with exactly this slug, or None."""
        for workflow in self.workflows:
            if workflow.slug == slug:
                return workflow
        return None

    def get_workflows_by_tag(self, tag: str) -> list[Workflow]:
        """Return every workflow tagged with ``tag``, in collection order."""
        return [w for w in self.workflows if w.tags is not None and tag in w.tags]

    def search_workflows(self, query: str) -> list[Workflow]:
        """Return workflows whose searchable text contains ``query``.

        Matching is a case-insensitive substring test. An empty query
        matches everything.

        Args:
            query: Text to look for.

        Returns:
            Matching workflows in collection order.
        """
        needle = query.lower()
        matches = {e.slug for e in self.search_index if needle in e.searchable_text}
        return [w for w in self.workflows if w.slug in matches]
