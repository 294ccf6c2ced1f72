"""Search index derivation for workflow-core."""

from __future__ import annotations

from collections.abc import Iterable

from workflow_core.schemas import SearchIndexEntry, Workflow


def searchable_text(workflow: Workflow) -> str:
    """Return the lower-cased text a workflow is searched by.

    Fields are joined by single spaces in a fixed order: name, description,
    tags (space-joined), command, author. Missing fields contribute "".
    """
    parts = (
        workflow.name,
        workflow.description or "",
        " ".join(workflow.tags or []),
        workflow.command,
        workflow.author or "",
    )
    return " ".join(parts).lower()


def to_search_entry(workflow: Workflow) -> SearchIndexEntry:
    """Project a workflow onto its search index entry."""
    return SearchIndexEntry(
        slug=workflow.slug,
        name=workflow.name,
        description=workflow.description or "",
        tags=list(workflow.tags or []),
        command=workflow.command,
        author=workflow.author,
        searchable_text=searchable_text(workflow),
    )


def build_search_index(workflows: Iterable[Workflow]) -> list[SearchIndexEntry]:
    """Build one entry per workflow, preserving order."""
    return [to_search_entry(w) for w in workflows]
