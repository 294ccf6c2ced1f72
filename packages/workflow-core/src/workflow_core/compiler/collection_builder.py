"""Collection builder for workflow-core.

Assembles normalized workflows into a WorkflowCollection, enforcing slug
uniqueness and folding every workflow's tags into one sorted tag list.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from workflow_core.compiler.indexer import build_search_index
from workflow_core.errors import DuplicateSlugError
from workflow_core.schemas import Workflow, WorkflowCollection

# (manifest path, normalized workflow) in sorted path order
WorkflowRecord = tuple[Path, Workflow]


def find_duplicate_slugs(records: Iterable[WorkflowRecord]) -> list[DuplicateSlugError]:
    """Return one DuplicateSlugError per collision, without raising.

    Each later manifest that reuses a slug is reported against the first
    manifest that claimed it.
    """
    owners: dict[str, Path] = {}
    duplicates: list[DuplicateSlugError] = []
    for path, workflow in records:
        first = owners.setdefault(workflow.slug, path)
        if first != path:
            duplicates.append(DuplicateSlugError(workflow.slug, first, path))
    return duplicates


def collect_tags(workflows: Iterable[Workflow]) -> list[str]:
    """Fold workflow tags into a deduplicated, sorted list."""
    seen: dict[str, None] = {}
    for workflow in workflows:
        for tag in workflow.tags or ():
            seen.setdefault(tag, None)
    return sorted(seen)


def build_collection(records: Sequence[WorkflowRecord]) -> WorkflowCollection:
    """Build the collection from normalized workflows.

    Args:
        records: (manifest path, workflow) pairs in sorted path order.

    Returns:
        WorkflowCollection with workflows and search index in record order.

    Raises:
        DuplicateSlugError: On the first slug collision, naming both paths.
    """
    duplicates = find_duplicate_slugs(records)
    if duplicates:
        raise duplicates[0]

    workflows = [workflow for _path, workflow in records]
    return WorkflowCollection(
        workflows=workflows,
        search_index=build_search_index(workflows),
        tags=collect_tags(workflows),
    )
