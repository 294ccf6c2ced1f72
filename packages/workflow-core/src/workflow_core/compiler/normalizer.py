"""Workflow normalizer for workflow-core.

Applies defaults to a RawWorkflow and derives its slug from the manifest
filename. The slug never depends on the manifest's ``name`` field.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from workflow_core.schemas import RawWorkflow, Workflow, WorkflowArgument

# Slug used when a filename has no alphanumeric characters
FALLBACK_SLUG = "unknown"

# Runs of characters that separate words
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

# camelCase and ACRONYMWord boundaries inside a single token
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def slugify_filename(filename: str) -> str:
    """Derive a kebab-case slug from a manifest filename.

    The final suffix is dropped, the stem is split into words on any
    non-alphanumeric run and on case boundaries, and the words are
    lower-cased and joined with single hyphens.

    Args:
        filename: Manifest base name or path.

    Returns:
        Kebab-case slug, or "unknown" if nothing usable remains.

    Example:
        >>> slugify_filename("Git Status.yaml")
        'git-status'
        >>> slugify_filename("deploy_prod.yml")
        'deploy-prod'
        >>> slugify_filename("HTTPServerLogs.yaml")
        'http-server-logs'
    """
    stem = PurePath(filename).stem
    words: list[str] = []
    for token in _SEPARATORS.split(stem):
        words.extend(w for w in _CASE_BOUNDARY.split(token) if w)
    return "-".join(w.lower() for w in words) or FALLBACK_SLUG


def normalize_workflow(raw: RawWorkflow, filename: str) -> Workflow:
    """Build the canonical Workflow for one parsed manifest.

    Defaults applied here:
    - slug from the filename
    - name falls back to the slug
    - command falls back to ""
    - argument ``required`` falls back to True when omitted

    Everything else stays None when the manifest leaves it out.

    Args:
        raw: Parser output.
        filename: Manifest base name (or path) the raw workflow came from.

    Returns:
        Immutable Workflow.
    """
    slug = slugify_filename(filename)

    arguments: list[WorkflowArgument] | None = None
    if raw.arguments is not None:
        arguments = [
            WorkflowArgument(
                name=arg.name,
                description=arg.description,
                default_value=arg.default_value,
                required=True if arg.required is None else arg.required,
            )
            for arg in raw.arguments
        ]

    return Workflow(
        name=raw.name if raw.name is not None else slug,
        command=raw.command if raw.command is not None else "",
        description=raw.description,
        tags=raw.tags,
        arguments=arguments,
        source_url=raw.source_url,
        author=raw.author,
        author_url=raw.author_url,
        shells=raw.shells,
        slug=slug,
    )
