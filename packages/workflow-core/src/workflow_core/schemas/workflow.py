"""Workflow models for workflow-core.

This module defines the canonical workflow records and the raw parser
candidates they are normalized from:
- RawArgument / RawWorkflow: What a manifest literally says (all optional)
- WorkflowArgument / Workflow: Canonical records with defaults applied

Keeping the raw and canonical layers separate keeps the two defaulting
rules apart: "required omitted inside an argument" is decided by the
normalizer, "arguments block missing entirely" stays None throughout.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Canonical kebab-case slug (lowercase words separated by single hyphens)
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class RawArgument(BaseModel):
    """One argument entry as extracted from a manifest.

    Attributes:
        name: Argument name.
        description: Optional description.
        default_value: Optional default, coerced to string.
        required: Explicit required flag, or None when omitted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str | None = None
    default_value: str | None = None
    required: bool | None = None


class RawWorkflow(BaseModel):
    """Parser output for one manifest. No defaults applied."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    command: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    arguments: list[RawArgument] | None = None
    source_url: str | None = None
    author: str | None = None
    author_url: str | None = None
    shells: list[str] | None = None


class WorkflowArgument(BaseModel):
    """A named parameter accepted by a workflow.

    Attributes:
        name: Argument name (non-empty).
        description: Optional human-readable description.
        default_value: Optional default value.
        required: Whether the argument must be supplied.

    Example:
        >>> arg = WorkflowArgument(name="branch", default_value="main", required=False)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        description="Argument name",
    )
    description: str | None = Field(
        default=None,
        description="Argument description",
    )
    default_value: str | None = Field(
        default=None,
        description="Default value used when the argument is not supplied",
    )
    required: bool | None = Field(
        default=None,
        description="Whether the argument must be supplied",
    )


class Workflow(BaseModel):
    """Canonical workflow record compiled from one manifest.

    Attributes:
        name: Display name. Defaults to the slug when the manifest has none.
        command: Executable command template. May be empty.
        description: Optional description.
        tags: Optional free-form classification tags.
        arguments: Optional list of accepted arguments.
        source_url: Optional link to where the workflow came from.
        author: Optional author name.
        author_url: Optional link to the author.
        shells: Optional list of compatible shell identifiers.
        slug: Unique identifier derived from the manifest filename.

    Example:
        >>> workflow = Workflow(
        ...     name="Git Status",
        ...     command="git status",
        ...     tags=["git"],
        ...     slug="git-status",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        description="Display name",
    )
    command: str = Field(
        ...,
        description="Executable command template",
    )
    description: str | None = Field(
        default=None,
        description="Workflow description",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Classification tags",
    )
    arguments: list[WorkflowArgument] | None = Field(
        default=None,
        description="Arguments accepted by the command template",
    )
    source_url: str | None = Field(
        default=None,
        description="Where the workflow was sourced from",
    )
    author: str | None = Field(
        default=None,
        description="Workflow author",
    )
    author_url: str | None = Field(
        default=None,
        description="Link to the workflow author",
    )
    shells: list[str] | None = Field(
        default=None,
        description="Compatible shell identifiers",
    )
    slug: str = Field(
        ...,
        pattern=SLUG_PATTERN,
        description="Unique identifier derived from the manifest filename",
    )
