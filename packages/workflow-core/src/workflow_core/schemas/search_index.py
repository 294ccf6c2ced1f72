"""Search index entry model for workflow-core."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SearchIndexEntry(BaseModel):
    """Read-only search projection of a Workflow.

    Attributes:
        slug: Slug of the source workflow.
        name: Workflow display name.
        description: Description, empty string when the workflow has none.
        tags: Tags, empty list when the workflow has none.
        command: Command template.
        author: Optional author.
        searchable_text: Lower-cased concatenation of the indexed fields.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slug: str = Field(..., description="Slug of the source workflow")
    name: str = Field(..., description="Workflow display name")
    description: str = Field(default="", description="Workflow description")
    tags: list[str] = Field(default_factory=list, description="Workflow tags")
    command: str = Field(..., description="Command template")
    author: str | None = Field(default=None, description="Workflow author")
    searchable_text: str = Field(..., description="Lower-cased text matched by search")
