"""Reported manifest problems."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from workflow_core.errors import ParseError


class ManifestIssue(BaseModel):
    """One (path, reason) pair surfaced to the user.

    Attributes:
        path: Manifest the problem was found in.
        message: Human-readable reason.
        line: 1-based line number, if known.
        column: 1-based column number, if known.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path = Field(..., description="Manifest path")
    message: str = Field(..., min_length=1, description="Problem description")
    line: int | None = Field(default=None, ge=1, description="Line number")
    column: int | None = Field(default=None, ge=1, description="Column number")

    @classmethod
    def from_error(cls, error: ParseError) -> ManifestIssue:
        """Build an issue from a ParseError."""
        return cls(
            path=error.file_path,
            message=error.reason,
            line=error.line,
            column=error.column,
        )

    def __str__(self) -> str:
        location = str(self.path)
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.message}"
