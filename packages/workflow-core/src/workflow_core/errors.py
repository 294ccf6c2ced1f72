"""Custom exception hierarchy for workflow-core.

This module defines the exception classes raised by the manifest compiler:
- WorkflowError: Base exception for all workflow-core errors
- ParseError: A single manifest could not be parsed (recoverable per file)
- CompilationError: The collection as a whole cannot be trusted (fatal)
- ManifestIOError: A directory, manifest or artifact path is unusable (fatal)

User-facing messages are safe to display. Technical details (raw YAML
problems, OS error strings) are passed as ``internal_details`` and logged
via structlog instead of being folded into the message.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from workflow_core.schemas.issues import ManifestIssue

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)


class WorkflowError(Exception):
    """Base exception for workflow-core.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details. Logged, never shown.

    Example:
        >>> raise WorkflowError(
        ...     "Manifest invalid",
        ...     internal_details="expected <block end>, but found '-'",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "workflow_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(WorkflowError):
    """Raised when compiler configuration is invalid.

    Attributes:
        setting: Name of the offending setting or environment variable.
    """

    def __init__(
        self,
        user_message: str,
        *,
        setting: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        full_message = f"{user_message} (setting '{setting}')" if setting else user_message
        super().__init__(full_message, internal_details=internal_details)
        self.setting = setting


class ParseError(WorkflowError):
    """Raised when one manifest cannot be turned into a workflow.

    A ParseError only invalidates its own file. The compiler collects them
    and keeps going so every broken manifest is reported in one run.

    Attributes:
        file_path: Path of the manifest.
        line: 1-based line number of the problem, if known.
        column: 1-based column number of the problem, if known.

    Example:
        >>> raise ParseError(
        ...     "Invalid YAML syntax",
        ...     file_path="specs/deploy.yaml",
        ...     line=3,
        ...     column=7,
        ... )
        # str(error) == "Invalid YAML syntax (in specs/deploy.yaml, line 3, column 7)"
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: Path | str,
        line: int | None = None,
        column: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts = [f"in {file_path}"]
        if line is not None:
            context_parts.append(f"line {line}")
        if column is not None:
            context_parts.append(f"column {column}")

        super().__init__(
            f"{user_message} ({', '.join(context_parts)})",
            internal_details=internal_details,
        )
        self.reason = user_message
        self.file_path = Path(file_path)
        self.line = line
        self.column = column


class MalformedManifestError(ParseError):
    """Raised when a manifest parses but its top level is not a mapping."""

    pass


class FieldTypeError(ParseError):
    """Raised in strict mode when a field has the wrong shape.

    Attributes:
        field_path: Dot-separated path to the field (e.g., "arguments.0.name").
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: Path | str,
        field_path: str,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"{user_message}: field '{field_path}'",
            file_path=file_path,
            internal_details=internal_details,
        )
        self.field_path = field_path


class DuplicateArgumentError(ParseError):
    """Raised when one workflow declares the same argument name twice."""

    def __init__(self, argument_name: str, *, file_path: Path | str) -> None:
        super().__init__(
            f"Duplicate argument name '{argument_name}'",
            file_path=file_path,
        )
        self.argument_name = argument_name


class CompilationError(WorkflowError):
    """Raised when the collection as a whole cannot be built.

    Use this exception when:
    - Any manifest failed to parse (see ManifestParseErrors)
    - Two manifests normalize to the same slug
    - Discovery or compilation exceeded a configured bound
    """

    pass


class ManifestParseErrors(CompilationError):
    """Aggregate of every per-file ParseError from one compilation run.

    Attributes:
        errors: The collected ParseError instances, in sorted path order.
        issues: One ManifestIssue per error, for user-facing summaries.
        compiled_workflows: Names of the workflows that did compile, so a
            summary can show what would have been built.
    """

    def __init__(
        self,
        errors: Sequence[ParseError],
        *,
        compiled_workflows: Sequence[str] = (),
    ) -> None:
        count = len(errors)
        noun = "manifest" if count == 1 else "manifests"
        super().__init__(f"{count} {noun} failed to parse")

        self.errors: list[ParseError] = list(errors)
        self.issues: list[ManifestIssue] = [ManifestIssue.from_error(e) for e in errors]
        self.compiled_workflows: list[str] = list(compiled_workflows)


class DuplicateSlugError(CompilationError):
    """Raised when two manifests normalize to the same slug.

    Attributes:
        slug: The colliding slug.
        first_path: Manifest that claimed the slug first.
        second_path: Manifest that collided with it.

    Example:
        >>> raise DuplicateSlugError("build", Path("a/Build.yaml"), Path("b/build.yml"))
        # User sees: "Duplicate workflow slug 'build': a/Build.yaml and b/build.yml"
    """

    def __init__(self, slug: str, first_path: Path | str, second_path: Path | str) -> None:
        super().__init__(f"Duplicate workflow slug '{slug}': {first_path} and {second_path}")
        self.slug = slug
        self.first_path = Path(first_path)
        self.second_path = Path(second_path)


class DiscoveryLimitError(CompilationError):
    """Raised when a directory walk yields more manifests than allowed."""

    def __init__(self, directory: Path | str, max_files: int) -> None:
        super().__init__(f"More than {max_files} manifests found under {directory}")
        self.directory = Path(directory)
        self.max_files = max_files


class CompilationTimeoutError(CompilationError):
    """Raised when parsing does not finish within the configured ceiling."""

    def __init__(self, timeout_seconds: float, pending: int) -> None:
        super().__init__(
            f"Compilation exceeded {timeout_seconds:g}s with {pending} manifests pending"
        )
        self.timeout_seconds = timeout_seconds
        self.pending = pending


class ManifestIOError(WorkflowError):
    """Raised when a directory or manifest cannot be read.

    Attributes:
        path: The offending path.
    """

    def __init__(
        self,
        user_message: str,
        *,
        path: Path | str,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(f"{user_message}: {path}", internal_details=internal_details)
        self.path = Path(path)


class ArtifactWriteError(ManifestIOError):
    """Raised when an output artifact cannot be written."""

    pass
