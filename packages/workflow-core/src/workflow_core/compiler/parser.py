"""Manifest parser for workflow-core.

Turns the text of one manifest into a RawWorkflow. Only the top-level
mapping shape is mandatory; every field is optional and unknown fields are
ignored. Wrong-shaped optional fields are dropped with a warning, or raise
FieldTypeError when strict mode is on.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import structlog
import yaml

from workflow_core.errors import (
    DuplicateArgumentError,
    FieldTypeError,
    MalformedManifestError,
    ParseError,
)
from workflow_core.schemas import RawArgument, RawWorkflow

logger = structlog.get_logger(__name__)

# Top-level fields holding a single scalar value
SCALAR_FIELDS = ("name", "command", "description", "source_url", "author", "author_url")

# Top-level fields holding a list of scalars
LIST_FIELDS = ("tags", "shells")

# Fields read from each argument mapping
ARGUMENT_SCALAR_FIELDS = ("description", "default_value")


def parse_manifest(
    content: str,
    source_path: Path | str,
    *,
    strict: bool = False,
    reject_duplicate_arguments: bool = False,
) -> RawWorkflow:
    """Parse one manifest document.

    Args:
        content: Raw manifest text.
        source_path: Path the content was read from (used in errors).
        strict: Raise FieldTypeError on wrong-shaped optional fields
            instead of treating them as absent.
        reject_duplicate_arguments: Raise DuplicateArgumentError when an
            argument name appears more than once.

    Returns:
        RawWorkflow holding exactly what the manifest declares.

    Raises:
        ParseError: If the content is not valid YAML.
        MalformedManifestError: If the top level is not a mapping.
        FieldTypeError: In strict mode, if a field has the wrong shape.
        DuplicateArgumentError: If enabled and an argument name repeats.

    Example:
        >>> raw = parse_manifest("name: Git Status\\ncommand: git status\\n", "git-status.yaml")
        >>> raw.command
        'git status'
    """
    document = _load_yaml(content, source_path)

    if not isinstance(document, dict):
        kind = "an empty document" if document is None else type(document).__name__
        raise MalformedManifestError(
            f"Manifest top level must be a mapping, got {kind}",
            file_path=source_path,
        )

    extractor = _FieldExtractor(source_path, strict=strict)
    values: dict[str, Any] = {}

    for field in SCALAR_FIELDS:
        values[field] = extractor.scalar(document.get(field), field)
    for field in LIST_FIELDS:
        values[field] = extractor.string_list(document.get(field), field)
    values["arguments"] = extractor.arguments(document.get("arguments"))

    if reject_duplicate_arguments and values["arguments"]:
        _check_duplicate_arguments(values["arguments"], source_path)

    return RawWorkflow(**values)


def _load_yaml(content: str, source_path: Path | str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        line: int | None = None
        column: int | None = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
            column = mark.column + 1
        problem = getattr(e, "problem", None) or "could not parse document"
        raise ParseError(
            f"Invalid YAML syntax: {problem}",
            file_path=source_path,
            line=line,
            column=column,
            internal_details=str(e),
        ) from e
    except (ValueError, RecursionError) as e:
        # Raised by scalar construction (e.g. 2024-02-30) or very deep nesting
        raise ParseError(
            f"Invalid YAML value: {e}",
            file_path=source_path,
            internal_details=repr(e),
        ) from e


def _check_duplicate_arguments(arguments: list[RawArgument], source_path: Path | str) -> None:
    seen: set[str] = set()
    for argument in arguments:
        if argument.name in seen:
            raise DuplicateArgumentError(argument.name, file_path=source_path)
        seen.add(argument.name)


class _FieldExtractor:
    """Best-effort field extraction with a switchable strict mode."""

    def __init__(self, source_path: Path | str, *, strict: bool) -> None:
        self.source_path = source_path
        self.strict = strict

    def _reject(self, field_path: str, reason: str) -> None:
        if self.strict:
            raise FieldTypeError(reason, file_path=self.source_path, field_path=field_path)
        logger.warning(
            "manifest_field_dropped",
            file=str(self.source_path),
            field=field_path,
            reason=reason,
        )

    def scalar(self, value: Any, field_path: str) -> str | None:
        """Coerce a scalar to text; None for absent or non-scalar values."""
        if value is None:
            return None
        text = _scalar_to_text(value)
        if text is None:
            self._reject(field_path, f"Expected a scalar, got {type(value).__name__}")
        return text

    def string_list(self, value: Any, field_path: str) -> list[str] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            self._reject(field_path, f"Expected a list, got {type(value).__name__}")
            return None

        items: list[str] = []
        for index, item in enumerate(value):
            text = _scalar_to_text(item) if item is not None else None
            if text is None:
                self._reject(f"{field_path}.{index}", "Expected a scalar list item")
                continue
            items.append(text)
        return items

    def arguments(self, value: Any) -> list[RawArgument] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            self._reject("arguments", f"Expected a list, got {type(value).__name__}")
            return None

        arguments: list[RawArgument] = []
        for index, item in enumerate(value):
            field_path = f"arguments.{index}"
            if not isinstance(item, dict):
                self._reject(field_path, f"Expected a mapping, got {type(item).__name__}")
                continue

            name = self.scalar(item.get("name"), f"{field_path}.name")
            if not name:
                self._reject(f"{field_path}.name", "Argument name is missing")
                continue

            required = item.get("required")
            if required is not None and not isinstance(required, bool):
                self._reject(f"{field_path}.required", "Expected a boolean")
                required = None

            arguments.append(
                RawArgument(
                    name=name,
                    required=required,
                    **{
                        f: self.scalar(item.get(f), f"{field_path}.{f}")
                        for f in ARGUMENT_SCALAR_FIELDS
                    },
                )
            )
        return arguments


def _scalar_to_text(value: Any) -> str | None:
    """Render a YAML scalar as text, or None if the value is not a scalar."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return None
