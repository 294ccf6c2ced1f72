"""Compiler configuration for workflow-core.

CompilerConfig controls discovery, parsing policy, resource bounds and
artifact file names. Values can be overridden through WORKFLOW_CORE_*
environment variables via CompilerConfig.from_env().
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from workflow_core.errors import ConfigurationError

# Prefix for environment variable overrides
ENV_PREFIX = "WORKFLOW_CORE_"

# Recognized manifest file suffixes
DEFAULT_MANIFEST_SUFFIXES = (".yaml", ".yml")

# Default artifact directory and file names
DEFAULT_OUTPUT_DIR = "generated"
DEFAULT_DATA_ARTIFACT = "workflows.ts"
DEFAULT_TYPES_ARTIFACT = "types.ts"
DEFAULT_SEARCH_INDEX_ARTIFACT = "search-index.json"

# Settings that can be overridden from the environment
ENV_SETTINGS = (
    "strict_fields",
    "reject_duplicate_arguments",
    "max_workers",
    "timeout_seconds",
    "max_files",
    "output_dir",
)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

ARTIFACT_NAME_DESCRIPTION = "File name inside output_dir"


class CompilerConfig(BaseModel):
    """Configuration for one compilation run.

    Attributes:
        manifest_suffixes: File suffixes treated as manifests (case-insensitive).
        strict_fields: Raise on wrong-shaped optional fields instead of dropping them.
        reject_duplicate_arguments: Raise when a workflow repeats an argument name.
        max_workers: Thread pool size for per-file parsing.
        timeout_seconds: Ceiling on total parse time.
        max_files: Ceiling on the number of discovered manifests.
        follow_symlinks: Descend into symlinked directories (cycles are skipped).
        output_dir: Default directory for emitted artifacts.
        data_artifact_name: Data module file name.
        types_artifact_name: Type declaration file name.
        search_index_artifact_name: Standalone search index file name.
        json_schema_artifact_name: JSON Schema file name, or None to skip it.

    Example:
        >>> config = CompilerConfig(strict_fields=True, output_dir="web/generated")
        >>> config = CompilerConfig.from_env(max_workers=1)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest_suffixes: tuple[str, ...] = Field(
        default=DEFAULT_MANIFEST_SUFFIXES,
        min_length=1,
        description="File suffixes treated as manifests",
    )
    strict_fields: bool = Field(
        default=False,
        description="Raise on wrong-shaped optional fields",
    )
    reject_duplicate_arguments: bool = Field(
        default=False,
        description="Raise when a workflow repeats an argument name",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Thread pool size for per-file parsing",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Ceiling on total parse time in seconds",
    )
    max_files: int = Field(
        default=10_000,
        ge=1,
        description="Ceiling on the number of discovered manifests",
    )
    follow_symlinks: bool = Field(
        default=True,
        description="Descend into symlinked directories",
    )
    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        min_length=1,
        description="Default directory for emitted artifacts",
    )
    data_artifact_name: str = Field(
        default=DEFAULT_DATA_ARTIFACT,
        min_length=1,
        description=ARTIFACT_NAME_DESCRIPTION,
    )
    types_artifact_name: str = Field(
        default=DEFAULT_TYPES_ARTIFACT,
        min_length=1,
        description=ARTIFACT_NAME_DESCRIPTION,
    )
    search_index_artifact_name: str = Field(
        default=DEFAULT_SEARCH_INDEX_ARTIFACT,
        min_length=1,
        description=ARTIFACT_NAME_DESCRIPTION,
    )
    json_schema_artifact_name: str | None = Field(
        default=None,
        description="JSON Schema file name, or None to skip it",
    )

    @field_validator("manifest_suffixes")
    @classmethod
    def _normalize_suffixes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalized = []
        for suffix in value:
            suffix = suffix.strip().lower()
            if not suffix:
                raise ValueError("manifest suffix must not be empty")
            if not suffix.startswith("."):
                suffix = f".{suffix}"
            normalized.append(suffix)
        return tuple(normalized)

    @classmethod
    def from_env(cls, **overrides: Any) -> CompilerConfig:
        """Build a config from WORKFLOW_CORE_* environment variables.

        Explicit keyword overrides win over the environment.

        Args:
            **overrides: Field values that take precedence.

        Returns:
            Validated CompilerConfig.

        Raises:
            ConfigurationError: If an environment value cannot be used.
        """
        values: dict[str, Any] = {}
        for setting in ENV_SETTINGS:
            env_var = f"{ENV_PREFIX}{setting.upper()}"
            raw = os.environ.get(env_var)
            if raw is None or not raw.strip():
                continue
            if cls.model_fields[setting].annotation is bool:
                values[setting] = _parse_bool(raw, env_var)
            else:
                values[setting] = raw.strip()

        values.update(overrides)

        try:
            return cls.model_validate(values)
        except PydanticValidationError as e:
            first = e.errors()[0]
            setting = ".".join(str(x) for x in first["loc"])
            raise ConfigurationError(
                "Invalid compiler configuration",
                setting=setting,
                internal_details=str(e),
            ) from e


def _parse_bool(raw: str, env_var: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Expected a boolean, got '{raw}'",
        setting=env_var,
    )
