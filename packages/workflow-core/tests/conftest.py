"""Shared pytest fixtures for workflow-core tests.

This module provides common fixtures used across unit, integration,
and contract tests.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

ManifestWriter = Callable[[str, "str | dict[str, Any]"], Path]


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    Ensures capsys can capture log output regardless of test order.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def specs_dir(tmp_path: Path) -> Path:
    """Return an empty manifest directory."""
    directory = tmp_path / "specs"
    directory.mkdir()
    return directory


@pytest.fixture
def write_manifest(specs_dir: Path) -> ManifestWriter:
    """Return a helper that writes a manifest under specs_dir.

    Dict content is dumped as YAML (key order preserved); string content
    is written verbatim.
    """

    def _write(relative_path: str, content: str | dict[str, Any]) -> Path:
        path = specs_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = yaml.safe_dump(content, sort_keys=False)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def git_status_manifest() -> dict[str, Any]:
    """Return a minimal manifest with a name, command, tags and author."""
    return {
        "name": "Git Status",
        "command": "git status",
        "tags": ["git"],
        "author": "Warp",
    }


@pytest.fixture
def deploy_manifest() -> dict[str, Any]:
    """Return a manifest exercising every supported field."""
    return {
        "name": "Deploy to Production",
        "command": "kubectl apply -f {{manifest}}",
        "description": "Roll out the production deployment",
        "tags": ["deploy", "prod", "k8s"],
        "arguments": [
            {
                "name": "manifest",
                "description": "Kubernetes manifest to apply",
                "default_value": "deploy.yaml",
            },
            {
                "name": "context",
                "required": False,
            },
        ],
        "source_url": "https://example.com/deploy",
        "author": "Platform Team",
        "author_url": "https://example.com/platform",
        "shells": ["bash", "zsh"],
    }


@pytest.fixture
def sample_specs(
    specs_dir: Path,
    write_manifest: ManifestWriter,
    git_status_manifest: dict[str, Any],
    deploy_manifest: dict[str, Any],
) -> Path:
    """Create a small manifest tree with one nested directory and a non-manifest.

    Layout:
        specs/Git Status.yaml
        specs/deploy_prod.yml
        specs/ci/run-tests.yaml   (no name field)
        specs/docs/README.md      (ignored)
    """
    write_manifest("Git Status.yaml", git_status_manifest)
    write_manifest("deploy_prod.yml", deploy_manifest)
    write_manifest(
        "ci/run-tests.yaml",
        {"command": "pytest -q", "tags": ["ci", "test"]},
    )
    write_manifest("docs/README.md", "# Not a manifest\n")
    return specs_dir
