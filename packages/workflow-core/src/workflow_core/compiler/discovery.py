"""Manifest discovery for workflow-core.

Walks a directory tree and returns the manifest files in it, sorted so the
rest of the pipeline never depends on filesystem enumeration order.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

import structlog

from workflow_core.config import DEFAULT_MANIFEST_SUFFIXES
from workflow_core.errors import DiscoveryLimitError, ManifestIOError

logger = structlog.get_logger(__name__)

DEFAULT_MAX_FILES = 10_000


def is_manifest(path: Path, suffixes: Iterable[str] = DEFAULT_MANIFEST_SUFFIXES) -> bool:
    """Return True if ``path`` has a recognized manifest suffix."""
    return path.suffix.lower() in {s.lower() for s in suffixes}


def sort_paths(paths: Iterable[Path | str]) -> list[Path]:
    """Sort paths lexicographically by their POSIX string form."""
    return sorted((Path(p) for p in paths), key=lambda p: p.as_posix())


def discover_manifests(
    directory: Path | str,
    suffixes: Iterable[str] = DEFAULT_MANIFEST_SUFFIXES,
    *,
    max_files: int = DEFAULT_MAX_FILES,
    follow_symlinks: bool = True,
) -> list[Path]:
    """Find every manifest file under ``directory``.

    Symlinked directories are followed when ``follow_symlinks`` is set, but
    each real directory is visited at most once, so symlink cycles end the
    walk instead of hanging it.

    Args:
        directory: Root of the manifest tree.
        suffixes: Recognized manifest suffixes (case-insensitive).
        max_files: Maximum number of manifests before giving up.
        follow_symlinks: Whether to descend into symlinked directories.

    Returns:
        Manifest paths sorted lexicographically.

    Raises:
        ManifestIOError: If the directory is missing or cannot be read.
        DiscoveryLimitError: If more than ``max_files`` manifests are found.

    Example:
        >>> discover_manifests("specs")
        [PosixPath('specs/deploy-prod.yml'), PosixPath('specs/git/status.yaml')]
    """
    root = Path(directory)
    if not root.is_dir():
        raise ManifestIOError("Manifest directory not found", path=root)

    wanted = tuple(suffixes)
    found: list[Path] = []
    visited: set[str] = set()

    def _on_error(err: OSError) -> None:
        raise ManifestIOError(
            "Cannot read manifest directory",
            path=err.filename or root,
            internal_details=str(err),
        ) from err

    walker = os.walk(root, onerror=_on_error, followlinks=follow_symlinks)
    for current, dirnames, filenames in walker:
        real = os.path.realpath(current)
        if real in visited:
            logger.warning("symlink_cycle_skipped", directory=current)
            dirnames[:] = []
            continue
        visited.add(real)
        dirnames.sort()

        for filename in sorted(filenames):
            path = Path(current) / filename
            if not is_manifest(path, wanted):
                continue
            found.append(path)
            if len(found) > max_files:
                raise DiscoveryLimitError(root, max_files)

    manifests = sort_paths(found)
    logger.debug("manifests_discovered", directory=str(root), count=len(manifests))
    return manifests
