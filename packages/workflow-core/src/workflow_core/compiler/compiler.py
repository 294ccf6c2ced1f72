"""Compiler class for workflow-core.

This module implements the Compiler that turns a directory of workflow
manifests into a WorkflowCollection and, optionally, the emitted artifacts.

Pipeline:
- Discover manifests and sort them by path
- Read, parse and normalize each manifest (in a thread pool)
- Reassemble results in sorted path order
- Fail with every collected ParseError, if any
- Build the collection (duplicate slugs are fatal)
- Emit artifacts (build() only)
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

import structlog

from workflow_core.compiler.collection_builder import (
    WorkflowRecord,
    build_collection,
    find_duplicate_slugs,
)
from workflow_core.compiler.discovery import discover_manifests, sort_paths
from workflow_core.compiler.models import CompilationResult
from workflow_core.compiler.normalizer import normalize_workflow
from workflow_core.compiler.parser import parse_manifest
from workflow_core.config import CompilerConfig
from workflow_core.emitter import ArtifactEmitter
from workflow_core.errors import (
    CompilationTimeoutError,
    ManifestIOError,
    ManifestParseErrors,
    ParseError,
    WorkflowError,
)
from workflow_core.schemas import Workflow, WorkflowCollection

logger = structlog.get_logger(__name__)

# Per-manifest outcome: the workflow, or the error that stopped it
ManifestOutcome = tuple[Path, Workflow | WorkflowError]


class Compiler:
    """Compile workflow manifests to a WorkflowCollection.

    Example:
        >>> compiler = Compiler()
        >>> collection = compiler.compile("specs")
        >>> len(collection.workflows)
        12

        >>> # Report every problem without raising
        >>> for path, error in compiler.validate("specs"):
        ...     print(path, error)

        >>> # Compile and write artifacts
        >>> result = compiler.build("specs", output_dir="web/generated")
    """

    def __init__(self, config: CompilerConfig | None = None) -> None:
        """Initialize the Compiler.

        Args:
            config: Compiler configuration. Defaults to CompilerConfig().
        """
        self.config = config or CompilerConfig()
        self._log = logger.bind(component="compiler")

    def discover(self, directory: Path | str) -> list[Path]:
        """Return the sorted manifest paths under ``directory``."""
        return discover_manifests(
            directory,
            self.config.manifest_suffixes,
            max_files=self.config.max_files,
            follow_symlinks=self.config.follow_symlinks,
        )

    def compile(self, directory: Path | str) -> WorkflowCollection:
        """Compile every manifest under ``directory``.

        Args:
            directory: Root of the manifest tree.

        Returns:
            Immutable WorkflowCollection.

        Raises:
            ManifestIOError: If the directory or a manifest cannot be read.
            ManifestParseErrors: If one or more manifests failed to parse.
            DuplicateSlugError: If two manifests share a slug.
            CompilationTimeoutError: If parsing exceeded the configured ceiling.
        """
        return self.compile_paths(self.discover(directory))

    def compile_paths(self, paths: Iterable[Path | str]) -> WorkflowCollection:
        """Compile an explicit set of manifest paths.

        Paths are sorted (and deduplicated) first, so the result does not
        depend on the order they are supplied in.

        Raises:
            Same as compile().
        """
        outcomes = self._run(paths, stop_on_io_error=True)

        records: list[WorkflowRecord] = []
        errors: list[ParseError] = []
        for path, outcome in outcomes:
            if isinstance(outcome, Workflow):
                records.append((path, outcome))
            elif isinstance(outcome, ParseError):
                errors.append(outcome)
            else:
                raise outcome

        if errors:
            self._log.error(
                "compilation_failed",
                failed=len(errors),
                compiled=len(records),
            )
            raise ManifestParseErrors(
                errors,
                compiled_workflows=[workflow.name for _path, workflow in records],
            )

        collection = build_collection(records)
        self._log.info(
            "compilation_complete",
            workflows=len(collection.workflows),
            tags=len(collection.tags),
        )
        return collection

    def validate(self, directory: Path | str) -> list[tuple[Path, WorkflowError]]:
        """Check every manifest under ``directory`` without raising for them.

        Per-manifest problems (unreadable file, parse error) and duplicate
        slugs are all returned. Duplicate slugs are reported against the
        later manifest.

        Args:
            directory: Root of the manifest tree.

        Returns:
            (path, error) pairs in path order. Empty when everything is valid.

        Raises:
            ManifestIOError: If the directory itself cannot be read.
        """
        outcomes = self._run(self.discover(directory), stop_on_io_error=False)

        problems: list[tuple[Path, WorkflowError]] = []
        records: list[WorkflowRecord] = []
        for path, outcome in outcomes:
            if isinstance(outcome, Workflow):
                records.append((path, outcome))
            else:
                problems.append((path, outcome))

        problems.extend((dup.second_path, dup) for dup in find_duplicate_slugs(records))
        problems.sort(key=lambda item: item[0].as_posix())

        self._log.info(
            "validation_complete",
            manifests=len(outcomes),
            problems=len(problems),
        )
        return problems

    def build(
        self,
        directory: Path | str,
        output_dir: Path | str | None = None,
    ) -> CompilationResult:
        """Compile ``directory`` and write the artifact set.

        Nothing is written unless compilation succeeds.

        Args:
            directory: Root of the manifest tree.
            output_dir: Artifact directory; defaults to ``config.output_dir``.

        Returns:
            CompilationResult with the collection and written paths.
        """
        collection = self.compile(directory)
        artifacts = ArtifactEmitter(self.config).emit(collection, output_dir)
        return CompilationResult(collection=collection, artifacts=artifacts)

    def compile_manifest(self, path: Path | str) -> Workflow:
        """Read, parse and normalize a single manifest.

        Raises:
            ManifestIOError: If the file cannot be read.
            ParseError: If the content cannot be parsed.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(
                "Manifest is not valid UTF-8 text",
                file_path=path,
                internal_details=str(e),
            ) from e
        except OSError as e:
            raise ManifestIOError(
                "Cannot read manifest", path=path, internal_details=str(e)
            ) from e

        raw = parse_manifest(
            content,
            path,
            strict=self.config.strict_fields,
            reject_duplicate_arguments=self.config.reject_duplicate_arguments,
        )
        workflow = normalize_workflow(raw, path.name)
        self._log.debug("manifest_parsed", file=str(path), slug=workflow.slug)
        return workflow

    def _run(
        self,
        paths: Iterable[Path | str],
        *,
        stop_on_io_error: bool,
    ) -> list[ManifestOutcome]:
        """Compile each manifest on a thread pool, returning sorted outcomes.

        Raises:
            ManifestIOError: If ``stop_on_io_error`` and a manifest is unreadable.
            CompilationTimeoutError: If the run exceeds ``timeout_seconds``.
        """
        ordered = list(dict.fromkeys(sort_paths(paths)))
        if not ordered:
            return []

        deadline = time.monotonic() + self.config.timeout_seconds
        outcomes: list[Workflow | WorkflowError | None] = [None] * len(ordered)
        workers = min(self.config.max_workers, len(ordered))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="manifest")

        try:
            pending: dict[Future[Workflow], int] = {
                executor.submit(self.compile_manifest, path): index
                for index, path in enumerate(ordered)
            }
            while pending:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise CompilationTimeoutError(self.config.timeout_seconds, len(pending))
                done, _ = wait(pending, timeout=remaining, return_when=FIRST_COMPLETED)
                for future in done:
                    index = pending.pop(future)
                    try:
                        outcomes[index] = future.result()
                    except ManifestIOError as e:
                        if stop_on_io_error:
                            raise
                        outcomes[index] = e
                    except ParseError as e:
                        outcomes[index] = e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return [(path, outcome) for path, outcome in zip(ordered, outcomes) if outcome is not None]
