"""Unit tests for the Compiler class.

Tests compile(), compile_paths(), validate() and build() against small
manifest trees written to tmp_path.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from workflow_core.compiler import Compiler
from workflow_core.config import CompilerConfig
from workflow_core.errors import (
    CompilationTimeoutError,
    DuplicateSlugError,
    FieldTypeError,
    ManifestIOError,
    ManifestParseErrors,
    ParseError,
)
from workflow_core.schemas import Workflow, WorkflowCollection


class TestCompilerInstantiation:
    """Tests for Compiler construction."""

    def test_default_config(self) -> None:
        compiler = Compiler()
        assert compiler.config == CompilerConfig()

    def test_custom_config(self) -> None:
        config = CompilerConfig(strict_fields=True, max_workers=1)
        assert Compiler(config).config is config


class TestCompile:
    """Tests for Compiler.compile()."""

    def test_compile_sample_tree(self, sample_specs: Path) -> None:
        """All manifests compile in sorted path order."""
        collection = Compiler().compile(sample_specs)

        assert isinstance(collection, WorkflowCollection)
        assert [w.slug for w in collection.workflows] == [
            "git-status",
            "run-tests",
            "deploy-prod",
        ]
        assert collection.tags == ["ci", "deploy", "git", "k8s", "prod", "test"]

    def test_compile_applies_defaults(self, sample_specs: Path) -> None:
        """Missing names default to the slug; missing required defaults to True."""
        collection = Compiler().compile(sample_specs)

        run_tests = collection.get_workflow_by_slug("run-tests")
        assert run_tests is not None
        assert run_tests.name == "run-tests"

        deploy = collection.get_workflow_by_slug("deploy-prod")
        assert deploy is not None
        assert deploy.arguments is not None
        assert [a.required for a in deploy.arguments] == [True, False]

    def test_compile_returns_immutable_collection(self, sample_specs: Path) -> None:
        """The compiled collection is frozen."""
        collection = Compiler().compile(sample_specs)

        with pytest.raises(ValidationError):
            collection.tags = []  # type: ignore[misc]

    def test_compile_empty_directory(self, specs_dir: Path) -> None:
        """An empty tree compiles to an empty collection."""
        collection = Compiler().compile(specs_dir)

        assert collection.workflows == []
        assert collection.tags == []

    def test_compile_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestIOError):
            Compiler().compile(tmp_path / "missing")

    def test_compile_collects_every_parse_error(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """Every broken manifest is reported, not just the first."""
        write_manifest("good.yaml", {"name": "Good", "command": "true"})
        write_manifest("broken-a.yaml", "command: [unclosed\n")
        write_manifest("broken-b.yaml", "- not\n- a mapping\n")

        with pytest.raises(ManifestParseErrors) as exc_info:
            Compiler().compile(specs_dir)

        error = exc_info.value
        assert [e.file_path.name for e in error.errors] == ["broken-a.yaml", "broken-b.yaml"]
        assert [i.path.name for i in error.issues] == ["broken-a.yaml", "broken-b.yaml"]
        assert error.compiled_workflows == ["Good"]
        assert "2 manifests failed to parse" in str(error)

    def test_compile_duplicate_slug(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """Two manifests normalizing to one slug abort compilation."""
        first = write_manifest("Build.yaml", {"command": "make"})
        second = write_manifest("nested/build.yml", {"command": "make all"})

        with pytest.raises(DuplicateSlugError) as exc_info:
            Compiler().compile(specs_dir)

        assert exc_info.value.slug == "build"
        assert {exc_info.value.first_path, exc_info.value.second_path} == {first, second}

    def test_compile_strict_mode(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """Strict mode turns wrong-shaped fields into collected parse errors."""
        write_manifest("tagged.yaml", {"command": "ls", "tags": "not-a-list"})

        assert Compiler().compile(specs_dir).workflows[0].tags is None

        with pytest.raises(ManifestParseErrors) as exc_info:
            Compiler(CompilerConfig(strict_fields=True)).compile(specs_dir)

        assert isinstance(exc_info.value.errors[0], FieldTypeError)

    def test_compile_non_utf8_manifest(self, specs_dir: Path) -> None:
        """Undecodable bytes are a per-file parse error."""
        (specs_dir / "binary.yaml").write_bytes(b"command: \xff\xfe\n")

        with pytest.raises(ManifestParseErrors) as exc_info:
            Compiler().compile(specs_dir)

        assert "UTF-8" in exc_info.value.errors[0].reason

    def test_compile_unconstructible_value(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """A value YAML cannot build is collected like any other parse error."""
        write_manifest("good.yaml", {"name": "Good", "command": "true"})
        write_manifest("bad-date.yaml", "name: Release\ndescription: 2024-02-30\n")

        with pytest.raises(ManifestParseErrors) as exc_info:
            Compiler().compile(specs_dir)

        error = exc_info.value
        assert [e.file_path.name for e in error.errors] == ["bad-date.yaml"]
        assert error.compiled_workflows == ["Good"]


class TestCompilePaths:
    """Tests for Compiler.compile_paths()."""

    def test_order_independent(self, sample_specs: Path) -> None:
        """Supplying paths in any order yields the same collection."""
        compiler = Compiler()
        paths = compiler.discover(sample_specs)

        forward = compiler.compile_paths(paths)
        backward = compiler.compile_paths(list(reversed(paths)))

        assert forward == backward

    def test_repeated_paths_compiled_once(self, sample_specs: Path) -> None:
        """A path supplied twice does not count as a duplicate slug."""
        compiler = Compiler()
        paths = compiler.discover(sample_specs)

        collection = compiler.compile_paths(paths + paths)

        assert len(collection.workflows) == len(paths)

    def test_unreadable_path_is_fatal(self, specs_dir: Path) -> None:
        """A manifest that cannot be read aborts with ManifestIOError."""
        missing = specs_dir / "gone.yaml"

        with pytest.raises(ManifestIOError) as exc_info:
            Compiler().compile_paths([missing])

        assert exc_info.value.path == missing

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch, sample_specs: Path) -> None:
        """A run exceeding timeout_seconds fails instead of hanging."""
        compiler = Compiler(CompilerConfig(timeout_seconds=0.05, max_workers=1))
        original = Compiler.compile_manifest

        def slow_compile(self: Compiler, path: Path | str) -> Workflow:
            time.sleep(0.5)
            return original(self, path)

        monkeypatch.setattr(Compiler, "compile_manifest", slow_compile)

        with pytest.raises(CompilationTimeoutError) as exc_info:
            compiler.compile(sample_specs)

        assert exc_info.value.pending >= 1


class TestValidate:
    """Tests for Compiler.validate()."""

    def test_valid_tree_has_no_problems(self, sample_specs: Path) -> None:
        assert Compiler().validate(sample_specs) == []

    def test_reports_parse_errors_and_duplicates(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """validate() returns every problem instead of raising."""
        write_manifest("a/deploy.yaml", {"command": "deploy"})
        write_manifest("b/Deploy.yml", {"command": "deploy again"})
        write_manifest("broken.yaml", "name: [\n")
        write_manifest("fine.yaml", {"command": "ok"})

        problems = Compiler().validate(specs_dir)

        assert [(p.relative_to(specs_dir).as_posix(), type(e).__name__) for p, e in problems] == [
            ("b/Deploy.yml", "DuplicateSlugError"),
            ("broken.yaml", "ParseError"),
        ]

    def test_reports_unreadable_manifest(self, specs_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Per-file read failures are reported, not raised."""
        (specs_dir / "locked.yaml").write_text("command: ls\n")
        original = Path.read_text

        def failing_read(self: Path, *args: Any, **kwargs: Any) -> str:
            if self.name == "locked.yaml":
                raise PermissionError(13, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", failing_read)

        problems = Compiler().validate(specs_dir)

        assert len(problems) == 1
        assert isinstance(problems[0][1], ManifestIOError)

    def test_reports_unconstructible_value(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        write_manifest("good.yaml", {"command": "true"})
        write_manifest("bad-date.yaml", "description: 2024-02-30\n")

        problems = Compiler().validate(specs_dir)

        assert [(p.name, type(e).__name__) for p, e in problems] == [
            ("bad-date.yaml", "ParseError")
        ]

    def test_validate_errors_are_workflow_errors(
        self, specs_dir: Path, write_manifest: Callable[..., Path]
    ) -> None:
        write_manifest("bad.yaml", "[1, 2]\n")

        ((path, error),) = Compiler().validate(specs_dir)

        assert path.name == "bad.yaml"
        assert isinstance(error, ParseError)


class TestBuild:
    """Tests for Compiler.build()."""

    def test_build_writes_artifacts(self, sample_specs: Path, tmp_path: Path) -> None:
        """build() compiles and writes the three artifacts."""
        output_dir = tmp_path / "generated"

        result = Compiler().build(sample_specs, output_dir=output_dir)

        assert result.workflow_count == 3
        assert result.tag_count == 6
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "search-index.json",
            "types.ts",
            "workflows.ts",
        ]

    def test_build_uses_configured_output_dir(self, sample_specs: Path, tmp_path: Path) -> None:
        config = CompilerConfig(output_dir=str(tmp_path / "web"), json_schema_artifact_name="schema.json")

        result = Compiler(config).build(sample_specs)

        assert result.artifacts.json_schema_path == tmp_path / "web" / "schema.json"
        assert result.artifacts.json_schema_path.exists()

    def test_build_failure_writes_nothing(
        self, specs_dir: Path, write_manifest: Callable[..., Path], tmp_path: Path
    ) -> None:
        """A failed compilation leaves the output directory untouched."""
        write_manifest("ok.yaml", {"command": "ok"})
        write_manifest("bad.yaml", "command: [\n")
        output_dir = tmp_path / "generated"

        with pytest.raises(ManifestParseErrors):
            Compiler().build(specs_dir, output_dir=output_dir)

        assert not output_dir.exists()
