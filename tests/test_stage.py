from importlib.machinery import ModuleSpec
from pathlib import Path

import pytest

from kinderbase.config import new_build_configuration, with_source_dir
from kinderbase.errors import CopyError, SourceLocationError
from kinderbase.observability import StructuredLogger
from kinderbase.stage import resolve_source_dir, stage_sources


def test_explicit_source_dir_is_used_verbatim() -> None:
    def find_spec(name: str) -> ModuleSpec | None:
        raise AssertionError("auto-detection must not run")

    config = new_build_configuration(with_source_dir("/tmp/fixtures/x"))

    assert resolve_source_dir(config, find_spec=find_spec) == Path("/tmp/fixtures/x")


def test_autodetect_uses_checkout_layout(tmp_path: Path) -> None:
    package_init = tmp_path / "checkout" / "src" / "kinderbase" / "__init__.py"
    package_init.parent.mkdir(parents=True)
    package_init.write_text("", encoding="utf-8")
    looked_up: list[str] = []

    def find_spec(name: str) -> ModuleSpec | None:
        looked_up.append(name)
        return ModuleSpec(name, loader=None, origin=str(package_init))

    resolved = resolve_source_dir(new_build_configuration(), find_spec=find_spec)

    assert looked_up == ["kinderbase"]
    assert resolved == (tmp_path / "checkout" / "images" / "base" / "docker").resolve()


def test_autodetect_fails_when_package_cannot_be_located() -> None:
    with pytest.raises(SourceLocationError) as excinfo:
        resolve_source_dir(new_build_configuration(), find_spec=lambda name: None)

    assert excinfo.value.code == "E_SOURCE_LOCATION"
    assert "--source" in (excinfo.value.hint or "")


def test_stage_copies_tree_preserving_structure(tmp_path: Path, image_sources: Path) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    logger = StructuredLogger()

    result = stage_sources(
        new_build_configuration(with_source_dir(str(image_sources))),
        workdir,
        logger=logger,
    )

    assert result == workdir
    assert (workdir / "Dockerfile").is_file()
    assert (workdir / "entrypoint" / "main.go").read_text(encoding="utf-8").startswith("package main")
    assert any(str(workdir) in record["message"] for record in logger.records_for_step("staging"))


def test_stage_wraps_missing_source_as_copy_error(tmp_path: Path) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    missing = tmp_path / "does-not-exist"

    with pytest.raises(CopyError) as excinfo:
        stage_sources(
            new_build_configuration(with_source_dir(str(missing))),
            workdir,
            logger=StructuredLogger(),
        )

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert excinfo.value.context["source"] == str(missing)


def test_stage_wraps_copy_primitive_failure(tmp_path: Path) -> None:
    def failing_copy(source: str | Path, destination: str | Path) -> None:
        raise PermissionError("permission denied")

    logger = StructuredLogger()
    with pytest.raises(CopyError) as excinfo:
        stage_sources(
            new_build_configuration(with_source_dir(str(tmp_path))),
            tmp_path / "work",
            logger=logger,
            copy=failing_copy,
        )

    assert "permission denied" in str(excinfo.value)
    assert logger.records[-1]["level"] == "error"
