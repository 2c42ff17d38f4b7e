"""Staging of base image sources into a build directory.

When no source directory is configured the sources are located relative to
the ``kinderbase`` development checkout: the package lives in
``<checkout>/src/kinderbase`` and the image sources in
``<checkout>/images/base/docker``. Installed (non-editable) copies of the
package have no such tree, so auto-detection only works from a checkout.
"""

from __future__ import annotations

import importlib.util
from collections.abc import Callable
from importlib.machinery import ModuleSpec
from pathlib import Path

from kinderbase.config import BuildConfiguration
from kinderbase.errors import BuildStep, CopyError, SourceLocationError
from kinderbase.fs import copy_tree
from kinderbase.observability import StructuredLogger

SOURCE_PACKAGE = "kinderbase"
SOURCE_SUBPATH = ("images", "base", "docker")

FindSpec = Callable[[str], ModuleSpec | None]
CopyTree = Callable[[str | Path, str | Path], None]


def resolve_source_dir(
    config: BuildConfiguration,
    *,
    find_spec: FindSpec = importlib.util.find_spec,
) -> Path:
    if config.source_dir:
        return Path(config.source_dir)
    return _autodetect_source_dir(find_spec)


def stage_sources(
    config: BuildConfiguration,
    workdir: Path,
    *,
    logger: StructuredLogger,
    copy: CopyTree = copy_tree,
    find_spec: FindSpec = importlib.util.find_spec,
) -> Path:
    """Populate ``workdir`` with the image sources and return it."""
    source_dir = resolve_source_dir(config, find_spec=find_spec)
    try:
        copy(source_dir, workdir)
    except OSError as exc:
        logger.log(
            operation="stage_sources",
            step=BuildStep.STAGING.value,
            level="error",
            message=f"Failed to copy sources to build dir: {exc}",
            extra={"source": str(source_dir), "destination": str(workdir)},
        )
        raise CopyError(
            f"Failed to copy sources to build dir: {exc}",
            hint="Check that the source directory exists and is readable.",
            context={
                "operation": "stage_sources",
                "source": str(source_dir),
                "destination": str(workdir),
            },
        ) from exc

    logger.log(
        operation="stage_sources",
        step=BuildStep.STAGING.value,
        message=f"Building base image in: {workdir}",
        extra={"source": str(source_dir)},
    )
    return workdir


def _autodetect_source_dir(find_spec: FindSpec) -> Path:
    try:
        spec = find_spec(SOURCE_PACKAGE)
    except (ImportError, ValueError) as exc:
        raise _source_location_error(str(exc)) from exc
    if spec is None or spec.origin is None:
        raise _source_location_error(f"package `{SOURCE_PACKAGE}` not found")

    package_dir = Path(spec.origin).resolve().parent
    checkout_root = package_dir.parent.parent
    return checkout_root.joinpath(*SOURCE_SUBPATH)


def _source_location_error(reason: str) -> SourceLocationError:
    return SourceLocationError(
        "Failed to locate sources.",
        hint="Pass an explicit source directory (--source) when not running from a checkout.",
        context={"operation": "resolve_source_dir", "package": SOURCE_PACKAGE, "reason": reason},
    )
