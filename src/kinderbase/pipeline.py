"""Base image build pipeline: stage sources, compile the entrypoint, build the image."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from kinderbase.builders import DockerImageBuilder, EntrypointBuilder, StepBuilder
from kinderbase.config import BuildConfiguration, new_build_configuration
from kinderbase.errors import BuildEnvironmentError, BuildStep, KinderBaseError
from kinderbase.exec import CommandRunner, SubprocessRunner
from kinderbase.fs import temp_dir
from kinderbase.observability import StructuredLogger
from kinderbase.stage import stage_sources

WORKDIR_PREFIX = "kind-base-image"


class PipelineState(StrEnum):
    IDLE = "idle"
    STAGING = "staging"
    COMPILING = "compiling"
    IMAGE_BUILDING = "image-building"
    DONE = "done"
    FAILED = "failed"


_STATE_FOR_STEP: dict[BuildStep, PipelineState] = {
    BuildStep.STAGING: PipelineState.STAGING,
    BuildStep.COMPILE: PipelineState.COMPILING,
    BuildStep.IMAGE_BUILD: PipelineState.IMAGE_BUILDING,
}


@dataclass(frozen=True, slots=True)
class BuildResult:
    image: str
    steps: tuple[BuildStep, ...]


@dataclass(slots=True)
class BaseImageBuild:
    """Builds the kind node base image described by ``config``.

    Each ``build()`` call stages into its own temporary directory, which is
    removed before the call returns whether or not the build succeeded.
    """

    config: BuildConfiguration = field(default_factory=new_build_configuration)
    runner: CommandRunner = field(default_factory=SubprocessRunner)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    tool: str = "docker"
    workdir: Path | None = field(init=False, default=None)
    _state: PipelineState = field(init=False, default=PipelineState.IDLE, repr=False)

    @property
    def state(self) -> PipelineState:
        return self._state

    def steps(self) -> tuple[StepBuilder, ...]:
        return (
            EntrypointBuilder(
                arch=self.config.arch,
                go_cmd=self.config.go_cmd,
                runner=self.runner,
                logger=self.logger,
            ),
            DockerImageBuilder(
                image=self.config.image,
                tool=self.tool,
                runner=self.runner,
                logger=self.logger,
            ),
        )

    def build(self) -> BuildResult:
        self._state = PipelineState.STAGING
        self.workdir = None
        try:
            workdir = temp_dir(WORKDIR_PREFIX)
        except OSError as exc:
            self._fail(BuildStep.STAGING, exc)
            raise BuildEnvironmentError(
                f"Failed to create build directory: {exc}",
                hint="Check free space and permissions of the temporary directory.",
                context={"operation": "create_workdir", "prefix": WORKDIR_PREFIX},
            ) from exc

        self.workdir = workdir
        completed: list[BuildStep] = []
        try:
            try:
                stage_sources(self.config, workdir, logger=self.logger)
            except KinderBaseError as exc:
                self._fail(BuildStep.STAGING, exc)
                raise
            completed.append(BuildStep.STAGING)

            for builder in self.steps():
                self._state = _STATE_FOR_STEP[builder.step]
                try:
                    builder.build(workdir)
                except KinderBaseError as exc:
                    self._fail(builder.step, exc)
                    raise
                completed.append(builder.step)
        except BaseException as exc:
            if self._state is not PipelineState.FAILED:
                self._fail(None, exc)
            raise
        finally:
            self._remove_workdir(workdir)

        self._state = PipelineState.DONE
        return BuildResult(image=self.config.image, steps=tuple(completed))

    def _fail(self, step: BuildStep | None, error: BaseException) -> None:
        self._state = PipelineState.FAILED
        extra = {"error": type(error).__name__}
        if isinstance(error, KinderBaseError):
            extra["code"] = error.code
        self.logger.log(
            operation="build",
            step=step.value if step is not None else None,
            level="error",
            message="Base image build failed.",
            extra=extra,
        )

    def _remove_workdir(self, workdir: Path) -> None:
        try:
            shutil.rmtree(workdir)
        except OSError as exc:
            self.logger.log(
                operation="cleanup",
                step=None,
                level="error",
                message=f"Failed to remove build directory {workdir}: {exc}",
            )
