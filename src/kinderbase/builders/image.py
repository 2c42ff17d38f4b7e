"""Builds and tags the base image with the container build tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kinderbase.errors import BuildStep, CommandError, ImageBuildError
from kinderbase.exec import CommandRunner, HostCommand, SubprocessRunner
from kinderbase.observability import StructuredLogger


@dataclass(slots=True)
class DockerImageBuilder:
    image: str
    tool: str = "docker"
    runner: CommandRunner = field(default_factory=SubprocessRunner)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    step: BuildStep = field(default=BuildStep.IMAGE_BUILD, init=False)

    def command(self, workdir: Path) -> HostCommand:
        # The staged directory is the whole build context.
        return HostCommand(argv=(self.tool, "build", "-t", self.image, str(workdir)))

    def build(self, workdir: Path) -> None:
        command = self.command(workdir)
        self._log("Starting Docker build ...")
        try:
            self.runner.run_with_echo(command)
        except CommandError as exc:
            self._log(f"Docker build Failed! {exc}", level="error")
            raise ImageBuildError(
                "Docker build failed.",
                returncode=exc.returncode,
                output=exc.output,
                hint=exc.hint or f"Check {self.tool} output and that its daemon is running.",
                context={
                    "operation": "build_image",
                    "command": " ".join(command.argv),
                    "image": self.image,
                    "returncode": "" if exc.returncode is None else str(exc.returncode),
                    "output": exc.output[-2000:],
                },
            ) from exc
        self._log("Docker build completed.")

    def _log(self, message: str, *, level: str = "info") -> None:
        self.logger.log(
            operation="build_image",
            step=self.step.value,
            level=level,
            message=message,
            extra={"image": self.image},
        )
