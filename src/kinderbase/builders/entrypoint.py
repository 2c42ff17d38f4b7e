"""Cross-compiles the node entrypoint binary with the Go toolchain."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from kinderbase.errors import BuildStep, CommandError, CompileError
from kinderbase.exec import CommandRunner, HostCommand, SubprocessRunner
from kinderbase.observability import StructuredLogger

ENTRYPOINT_GOOS = "linux"


def entrypoint_paths(workdir: Path) -> tuple[Path, Path]:
    """Return ``(source, output)`` for the entrypoint inside ``workdir``."""
    # The entrypoint only uses the go1 stdlib and is a single file.
    return workdir / "entrypoint" / "main.go", workdir / "entrypoint" / "entrypoint"


@dataclass(slots=True)
class EntrypointBuilder:
    arch: str
    go_cmd: str = "go"
    goos: str = ENTRYPOINT_GOOS
    runner: CommandRunner = field(default_factory=SubprocessRunner)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    step: BuildStep = field(default=BuildStep.COMPILE, init=False)

    def command(self, workdir: Path) -> HostCommand:
        source, output = entrypoint_paths(workdir)
        env = dict(os.environ)
        env["GOOS"] = self.goos
        env["GOARCH"] = self.arch
        return HostCommand(
            argv=(self.go_cmd, "build", "-o", str(output), str(source)),
            env=env,
        )

    def build(self, workdir: Path) -> None:
        command = self.command(workdir)
        self._log("Building entrypoint binary ...")
        try:
            self.runner.run_with_echo(command)
        except CommandError as exc:
            self._log(f"Entrypoint build Failed! {exc}", level="error")
            raise CompileError(
                "Entrypoint build failed.",
                returncode=exc.returncode,
                output=exc.output,
                hint=exc.hint or f"Check {self.go_cmd} output for details.",
                context={
                    "operation": "build_entrypoint",
                    "command": " ".join(command.argv),
                    "goos": self.goos,
                    "goarch": self.arch,
                    "returncode": "" if exc.returncode is None else str(exc.returncode),
                    "output": exc.output[-2000:],
                },
            ) from exc
        self._log("Entrypoint build completed.")

    def _log(self, message: str, *, level: str = "info") -> None:
        self.logger.log(
            operation="build_entrypoint",
            step=self.step.value,
            level=level,
            message=message,
            extra={"goos": self.goos, "goarch": self.arch},
        )
