"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from kinderbase.errors import CommandError
from kinderbase.exec import HostCommand


@dataclass(slots=True)
class RecordingRunner:
    """Runner double that records commands and fails on request."""

    failures: dict[str, tuple[int | None, str]] = field(default_factory=dict)
    commands: list[HostCommand] = field(default_factory=list)
    existing_paths: list[bool] = field(default_factory=list)

    def fail(self, program: str, *, returncode: int | None = 1, output: str = "") -> None:
        self.failures[program] = (returncode, output)

    def programs(self) -> list[str]:
        return [command.program for command in self.commands]

    def run_with_echo(self, command: HostCommand) -> None:
        self.commands.append(command)
        # Last argv entry is the entrypoint source or the build context.
        self.existing_paths.append(Path(command.argv[-1]).exists())
        if command.program in self.failures:
            returncode, output = self.failures[command.program]
            raise CommandError(
                f"`{command.program}` failed.",
                argv=command.argv,
                returncode=returncode,
                output=output,
            )


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def image_sources(tmp_path: Path) -> Path:
    """A minimal base image source tree."""
    root = tmp_path / "images" / "base" / "docker"
    (root / "entrypoint").mkdir(parents=True)
    (root / "entrypoint" / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    (root / "Dockerfile").write_text("FROM scratch\nCOPY entrypoint/entrypoint /usr/local/bin/\n", encoding="utf-8")
    return root
