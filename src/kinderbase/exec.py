"""Host command execution with live output echo."""

from __future__ import annotations

import subprocess
import sys
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import IO, Protocol, TextIO, cast

from kinderbase.errors import CommandError

OUTPUT_TAIL_LINES = 500


@dataclass(frozen=True, slots=True)
class HostCommand:
    """A program invocation on the host.

    ``env`` replaces the child environment entirely when set; ``None``
    inherits the current process environment.
    """

    argv: tuple[str, ...]
    env: Mapping[str, str] | None = None

    @property
    def program(self) -> str:
        return self.argv[0] if self.argv else ""


class CommandRunner(Protocol):
    def run_with_echo(self, command: HostCommand) -> None:
        """Run ``command`` to completion, echoing its combined output.

        Raises ``CommandError`` if the program cannot start or exits non-zero.
        """


@dataclass(slots=True)
class SubprocessRunner:
    """Runs host commands, echoing merged stdout/stderr to ``stream``.

    Only the last ``tail_lines`` lines of output are kept for error reporting.
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout)
    tail_lines: int = OUTPUT_TAIL_LINES

    def run_with_echo(self, command: HostCommand) -> None:
        try:
            process = subprocess.Popen(
                list(command.argv),
                env=dict(command.env) if command.env is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise CommandError(
                f"Failed to start `{command.program}`: {exc.strerror or exc}",
                argv=command.argv,
                returncode=None,
                hint=f"Ensure `{command.program}` is installed and available in PATH.",
            ) from exc

        tail: deque[str] = deque(maxlen=self.tail_lines)
        with process:
            try:
                for line in cast(IO[str], process.stdout):
                    tail.append(line)
                    self.stream.write(line)
                    self.stream.flush()
            except BaseException:
                # The child must not outlive an interrupted echo.
                process.kill()
                process.wait()
                raise
            returncode = process.wait()

        if returncode != 0:
            raise CommandError(
                f"`{command.program}` exited with status {returncode}.",
                argv=command.argv,
                returncode=returncode,
                output="".join(tail),
            )
