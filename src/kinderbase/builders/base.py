"""Typed interface for the tool-driven build steps."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from kinderbase.errors import BuildStep


class StepBuilder(Protocol):
    step: BuildStep

    def build(self, workdir: Path) -> None:
        """Run this step against the staged build directory."""
