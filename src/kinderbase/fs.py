"""Filesystem primitives used while staging image sources."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path


def temp_dir(prefix: str) -> Path:
    """Create a fresh, uniquely named temporary directory. Caller removes it."""
    return Path(tempfile.mkdtemp(prefix=prefix))


def copy_tree(source: str | Path, destination: str | Path) -> None:
    """Recursively copy the contents of ``source`` into ``destination``.

    ``destination`` may already exist; symlinks are copied as links.
    """
    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
