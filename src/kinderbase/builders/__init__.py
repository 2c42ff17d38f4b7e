"""Tool-driven build steps run against the staged build directory."""

from .base import StepBuilder
from .entrypoint import EntrypointBuilder, entrypoint_paths
from .image import DockerImageBuilder

__all__ = [
    "DockerImageBuilder",
    "EntrypointBuilder",
    "StepBuilder",
    "entrypoint_paths",
]
