"""Public package entrypoint for the kind node base image builder."""

from .config import (
    DEFAULT_IMAGE,
    BuildConfiguration,
    Option,
    new_build_configuration,
    with_arch,
    with_go_cmd,
    with_image,
    with_source_dir,
)
from .errors import (
    BuildEnvironmentError,
    BuildStep,
    CommandError,
    CompileError,
    CopyError,
    ErrorCode,
    ImageBuildError,
    KinderBaseError,
    SourceLocationError,
)
from .pipeline import BaseImageBuild, BuildResult, PipelineState

__all__ = [
    "DEFAULT_IMAGE",
    "BaseImageBuild",
    "BuildConfiguration",
    "BuildEnvironmentError",
    "BuildResult",
    "BuildStep",
    "CommandError",
    "CompileError",
    "CopyError",
    "ErrorCode",
    "ImageBuildError",
    "KinderBaseError",
    "Option",
    "PipelineState",
    "SourceLocationError",
    "new_build_configuration",
    "with_arch",
    "with_go_cmd",
    "with_image",
    "with_source_dir",
]
