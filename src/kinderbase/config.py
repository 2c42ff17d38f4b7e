"""Build configuration for the kind node base image."""

from __future__ import annotations

import platform
from collections.abc import Callable
from dataclasses import dataclass, replace

DEFAULT_IMAGE = "kindest/base:latest"
DEFAULT_GO_CMD = "go"

# platform.machine() spellings mapped to GOARCH names.
_GOARCH_BY_MACHINE: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def host_arch() -> str:
    """Return the host CPU architecture in GOARCH form."""
    machine = platform.machine().lower()
    return _GOARCH_BY_MACHINE.get(machine, machine)


@dataclass(frozen=True, slots=True)
class BuildConfiguration:
    source_dir: str = ""
    image: str = DEFAULT_IMAGE
    go_cmd: str = DEFAULT_GO_CMD
    arch: str = ""


Option = Callable[[BuildConfiguration], BuildConfiguration]


def with_source_dir(source_dir: str) -> Option:
    """Use ``source_dir`` for image sources instead of auto-detecting them."""

    def apply(config: BuildConfiguration) -> BuildConfiguration:
        return replace(config, source_dir=source_dir)

    return apply


def with_image(image: str) -> Option:
    """Tag the built image as ``image`` (``name:tag``)."""

    def apply(config: BuildConfiguration) -> BuildConfiguration:
        return replace(config, image=image)

    return apply


def with_go_cmd(go_cmd: str) -> Option:
    def apply(config: BuildConfiguration) -> BuildConfiguration:
        return replace(config, go_cmd=go_cmd)

    return apply


def with_arch(arch: str) -> Option:
    def apply(config: BuildConfiguration) -> BuildConfiguration:
        return replace(config, arch=arch)

    return apply


def new_build_configuration(*options: Option) -> BuildConfiguration:
    """Apply defaults, then each option in order. Later options win."""
    config = BuildConfiguration(
        image=DEFAULT_IMAGE,
        go_cmd=DEFAULT_GO_CMD,
        arch=host_arch(),
    )
    for option in options:
        config = option(config)
    return config
