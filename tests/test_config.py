import dataclasses

import pytest

from kinderbase.config import (
    DEFAULT_GO_CMD,
    DEFAULT_IMAGE,
    BuildConfiguration,
    host_arch,
    new_build_configuration,
    with_arch,
    with_go_cmd,
    with_image,
    with_source_dir,
)


def test_defaults_apply_without_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("kinderbase.config.platform.machine", lambda: "x86_64")

    config = new_build_configuration()

    assert config == BuildConfiguration(
        source_dir="",
        image="kindest/base:latest",
        go_cmd=DEFAULT_GO_CMD,
        arch="amd64",
    )
    assert config.image == DEFAULT_IMAGE


def test_options_override_defaults() -> None:
    config = new_build_configuration(
        with_source_dir("/src/images/base/docker"),
        with_image("example/base:v1"),
        with_go_cmd("/usr/local/go/bin/go"),
        with_arch("arm64"),
    )

    assert config.source_dir == "/src/images/base/docker"
    assert config.image == "example/base:v1"
    assert config.go_cmd == "/usr/local/go/bin/go"
    assert config.arch == "arm64"


def test_last_option_for_a_field_wins_and_others_keep_defaults() -> None:
    config = new_build_configuration(
        with_image("first:1"),
        with_source_dir("/a"),
        with_image("second:2"),
        with_source_dir("/b"),
    )

    assert config.image == "second:2"
    assert config.source_dir == "/b"
    assert config.go_cmd == DEFAULT_GO_CMD
    assert config.arch == host_arch()


def test_empty_values_are_accepted_without_validation() -> None:
    config = new_build_configuration(with_image(""))

    assert config.image == ""


def test_configuration_is_immutable_and_options_do_not_mutate_input() -> None:
    base = new_build_configuration()
    updated = with_image("other:tag")(base)

    assert base.image == DEFAULT_IMAGE
    assert updated.image == "other:tag"
    with pytest.raises(dataclasses.FrozenInstanceError):
        base.image = "mutated"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("machine", "expected"),
    [
        ("x86_64", "amd64"),
        ("AMD64", "amd64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("ppc64le", "ppc64le"),
        ("riscv64", "riscv64"),
    ],
)
def test_host_arch_uses_goarch_names(
    monkeypatch: pytest.MonkeyPatch,
    machine: str,
    expected: str,
) -> None:
    monkeypatch.setattr("kinderbase.config.platform.machine", lambda: machine)

    assert host_arch() == expected
