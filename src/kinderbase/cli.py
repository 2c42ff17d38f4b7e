"""Command line entrypoint for building the kind node base image.

Usage:
    kinder-base build [--source DIR] [--image NAME:TAG] [--go-cmd CMD] [--arch ARCH]
"""

from __future__ import annotations

import argparse
import signal
import sys
from collections.abc import Sequence
from types import FrameType

from kinderbase.config import (
    DEFAULT_IMAGE,
    Option,
    new_build_configuration,
    with_arch,
    with_go_cmd,
    with_image,
    with_source_dir,
)
from kinderbase.errors import KinderBaseError
from kinderbase.observability import StructuredLogger
from kinderbase.pipeline import BaseImageBuild


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kinder-base", description="kind node base image builder")
    sub = parser.add_subparsers(dest="command", required=True)

    build_p = sub.add_parser("build", help="Build the kind node base image")
    build_p.add_argument("--source", help="Path to the base image sources (auto-detected if unset)")
    build_p.add_argument("--image", help=f"Name:tag of the resulting image (default {DEFAULT_IMAGE})")
    build_p.add_argument("--go-cmd", help="Go toolchain command used for the entrypoint")
    build_p.add_argument("--arch", help="GOARCH to cross-compile the entrypoint for")
    build_p.add_argument("--log-json", help="Write structured build logs to this file")
    return parser


def options_from_args(args: argparse.Namespace) -> list[Option]:
    options: list[Option] = []
    if args.source:
        options.append(with_source_dir(args.source))
    if args.image:
        options.append(with_image(args.image))
    if args.go_cmd:
        options.append(with_go_cmd(args.go_cmd))
    if args.arch:
        options.append(with_arch(args.arch))
    return options


def cmd_build(args: argparse.Namespace) -> int:
    logger = StructuredLogger(stream=sys.stderr)
    build = BaseImageBuild(
        config=new_build_configuration(*options_from_args(args)),
        logger=logger,
    )
    try:
        result = build.build()
    except KinderBaseError as exc:
        print(f"error [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.log_json:
            logger.to_json_lines(args.log_json)
    print(f"Built {result.image}")
    return 0


def _terminate(signum: int, frame: FrameType | None) -> None:
    # Unwinds through BaseImageBuild.build() so its build directory is removed.
    raise SystemExit(128 + signum)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        if args.command == "build":
            return cmd_build(args)
        return 2
    finally:
        signal.signal(signal.SIGTERM, previous)


if __name__ == "__main__":
    sys.exit(main())
