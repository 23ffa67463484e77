"""Command line entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from dockergen.crates import DependencyGraph, find_crates
from dockergen.dockerfile import (
    DockerfileOptions,
    _default_user,
    dockerfile_path,
    generate_dockerfile,
)

_VERSION = "0.1.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-dockerfile",
        description="Generate Dockerfile for your Rust project",
    )
    # cargo passes the subcommand name as the first argument
    parser.add_argument("ignore", nargs="?", help=argparse.SUPPRESS)
    parser.add_argument(
        "-b",
        "--builder-image",
        default="rust:latest",
        help="The builder image to use. Normally you would want to use rust:<tag>",
    )
    parser.add_argument(
        "-r",
        "--runner-image",
        default=None,
        help=(
            "The runner image to use if you want to create a final runner image with "
            "your binaries in it. If not given, a runner build phase will not be generated"
        ),
    )
    parser.add_argument(
        "-a", "--app-path", default="/app", help="The path where the binaries will be installed"
    )
    parser.add_argument("-u", "--user", default=None, help="The user to create inside docker")
    parser.add_argument("-c", "--cmd", default=None, help="The command to set for Dockerfile CMD")
    parser.add_argument(
        "-e", "--entrypoint", default=None, help="The entrypoint to set for Dockerfile ENTRYPOINT"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    return parser


def parse_args(argv: Sequence[str] | None) -> DockerfileOptions:
    """Parse command line arguments into Dockerfile options."""
    args = _build_parser().parse_args(argv)
    return DockerfileOptions(
        builder_image=args.builder_image,
        runner_image=args.runner_image,
        app_path=args.app_path,
        user=args.user if args.user is not None else _default_user(),
        cmd=args.cmd,
        entrypoint=args.entrypoint,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Write a Dockerfile for the project in the current directory."""
    options = parse_args(argv)
    try:
        root = Path.cwd()
        libs, bins = find_crates(root)
        graph = DependencyGraph.from_libs(libs)
        contents = generate_dockerfile(root, options, graph.build_order(), bins)
        dockerfile_path(root).write_text(contents)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())