"""Generation of Dockerfile contents for a set of crates."""

from __future__ import annotations

import enum
import getpass
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from dockergen.crates import CARGO_TOML

_ASCII_WHITESPACE = re.compile(r"[ \t\n\x0c\r]+")


class CrateType(enum.Enum):
    LIBRARY = "--lib"
    BINARY = "--bin"


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "unknown"


@dataclass
class DockerfileOptions:
    """Settings that shape the generated Dockerfile."""

    builder_image: str = "rust:latest"
    runner_image: str | None = None
    app_path: str = "/app"
    user: str = field(default_factory=_default_user)
    cmd: str | None = None
    entrypoint: str | None = None


def dockerfile_path(root_dir: str | os.PathLike[str]) -> Path:
    """Return where to write the Dockerfile, avoiding an existing one."""
    path = Path(root_dir) / "Dockerfile"
    if path.exists():
        path = Path(root_dir) / "cargo-dockerfile.Dockerfile"
    return path


def _relative(path: Path, root: Path) -> str:
    rel = path.relative_to(root)
    return "" if rel == Path(".") else str(rel)


def _crate_build(docker_root_dir: str, name: str, relative_path: str, crate_type: CrateType) -> str:
    if crate_type is CrateType.BINARY:
        extra_rm = f"./target/release/deps/{name.replace('-', '_')}*"
    else:
        extra_rm = ""
    prefix = relative_path or "."
    return (
        f"\nWORKDIR {docker_root_dir}\n"
        f"\nRUN USER=root cargo new {crate_type.value} {name}\n"
        f"WORKDIR ./{name}\n"
        f"COPY {prefix}/{CARGO_TOML} ./{CARGO_TOML}\n"
        "RUN cargo build --release\n"
        f"RUN rm src/*.rs {extra_rm}\n"
        f"ADD {prefix} ./\n"
        "RUN cargo build --release\n"
    )


def _exec_form(instruction: str, command: str) -> str:
    parts = ", ".join(f'"{part}"' for part in _ASCII_WHITESPACE.split(command) if part)
    return f"\n{instruction} [{parts}]\n"


def generate_dockerfile(
    root_dir: str | os.PathLike[str],
    options: DockerfileOptions,
    libs: Iterable[str | os.PathLike[str]],
    bins: Iterable[str | os.PathLike[str]],
) -> str:
    """Return Dockerfile text building ``libs`` in order, then ``bins``."""
    root = Path(root_dir)
    lib_paths = [Path(lib) for lib in libs]
    bin_paths = [Path(b) for b in bins]
    parts = [f"FROM {options.builder_image} as builder\n"]

    root_bin = next((b for b in bin_paths if str(b) == str(root)), None)
    if root_bin is not None:
        parts.append(f"RUN USER=root cargo new --bin {root_bin.name}\n")
        docker_root_dir = f"/{root_bin.name}"
    else:
        docker_root_dir = "/"

    crates = [(lib, CrateType.LIBRARY) for lib in lib_paths]
    crates += [(b, CrateType.BINARY) for b in bin_paths if b != root_bin]
    for path, crate_type in crates:
        parts.append(_crate_build(docker_root_dir, path.name, _relative(path, root), crate_type))

    if root_bin is not None:
        bin_deps = root_bin.name.replace("-", "_")
        parts.append(
            f"\nWORKDIR {docker_root_dir}\n"
            f"\nCOPY ./{CARGO_TOML} ./{CARGO_TOML}\n"
            "RUN cargo build --release\n"
            f"RUN rm src/*.rs ./target/release/deps/{bin_deps}*\n"
            "ADD . ./\n"
            "RUN cargo build --release\n"
        )

    if options.runner_image is not None:
        parts.append(f"\nFROM {options.runner_image}")
        copy_cmd = "COPY --from=builder"
    else:
        copy_cmd = "RUN cp"

    parts.append(
        f"\nARG APP={options.app_path}\n"
        f"ARG APP_USER={options.user}\n"
        "\nRUN groupadd $APP_USER && useradd -g $APP_USER $APP_USER && mkdir -p $APP\n"
    )
    for path in bin_paths:
        name = path.name
        prefix = _relative(path, root)
        parts.append(
            f"{copy_cmd} {docker_root_dir}/{prefix}/target/release/{name} $APP/{name}\n"
        )
    parts.append("\nUSER $USER\nWORKDIR $APP\n    ")

    if options.entrypoint is not None:
        parts.append(_exec_form("ENTRYPOINT", options.entrypoint))
    if options.cmd is not None:
        parts.append(_exec_form("CMD", options.cmd))
    return "".join(parts)