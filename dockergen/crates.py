"""Discovery of crates in a project tree and ordering of library crates."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

CARGO_TOML = "Cargo.toml"
MAIN_RS = "main.rs"
LIB_RS = "lib.rs"


def is_hidden(name: str) -> bool:
    """Return True if a directory entry name denotes a hidden entry."""
    return name.startswith(".")


def is_entry_of_interest(name: str) -> bool:
    """Return True if the file name marks a crate root (main.rs or lib.rs)."""
    return name in (MAIN_RS, LIB_RS)


def cargo_toml_path(crate_dir: str | os.PathLike[str]) -> str:
    """Return the path of the manifest inside a crate directory."""
    return str(Path(crate_dir) / CARGO_TOML)


def _walk(root: Path) -> Iterator[Path]:
    """Yield entries below ``root`` depth first, skipping hidden ones."""
    try:
        entries = sorted(os.scandir(root), key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        if is_hidden(entry.name):
            continue
        path = Path(entry.path)
        yield path
        try:
            descend = entry.is_dir(follow_symlinks=False)
        except OSError:
            descend = False
        if descend:
            yield from _walk(path)


def find_crates(root_dir: str | os.PathLike[str]) -> tuple[list[Path], list[Path]]:
    """Find library and binary crate directories under ``root_dir``.

    A crate directory is the grandparent of a ``lib.rs`` or ``main.rs`` file.
    Returns ``(libs, bins)``.
    """
    root = Path(root_dir)
    if is_hidden(root.name):
        return [], []
    libs: list[Path] = []
    bins: list[Path] = []
    for path in _walk(root):
        if not (is_entry_of_interest(path.name) and path.is_file()):
            continue
        crate_dir = path.parent.parent
        (libs if path.name == LIB_RS else bins).append(crate_dir)
    return libs, bins


def _path_dependencies(manifest: dict) -> Iterator[str]:
    dependencies = manifest.get("dependencies", {})
    if not isinstance(dependencies, dict):
        return
    for detail in dependencies.values():
        if isinstance(detail, dict):
            path = detail.get("path")
            if isinstance(path, str):
                yield path


@dataclass
class DependencyGraph:
    """Dependencies between library crates, as edges of indices into ``libs``."""

    libs: list[Path]
    edges: list[tuple[int, int]] = field(default_factory=list)
    index_of: dict[Path, int] = field(default_factory=dict)

    @classmethod
    def from_libs(cls, libs: Iterable[str | os.PathLike[str]]) -> DependencyGraph:
        """Build the graph by reading each library's manifest.

        Raises OSError if a manifest cannot be read and
        tomllib.TOMLDecodeError if it is not valid TOML.
        """
        lib_paths = [Path(lib) for lib in libs]
        index_of = {path: i for i, path in enumerate(lib_paths)}
        edges: list[tuple[int, int]] = []
        for i, lib in enumerate(lib_paths):
            with open(cargo_toml_path(lib), "rb") as handle:
                manifest = tomllib.load(handle)
            for dep in _path_dependencies(manifest):
                try:
                    full_path = (lib / dep).resolve(strict=True)
                except OSError:
                    continue
                index = index_of.get(full_path)
                if index is not None:
                    edges.append((i, index))
        return cls(lib_paths, edges, index_of)

    def topologically_sorted(self) -> list[Path]:
        """Return libraries ordered so that each comes before its dependencies."""
        incoming = [0] * len(self.libs)
        for _, to in self.edges:
            incoming[to] += 1
        stack = [self.libs[i] for i, count in enumerate(incoming) if count == 0]
        ordered: list[Path] = []
        while stack:
            path = stack.pop()
            ordered.append(path)
            path_index = self.index_of[path]
            for dep_index in (to for frm, to in self.edges if frm == path_index):
                incoming[dep_index] -= 1
                if incoming[dep_index] == 0:
                    stack.append(self.libs[dep_index])
        return ordered

    def build_order(self) -> Sequence[Path]:
        """Return libraries with every dependency before its dependents."""
        return list(reversed(self.topologically_sorted()))