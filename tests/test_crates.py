import tomllib
from pathlib import Path

import pytest

from dockergen.crates import (
    DependencyGraph,
    cargo_toml_path,
    find_crates,
    is_entry_of_interest,
    is_hidden,
)


def _make_crate(directory: Path, name: str, kind: str = "bin", deps: str = "") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "Cargo.toml").write_text(
        f'[package]\nname = "{name}"\nversion = "0.1.0"\nedition = "2021"\n\n'
        f"[dependencies]\n{deps}"
    )
    (directory / "src").mkdir(exist_ok=True)
    filename = "main.rs" if kind == "bin" else "lib.rs"
    (directory / "src" / filename).write_text("")
    return directory


def test_is_hidden():
    assert is_hidden(".git")
    assert not is_hidden("src")


def test_is_entry_of_interest():
    assert is_entry_of_interest("main.rs")
    assert is_entry_of_interest("lib.rs")
    assert not is_entry_of_interest("mod.rs")


def test_cargo_toml_path():
    assert cargo_toml_path(Path("a") / "b") == str(Path("a") / "b" / "Cargo.toml")


def test_find_crates_basic_example(tmp_path):
    root = _make_crate(tmp_path / "basic", "cargo-dockerfile-basic")
    libs, bins = find_crates(root)
    assert libs == []
    assert bins == [root]


def test_find_crates_workspace(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    core = _make_crate(root / "core", "core", kind="lib")
    app = _make_crate(root / "app", "app")
    hidden = _make_crate(root / ".cache" / "x", "x", kind="lib")
    (root / "weird" / "src" / "lib.rs").mkdir(parents=True)
    libs, bins = find_crates(root)
    assert libs == [core]
    assert bins == [app]
    assert hidden not in libs


def test_find_crates_hidden_root(tmp_path):
    root = _make_crate(tmp_path / ".hidden", "h")
    assert find_crates(root) == ([], [])


def test_graph_orders_chain(tmp_path):
    root = tmp_path.resolve()
    a = _make_crate(root / "a", "a", "lib", 'b = { path = "../b" }\n')
    b = _make_crate(root / "b", "b", "lib", 'c = { path = "../c" }\n')
    c = _make_crate(root / "c", "c", "lib")
    graph = DependencyGraph.from_libs([a, b, c])
    assert sorted(graph.edges) == [(0, 1), (1, 2)]
    assert graph.topologically_sorted() == [a, b, c]
    assert graph.build_order() == [c, b, a]


def test_graph_ignores_non_path_and_missing_deps(tmp_path):
    root = tmp_path.resolve()
    a = _make_crate(
        root / "a",
        "a",
        "lib",
        'serde = "1"\nmissing = { path = "../nope" }\nanyhow = { version = "1" }\n',
    )
    b = _make_crate(root / "b", "b", "lib")
    graph = DependencyGraph.from_libs([a, b])
    assert graph.edges == []
    assert set(graph.topologically_sorted()) == {a, b}


def test_graph_every_lib_precedes_its_dependencies(tmp_path):
    root = tmp_path.resolve()
    a = _make_crate(root / "a", "a", "lib", 'b = { path = "../b" }\nc = { path = "../c" }\n')
    b = _make_crate(root / "b", "b", "lib", 'c = { path = "../c" }\n')
    c = _make_crate(root / "c", "c", "lib")
    graph = DependencyGraph.from_libs([c, b, a])
    order = graph.topologically_sorted()
    assert len(order) == 3
    for frm, to in graph.edges:
        assert order.index(graph.libs[frm]) < order.index(graph.libs[to])


def test_graph_empty():
    graph = DependencyGraph.from_libs([])
    assert graph.topologically_sorted() == []


def test_graph_invalid_manifest(tmp_path):
    lib = _make_crate(tmp_path / "bad", "bad", "lib")
    (lib / "Cargo.toml").write_text("[package\n")
    with pytest.raises(tomllib.TOMLDecodeError):
        DependencyGraph.from_libs([lib])


def test_graph_missing_manifest(tmp_path):
    with pytest.raises(FileNotFoundError):
        DependencyGraph.from_libs([tmp_path / "absent"])