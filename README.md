# dockergen

`dockergen` writes a Dockerfile for a Cargo project or workspace. Each crate
it finds is built in two steps, first with only its `Cargo.toml` and then with
its sources, so dependency builds are cached in their own layers. After that
the binaries are copied into an application directory.

## How it works

Starting from the current directory, `dockergen` walks the tree in name
order and skips hidden entries (names starting with `.`). Every `lib.rs` file
it finds marks a library crate and every `main.rs` file a binary crate. The
crate directory is the file's grandparent, so `mycrate/src/lib.rs` gives the
crate `mycrate`.

It reads each library's `Cargo.toml` and looks for dependencies given with a
`path`. Libraries are built in dependency order, so a library is built before
the libraries that use it. Binaries are built after the libraries. If the
current directory is itself a binary crate, it is built last and becomes the
root of the build inside the image.

The result goes to `Dockerfile`. If a `Dockerfile` is already there, it goes
to `cargo-dockerfile.Dockerfile` instead, so your own file is never
overwritten.

## Installation

```
pip install .
```

## Usage

Run it from the root of your project:

```
dockergen
```

### Options

| Option | Default | Meaning |
| --- | --- | --- |
| `-b`, `--builder-image` | `rust:latest` | Image used for the build stage |
| `-r`, `--runner-image` | none | Image for a final runner stage; binaries are copied into it with `COPY --from=builder`. Without it, no runner stage is written and binaries are copied with `RUN cp` |
| `-a`, `--app-path` | `/app` | Directory where the binaries are installed |
| `-u`, `--user` | current user name | User created inside the image |
| `-c`, `--cmd` | none | Value for `CMD`, split on whitespace |
| `-e`, `--entrypoint` | none | Value for `ENTRYPOINT`, split on whitespace |
| `-V`, `--version` | | Print the version and exit |

A single positional argument is accepted and ignored, so the command can also
be started as a Cargo subcommand, which passes its own name first.

Example with a multi-stage build:

```
dockergen --runner-image debian:bookworm-slim --app-path /code --cmd "server --port 8080"
```

If a manifest cannot be read or parsed, or the Dockerfile cannot be written,
the command prints `Error: ...` to standard error and exits with status 1.

## Library use

```python
from pathlib import Path

from dockergen.crates import DependencyGraph, find_crates
from dockergen.dockerfile import DockerfileOptions, dockerfile_path, generate_dockerfile

root = Path.cwd()
libs, bins = find_crates(root)
graph = DependencyGraph.from_libs(libs)
options = DockerfileOptions(user="root")
text = generate_dockerfile(root, options, graph.build_order(), bins)
dockerfile_path(root).write_text(text)
```

- `dockergen.crates`: `find_crates`, `is_hidden`, `is_entry_of_interest`,
  `cargo_toml_path` and `DependencyGraph` with `from_libs`,
  `topologically_sorted` (each library before its dependencies) and
  `build_order` (the reverse, dependencies first).
- `dockergen.dockerfile`: `DockerfileOptions`, `CrateType`,
  `generate_dockerfile` and `dockerfile_path`.
- `dockergen.cli`: `parse_args` and `main`.

## What it does not do

`dockergen` only writes the Dockerfile; it does not run Docker or Cargo.
Only path dependencies between library crates are taken into account, and
libraries that depend on each other in a cycle are left out of the build
order.

## Running the tests

```
pip install .[test]
pytest
```