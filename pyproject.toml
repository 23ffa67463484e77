[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dockergen"
version = "0.1.0"
description = "Generate a Dockerfile for a Cargo project or workspace"
requires-python = ">=3.11"
dependencies = []
keywords = ["cargo", "docker", "dockerfile", "generator", "rust"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dockergen = "dockergen.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dockergen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
