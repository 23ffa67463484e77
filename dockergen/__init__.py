"""Generate Dockerfiles for Cargo projects and workspaces."""

__version__ = "0.1.0"
__all__ = ["__version__"]