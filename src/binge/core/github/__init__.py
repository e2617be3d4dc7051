"""GitHub API access."""

from binge.core.github.client import ReleaseClient

__all__ = ["ReleaseClient"]
