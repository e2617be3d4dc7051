"""Domain value types for binge."""

from binge.domain.layering import Compression, Container, Layering
from binge.domain.release import AssetRef, ReleaseDescriptor
from binge.domain.repo import RepositoryIdentity

__all__ = [
    "AssetRef",
    "Compression",
    "Container",
    "Layering",
    "ReleaseDescriptor",
    "RepositoryIdentity",
]
