"""Classification of how a release asset's bytes are wrapped.

A layering is the pair (compression, container). Both sides are closed
enums and the pair spans the full product space, even though only some
combinations show up in real release assets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Compression(Enum):
    """Stream compression applied to the asset."""

    NONE = "none"
    GZIP = "gzip"
    XZ = "xz"
    ZSTD = "zstd"


class Container(Enum):
    """Archive container wrapping the executable, if any."""

    NONE = "none"
    ZIP = "zip"
    TAR = "tar"


# Final extension -> compression, for the suffix-strip classifier
COMPRESSION_EXTENSIONS: dict[str, Compression] = {
    "gz": Compression.GZIP,
    "xz": Compression.XZ,
    "zst": Compression.ZSTD,
}


@dataclass(slots=True, frozen=True)
class Layering:
    """Compression and container of a release asset."""

    compression: Compression = Compression.NONE
    container: Container = Container.NONE

    @property
    def is_bare(self) -> bool:
        """True when the asset is the executable itself."""
        return self.container is Container.NONE

    def __str__(self) -> str:
        return f"({self.compression.value}, {self.container.value})"
