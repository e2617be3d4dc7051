"""Release asset selection for the running platform.

Release assets are an unstructured list of filenames. An asset qualifies
when its name carries the OS and CPU architecture as adjacent
dash-delimited tokens in either order, e.g. ``tool-x86_64-unknown-linux-gnu``
or ``tool-linux-amd64``. The first qualifying asset in the publisher's order
wins; there is no scoring.
"""

from __future__ import annotations

import platform
import re
import sys
from collections.abc import Iterable
from pathlib import PurePosixPath

from binge.constants import IGNORED_ASSET_EXTENSIONS
from binge.domain import AssetRef, Compression, Container, Layering
from binge.domain.layering import COMPRESSION_EXTENSIONS
from binge.logger import get_logger

logger = get_logger(__name__)

# The only architecture with aliases. Publishers name 64-bit x86 builds in
# three ways; every other architecture is matched by its canonical name.
X86_64 = "x86_64"
X86_64_ALIASES = ("x86_64", "amd64", "x64")

# platform.machine() spellings folded to canonical names
_MACHINE_NAMES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
}


def current_platform() -> tuple[str, str]:
    """Return the running ``(arch, os)`` in canonical form.

    Example:
        >>> current_platform()
        ('x86_64', 'linux')

    """
    machine = platform.machine().lower()
    arch = _MACHINE_NAMES.get(machine, machine)
    os_name = sys.platform
    if os_name.startswith("linux"):
        os_name = "linux"
    elif os_name == "win32":
        os_name = "windows"
    return arch, os_name


def _arch_pattern(arch: str) -> str:
    if arch == X86_64:
        return "(?:" + "|".join(map(re.escape, X86_64_ALIASES)) + ")"
    return re.escape(arch)


def build_pattern(arch: str, os_name: str) -> re.Pattern[str]:
    """Compile the adjacency pattern for one arch/OS pair.

    Matches ``<arch>-[tokens]<os>`` or ``[tokens]<os>-<arch>`` anywhere in
    the filename, where the optional tokens are word characters and dashes.
    """
    arch_re = _arch_pattern(arch)
    os_re = re.escape(os_name)
    return re.compile(rf"{arch_re}-[\w-]*{os_re}|[\w-]*{os_re}-{arch_re}")


def classify_layering(filename: str) -> Layering:
    """Classify compression and container from the filename suffix chain.

    Examples:
        >>> classify_layering("tool.tar.gz")
        Layering(compression=<Compression.GZIP: 'gzip'>, ...)
        >>> classify_layering("tool.zip").container
        <Container.ZIP: 'zip'>

    """
    path = PurePosixPath(filename)
    extension = path.suffix.lower().lstrip(".")

    if extension == "zip":
        return Layering(Compression.NONE, Container.ZIP)

    compression = COMPRESSION_EXTENSIONS.get(extension)
    if compression is None:
        return Layering()

    # Re-read the extension left behind once the compression one is stripped
    inner = path.with_suffix("").suffix.lower().lstrip(".")
    container = Container.TAR if inner == "tar" else Container.NONE

    return Layering(compression, container)


def _is_ignored(filename: str) -> bool:
    extension = PurePosixPath(filename).suffix.lower().lstrip(".")
    return extension in IGNORED_ASSET_EXTENSIONS


def select(
    candidates: Iterable[AssetRef],
    arch: str,
    os_name: str,
) -> tuple[AssetRef, Layering] | None:
    """Pick the install candidate for a platform.

    Args:
        candidates: Release assets in publisher order
        arch: Canonical CPU architecture, e.g. ``x86_64`` or ``aarch64``
        os_name: Operating system token, e.g. ``linux`` or ``darwin``

    Returns:
        The first matching asset and its layering, or None

    """
    pattern = build_pattern(arch, os_name)

    for asset in candidates:
        if pattern.search(asset.filename) is None:
            continue
        if _is_ignored(asset.filename):
            logger.debug("Skipping packaged extension %s", asset.filename)
            continue

        layering = classify_layering(asset.filename)
        logger.debug(
            "Selected %s for %s-%s with layering %s",
            asset.filename,
            arch,
            os_name,
            layering,
        )
        return asset, layering

    return None
