"""Manifest operations that need no network access."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from enum import Enum

from binge.core.manifest import InstalledBinary, Manifest
from binge.domain import RepositoryIdentity
from binge.logger import get_logger

logger = get_logger(__name__)


class ListFormat(Enum):
    """Output formats of list_binaries()."""

    DEFAULT = "default"
    INSTALL = "install"


def uninstall(
    repos: Iterable[RepositoryIdentity], manifest: Manifest
) -> Manifest:
    """Delete installed executables and drop their entries.

    A binary whose file is already gone is still dropped. A binary whose file
    cannot be deleted keeps its entry.

    Args:
        repos: Repositories to uninstall
        manifest: Current manifest snapshot

    Returns:
        Next manifest snapshot

    """
    for repo in dict.fromkeys(repos):
        binary = manifest.get(repo)
        if binary is None:
            logger.warning("%s is not installed, skipping", repo)
            continue

        try:
            binary.path.unlink()
        except FileNotFoundError:
            logger.warning(
                "%s was already removed from %s", repo, binary.path
            )
        except OSError as e:
            logger.error("Cannot uninstall %s: %s", repo, e)
            continue

        manifest = manifest.remove(repo)
        logger.info("Uninstalled %s", repo)

    return manifest


def rename(repo: RepositoryIdentity, manifest: Manifest) -> Manifest:
    """Rename an installed executable to ``repo.alias``.

    The file stays in its directory and the alias is recorded on the
    manifest entry, so later updates keep writing to the new name.

    Args:
        repo: Repository with the new alias
        manifest: Current manifest snapshot

    Returns:
        Next manifest snapshot (the same one when nothing changed)

    """
    binary = manifest.get(repo)
    if binary is None:
        logger.warning("%s is not installed, skipping", repo)
        return manifest
    if repo.alias is None:
        logger.info("No new name given for %s", repo)
        return manifest

    target = binary.path.with_name(repo.alias)
    if target == binary.path:
        logger.info("%s is already named %s", repo, repo.alias)
        return manifest

    try:
        binary.path.rename(target)
    except OSError as e:
        logger.error("Cannot rename %s: %s", repo, e)
        return manifest

    logger.info("Renamed %s to %s", binary.path.name, repo.alias)
    return manifest.upsert(
        replace(binary, repo=binary.repo.with_alias(repo.alias), path=target)
    )


def _list_line(binary: InstalledBinary) -> str:
    return f"{binary.repo} {binary.version}"


def list_binaries(
    manifest: Manifest, list_format: ListFormat = ListFormat.DEFAULT
) -> list[str]:
    """Render the manifest for display.

    ``DEFAULT`` yields one ``owner/name version`` line per binary.
    ``INSTALL`` yields a single line of ``owner/name[:alias]`` references
    that can be passed back to ``binge install``.
    """
    if list_format is ListFormat.INSTALL:
        if not len(manifest):
            return []
        return [" ".join(binary.repo.display for binary in manifest)]
    return [_list_line(binary) for binary in manifest]
