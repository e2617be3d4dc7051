"""Installed-binary manifest.

The manifest maps each repository identity to the installed executable's
path and release tag. It is a value: every mutation returns a new Manifest
whose binaries are sorted by ``(owner, name)`` and unique per identity.
ManifestStore reads and writes it as JSON with orjson.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import orjson

from binge.constants import MANIFEST_FORMAT_VERSION
from binge.domain import RepositoryIdentity
from binge.exceptions import IdentityParseError, PersistenceError
from binge.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class InstalledBinary:
    """One installed executable.

    Attributes:
        repo: Repository the executable came from
        path: Absolute path of the installed file
        version: Release tag that was installed

    """

    repo: RepositoryIdentity
    path: Path
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo": self.repo.to_dict(),
            "path": str(self.path),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstalledBinary:
        return cls(
            repo=RepositoryIdentity.from_dict(data["repo"]),
            path=Path(data["path"]),
            version=str(data["version"]),
        )


def _sort_key(binary: InstalledBinary) -> tuple[str, str]:
    return binary.repo.owner, binary.repo.name


@dataclass(slots=True, frozen=True)
class Manifest:
    """Sorted, duplicate-free collection of installed binaries."""

    binaries: tuple[InstalledBinary, ...] = ()
    format_version: int = MANIFEST_FORMAT_VERSION
    _index: dict[RepositoryIdentity, InstalledBinary] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: dict[RepositoryIdentity, InstalledBinary] = {}
        for binary in self.binaries:
            # Later entries win, matching insert-or-replace semantics
            index[binary.repo] = binary
        ordered = tuple(sorted(index.values(), key=_sort_key))
        object.__setattr__(self, "binaries", ordered)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_binaries(
        cls, binaries: Iterable[InstalledBinary]
    ) -> Manifest:
        return cls(binaries=tuple(binaries))

    def __len__(self) -> int:
        return len(self.binaries)

    def __iter__(self):
        return iter(self.binaries)

    def get(self, repo: RepositoryIdentity) -> InstalledBinary | None:
        return self._index.get(repo)

    def upsert(self, binary: InstalledBinary) -> Manifest:
        """Insert ``binary`` or replace the entry with the same identity."""
        return replace(self, binaries=(*self.binaries, binary))

    def remove(self, repo: RepositoryIdentity) -> Manifest:
        return replace(
            self,
            binaries=tuple(b for b in self.binaries if b.repo != repo),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.format_version,
            "binaries": [binary.to_dict() for binary in self.binaries],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Manifest:
        """Build a manifest from its JSON representation.

        Raises:
            ValueError: If the structure or format version is invalid

        """
        if not isinstance(data, dict):
            msg = "manifest must be a JSON object"
            raise ValueError(msg)

        format_version = data.get("version", MANIFEST_FORMAT_VERSION)
        if (
            not isinstance(format_version, int)
            or format_version > MANIFEST_FORMAT_VERSION
        ):
            msg = f"unsupported manifest version {format_version!r}"
            raise ValueError(msg)

        raw_binaries = data.get("binaries", [])
        if not isinstance(raw_binaries, list):
            msg = "manifest 'binaries' must be a list"
            raise ValueError(msg)

        try:
            binaries = tuple(map(InstalledBinary.from_dict, raw_binaries))
        except (KeyError, TypeError, IdentityParseError) as e:
            msg = f"malformed binary entry: {e}"
            raise ValueError(msg) from e

        return cls(binaries=binaries, format_version=MANIFEST_FORMAT_VERSION)


class ManifestStore:
    """Loads and saves the manifest file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Manifest:
        """Load the manifest; a missing file yields an empty manifest.

        Raises:
            PersistenceError: If the file cannot be read or parsed

        """
        if not self.path.exists():
            logger.debug("No manifest at %s, starting empty", self.path)
            return Manifest()

        try:
            data = orjson.loads(self.path.read_bytes())
            return Manifest.from_dict(data)
        except OSError as e:
            msg = f"cannot read manifest: {e}"
            raise PersistenceError(msg, target=str(self.path)) from e
        except (orjson.JSONDecodeError, ValueError) as e:
            msg = f"corrupt manifest: {e}"
            raise PersistenceError(msg, target=str(self.path)) from e

    def save(self, manifest: Manifest) -> None:
        """Write the manifest, replacing the previous file in one step.

        Raises:
            PersistenceError: If the file cannot be written

        """
        payload = orjson.dumps(manifest.to_dict(), option=orjson.OPT_INDENT_2)
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            tmp_path.replace(self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            msg = f"cannot write manifest: {e}"
            raise PersistenceError(msg, target=str(self.path)) from e

        logger.debug(
            "Saved manifest with %d binaries to %s", len(manifest), self.path
        )
