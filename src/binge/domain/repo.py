"""Repository identity value type.

A repository is referenced on the command line as ``owner/name`` with an
optional ``:alias`` that renames the installed executable. Equality,
hashing and ordering only consider ``(owner, name)``; the alias rides along
as metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from binge.exceptions import IdentityParseError


@dataclass(slots=True, frozen=True, order=True)
class RepositoryIdentity:
    """Parsed ``owner/name[:alias]`` reference.

    Attributes:
        owner: Repository owner
        name: Repository name
        alias: Optional filename the installed executable is renamed to

    """

    owner: str
    name: str
    alias: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for label, value in (("owner", self.owner), ("name", self.name)):
            if not value or "/" in value:
                msg = f"{label} must be non-empty and must not contain '/'"
                raise IdentityParseError(msg, target=self.display)
        if self.alias is not None and (not self.alias or "/" in self.alias):
            msg = "alias must be non-empty and must not contain '/'"
            raise IdentityParseError(msg, target=self.display)

    @classmethod
    def parse(cls, reference: str) -> RepositoryIdentity:
        """Parse ``owner/name`` or ``owner/name:alias``.

        Raises:
            IdentityParseError: If the reference is malformed

        """
        reference = reference.strip()
        owner, sep, rest = reference.partition("/")
        if not sep:
            msg = "expected 'owner/name[:alias]'"
            raise IdentityParseError(msg, target=reference)

        name, colon, alias = rest.partition(":")
        if colon and ":" in alias:
            msg = "at most one ':alias' suffix is allowed"
            raise IdentityParseError(msg, target=reference)

        return cls(owner=owner, name=name, alias=alias if colon else None)

    @property
    def slug(self) -> str:
        """``owner/name`` without the alias."""
        return f"{self.owner}/{self.name}"

    @property
    def display(self) -> str:
        """``owner/name[:alias]`` as accepted by parse()."""
        if self.alias:
            return f"{self.slug}:{self.alias}"
        return self.slug

    def with_alias(self, alias: str | None) -> RepositoryIdentity:
        return RepositoryIdentity(self.owner, self.name, alias)

    def to_dict(self) -> dict[str, Any]:
        """Manifest representation."""
        return {"owner": self.owner, "name": self.name, "rename": self.alias}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepositoryIdentity:
        return cls(
            owner=data["owner"],
            name=data["name"],
            alias=data.get("rename"),
        )

    def __str__(self) -> str:
        return self.slug
