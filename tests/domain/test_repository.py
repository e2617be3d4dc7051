"""Tests for RepositoryIdentity parsing and identity semantics."""

import pytest

from binge.domain import RepositoryIdentity
from binge.exceptions import IdentityParseError


def test_parse_owner_and_name() -> None:
    """Test a plain owner/name reference."""
    repo = RepositoryIdentity.parse("BurntSushi/ripgrep")

    assert repo.owner == "BurntSushi"
    assert repo.name == "ripgrep"
    assert repo.alias is None
    assert str(repo) == "BurntSushi/ripgrep"


def test_parse_with_alias() -> None:
    """Test the optional :alias suffix."""
    repo = RepositoryIdentity.parse("cli/cli:gh")

    assert repo.slug == "cli/cli"
    assert repo.alias == "gh"
    assert repo.display == "cli/cli:gh"


@pytest.mark.parametrize(
    "reference",
    [
        "ripgrep",
        "/ripgrep",
        "BurntSushi/",
        "a/b/c",
        "cli/cli:gh:extra",
        "cli/cli:",
        "cli/cli:bin/gh",
    ],
)
def test_parse_rejects_malformed(reference: str) -> None:
    """Test malformed references raise IdentityParseError."""
    with pytest.raises(IdentityParseError):
        RepositoryIdentity.parse(reference)


def test_identity_ignores_alias() -> None:
    """Test equality, hashing and ordering only use owner and name."""
    plain = RepositoryIdentity.parse("cli/cli")
    aliased = RepositoryIdentity.parse("cli/cli:gh")

    assert plain == aliased
    assert hash(plain) == hash(aliased)
    assert len({plain, aliased}) == 1


def test_identity_ordering() -> None:
    """Test identities sort by owner then name."""
    repos = [
        RepositoryIdentity("b", "a"),
        RepositoryIdentity("a", "z"),
        RepositoryIdentity("a", "b"),
    ]

    assert [r.slug for r in sorted(repos)] == ["a/b", "a/z", "b/a"]


def test_dict_round_trip_keeps_alias() -> None:
    """Test the manifest representation stores the alias as rename."""
    repo = RepositoryIdentity.parse("sharkdp/bat:batcat")

    data = repo.to_dict()

    assert data == {"owner": "sharkdp", "name": "bat", "rename": "batcat"}
    assert RepositoryIdentity.from_dict(data).alias == "batcat"
