"""Tests for the manifest value type and its JSON store."""

from pathlib import Path

import orjson
import pytest

from binge.core.manifest import InstalledBinary, Manifest, ManifestStore
from binge.domain import RepositoryIdentity
from binge.exceptions import PersistenceError


def _binary(
    reference: str, version: str = "v1.0.0", path: str | None = None
) -> InstalledBinary:
    repo = RepositoryIdentity.parse(reference)
    return InstalledBinary(
        repo=repo,
        path=Path(path or f"/opt/bin/{repo.alias or repo.name}"),
        version=version,
    )


def test_manifest_sorts_by_owner_then_name() -> None:
    """Test binaries are kept sorted by (owner, name)."""
    manifest = Manifest.from_binaries(
        [_binary("zed/a"), _binary("abc/z"), _binary("abc/b")]
    )

    assert [str(b.repo) for b in manifest] == ["abc/b", "abc/z", "zed/a"]


def test_manifest_upsert_replaces_same_identity() -> None:
    """Test upsert keeps one entry per identity, ignoring the alias."""
    manifest = Manifest.from_binaries([_binary("cli/cli")])

    updated = manifest.upsert(_binary("cli/cli:gh", version="v2.0.0"))

    assert len(updated) == 1
    assert updated.get(RepositoryIdentity("cli", "cli")).version == "v2.0.0"
    # The original snapshot is untouched
    assert manifest.get(RepositoryIdentity("cli", "cli")).version == "v1.0.0"


def test_manifest_remove_keeps_invariants() -> None:
    """Test duplicates collapse and remove keeps the manifest sorted."""
    manifest = Manifest.from_binaries(
        [_binary("b/two"), _binary("a/one"), _binary("b/two", "v2")]
    )
    manifest = manifest.remove(RepositoryIdentity("a", "one"))

    assert [str(b.repo) for b in manifest] == ["b/two"]
    assert manifest.get(RepositoryIdentity("b", "two")).version == "v2"
    assert manifest.get(RepositoryIdentity("a", "one")) is None


def test_manifest_from_dict_rejects_newer_format() -> None:
    """Test a manifest written by a newer binge is refused."""
    with pytest.raises(ValueError, match="unsupported manifest version"):
        Manifest.from_dict({"version": 99, "binaries": []})


def test_manifest_from_dict_rejects_malformed_entries() -> None:
    """Test entries missing required keys or a valid identity are refused."""
    with pytest.raises(ValueError, match="malformed binary entry"):
        Manifest.from_dict({"version": 1, "binaries": [{"path": "/x"}]})

    bad_identity = {
        "repo": {"owner": "", "name": "x"},
        "path": "/x",
        "version": "v1",
    }
    with pytest.raises(ValueError, match="malformed binary entry"):
        Manifest.from_dict({"version": 1, "binaries": [bad_identity]})


def test_store_load_invalid_identity_is_persistence_error(
    tmp_path: Path,
) -> None:
    """Test an entry with an empty owner makes the manifest unreadable."""
    path = tmp_path / "manifest.json"
    path.write_bytes(
        orjson.dumps(
            {
                "version": 1,
                "binaries": [
                    {
                        "repo": {"owner": "", "name": "x"},
                        "path": "/x",
                        "version": "v1",
                    }
                ],
            }
        )
    )

    with pytest.raises(PersistenceError, match="corrupt manifest"):
        ManifestStore(path).load()


def test_store_load_missing_file_is_empty(tmp_path: Path) -> None:
    """Test a missing manifest file yields an empty manifest."""
    store = ManifestStore(tmp_path / "manifest.json")

    assert len(store.load()) == 0


def test_store_save_and_load(tmp_path: Path) -> None:
    """Test a saved manifest loads back equal, alias included."""
    store = ManifestStore(tmp_path / "state" / "manifest.json")
    manifest = Manifest.from_binaries(
        [_binary("sharkdp/bat:batcat"), _binary("BurntSushi/ripgrep")]
    )

    store.save(manifest)
    loaded = store.load()

    assert loaded == manifest
    assert loaded.get(RepositoryIdentity("sharkdp", "bat")).repo.alias == (
        "batcat"
    )
    assert [p.name for p in store.path.parent.iterdir()] == ["manifest.json"]


def test_store_writes_documented_format(tmp_path: Path) -> None:
    """Test the on-disk JSON layout."""
    store = ManifestStore(tmp_path / "manifest.json")

    store.save(Manifest.from_binaries([_binary("cli/cli:gh", "v2.40.0")]))

    assert orjson.loads(store.path.read_bytes()) == {
        "version": 1,
        "binaries": [
            {
                "repo": {"owner": "cli", "name": "cli", "rename": "gh"},
                "path": "/opt/bin/gh",
                "version": "v2.40.0",
            }
        ],
    }


def test_store_load_corrupt_file_raises(tmp_path: Path) -> None:
    """Test an unparsable manifest is a PersistenceError."""
    path = tmp_path / "manifest.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError, match="corrupt manifest"):
        ManifestStore(path).load()


def test_store_save_unwritable_raises(tmp_path: Path) -> None:
    """Test a manifest path under a regular file cannot be saved."""
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(PersistenceError):
        ManifestStore(blocker / "manifest.json").save(Manifest())
