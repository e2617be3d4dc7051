"""Tests for the extraction pipeline."""

import io
import stat
from pathlib import Path

import pytest

from binge.core.extract import extract
from binge.domain import Compression, Container, Layering
from binge.exceptions import ExtractionError, UnsupportedLayeringError
from tests.core.conftest import COMPRESSORS, tar_bytes, zip_bytes

BINARY = b"\x7fELF fake executable"
COMPRESSION_BY_EXT = {
    "gz": Compression.GZIP,
    "xz": Compression.XZ,
    "zst": Compression.ZSTD,
}


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


@pytest.mark.parametrize("ext", ["gz", "xz", "zst"])
def test_extract_compressed_tar_writes_first_executable(
    tmp_path: Path, ext: str
) -> None:
    """Test tar.{gz,xz,zst} extraction picks the first executable entry."""
    archive = tar_bytes(
        [
            ("bar-1.0/README.md", b"docs", 0o644),
            ("bar-1.0/bin/bar", BINARY, 0o755),
            ("bar-1.0/bin/helper", b"second", 0o755),
        ]
    )
    stream = io.BytesIO(COMPRESSORS[ext](archive))
    layering = Layering(COMPRESSION_BY_EXT[ext], Container.TAR)

    path = extract(stream, layering, tmp_path, Path(f"bar.tar.{ext}"))

    assert path == tmp_path / "bar"
    assert path.read_bytes() == BINARY
    assert _mode(path) == 0o755
    assert not (tmp_path / "helper").exists()


def test_extract_plain_tar_keeps_entry_mode(tmp_path: Path) -> None:
    """Test the entry's own mode is applied to the output."""
    stream = io.BytesIO(tar_bytes([("tool", BINARY, 0o700)]))

    path = extract(
        stream, Layering(container=Container.TAR), tmp_path, Path("t.tar")
    )

    assert _mode(path) == 0o700


def test_extract_tar_without_executable_fails(tmp_path: Path) -> None:
    """Test an archive with no owner-executable file is an error."""
    stream = io.BytesIO(
        COMPRESSORS["gz"](tar_bytes([("README", b"docs", 0o644)]))
    )
    layering = Layering(Compression.GZIP, Container.TAR)

    with pytest.raises(ExtractionError) as exc_info:
        extract(stream, layering, tmp_path, Path("bar.tar.gz"))

    assert exc_info.value.target == "bar.tar.gz"
    assert list(tmp_path.iterdir()) == []


def test_extract_corrupt_stream_fails(tmp_path: Path) -> None:
    """Test undecodable input surfaces as ExtractionError."""
    stream = io.BytesIO(b"definitely not gzip")
    layering = Layering(Compression.GZIP, Container.TAR)

    with pytest.raises(ExtractionError, match="Extraction failed"):
        extract(stream, layering, tmp_path, Path("bar.tar.gz"))


@pytest.mark.parametrize("container", [Container.NONE, Container.TAR])
def test_extract_corrupt_gzip_body_fails(
    tmp_path: Path, container: Container
) -> None:
    """Test a gzip with a valid header but damaged deflate data."""
    payload = bytearray(COMPRESSORS["gz"](bytes(range(256)) * 400))
    for i in range(20, 60):
        payload[i] ^= 0xFF
    layering = Layering(Compression.GZIP, container)

    with pytest.raises(ExtractionError):
        extract(io.BytesIO(bytes(payload)), layering, tmp_path, Path("bar"))

    assert not (tmp_path / "bar").exists()


def test_extract_zip_uses_entry_path_and_mode(tmp_path: Path) -> None:
    """Test zip extraction keeps the entry's relative path and mode."""
    stream = io.BytesIO(
        zip_bytes(
            [
                ("LICENSE", b"MIT", 0o644),
                ("bin/tool", BINARY, 0o755),
            ]
        )
    )

    path = extract(
        stream, Layering(container=Container.ZIP), tmp_path, Path("t.zip")
    )

    assert path == tmp_path / "bin" / "tool"
    assert path.read_bytes() == BINARY
    assert _mode(path) == 0o755


def test_extract_zip_skips_symlink_entries(tmp_path: Path) -> None:
    """Test a symlink entry is never taken for the executable."""
    stream = io.BytesIO(
        zip_bytes(
            [
                ("tool-link", b"tool", 0o120755),
                ("tool", BINARY, 0o755),
            ]
        )
    )

    path = extract(
        stream, Layering(container=Container.ZIP), tmp_path, Path("t.zip")
    )

    assert path == tmp_path / "tool"
    assert path.read_bytes() == BINARY
    assert not (tmp_path / "tool-link").exists()


def test_extract_zip_skips_traversal_entries(tmp_path: Path) -> None:
    """Test entries escaping the destination are never written."""
    stream = io.BytesIO(
        zip_bytes(
            [
                ("../evil", b"evil", 0o755),
                ("tool", BINARY, 0o755),
            ]
        )
    )
    destination = tmp_path / "bin"

    path = extract(
        stream, Layering(container=Container.ZIP), destination, Path("t.zip")
    )

    assert path == destination / "tool"
    assert not (tmp_path / "evil").exists()


def test_extract_zip_without_executable_fails(tmp_path: Path) -> None:
    """Test a zip with no executable entry is an error."""
    stream = io.BytesIO(zip_bytes([("README", b"docs", 0o644)]))

    with pytest.raises(ExtractionError):
        extract(
            stream,
            Layering(container=Container.ZIP),
            tmp_path,
            Path("t.zip"),
        )


@pytest.mark.parametrize(
    "compression", [Compression.GZIP, Compression.XZ, Compression.ZSTD]
)
def test_extract_compressed_zip_is_unsupported(
    tmp_path: Path, compression: Compression
) -> None:
    """Test compressed zip containers fail fast instead of guessing."""
    stream = io.BytesIO(zip_bytes([("tool", BINARY, 0o755)]))

    with pytest.raises(UnsupportedLayeringError):
        extract(
            stream, Layering(compression, Container.ZIP), tmp_path, Path("t")
        )

    assert list(tmp_path.iterdir()) == []


def test_extract_bare_file_gets_executable_mode(tmp_path: Path) -> None:
    """Test a bare asset is written verbatim with mode 0o755."""
    stream = io.BytesIO(BINARY)

    path = extract(stream, Layering(), tmp_path, Path("tailwindcss-linux-x64"))

    assert path == tmp_path / "tailwindcss-linux-x64"
    assert path.read_bytes() == BINARY
    assert _mode(path) == 0o755


@pytest.mark.parametrize("ext", ["gz", "xz", "zst"])
def test_extract_compressed_bare_file(tmp_path: Path, ext: str) -> None:
    """Test a compressed single file is decompressed before writing."""
    stream = io.BytesIO(COMPRESSORS[ext](BINARY))
    layering = Layering(COMPRESSION_BY_EXT[ext], Container.NONE)

    path = extract(stream, layering, tmp_path, Path("bar"))

    assert path.read_bytes() == BINARY
    assert _mode(path) == 0o755


def test_extract_replaces_existing_file(tmp_path: Path) -> None:
    """Test an existing binary is overwritten and no temp file remains."""
    target = tmp_path / "tool"
    target.write_bytes(b"old")

    extract(io.BytesIO(BINARY), Layering(), tmp_path, Path("tool"))

    assert target.read_bytes() == BINARY
    assert [p.name for p in tmp_path.iterdir()] == ["tool"]


def test_extract_failure_keeps_existing_file(tmp_path: Path) -> None:
    """Test a failed extraction leaves the previous binary untouched."""
    target = tmp_path / "tool"
    target.write_bytes(b"old")
    stream = io.BytesIO(b"not xz data")

    with pytest.raises(ExtractionError):
        extract(stream, Layering(Compression.XZ), tmp_path, Path("tool"))

    assert target.read_bytes() == b"old"
    assert [p.name for p in tmp_path.iterdir()] == ["tool"]
