"""Extraction of the executable contained in a release asset.

Compression and container are decoded as two independent steps: the raw
stream is first wrapped in a decompressing reader, then the container (if
any) is walked for the first regular file with the owner-execute bit set.
Exactly one file is written per call.

Every write goes to a temporary sibling that is moved over the target only
once it is complete, so a failure never leaves a half-written executable
where a working one used to be.
"""

from __future__ import annotations

import contextlib
import gzip
import lzma
import os
import shutil
import stat
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import IO, BinaryIO

import zstandard

from binge.constants import CHUNK_SIZE, EXECUTABLE_BIT, SINGLE_FILE_MODE
from binge.domain import Compression, Container, Layering
from binge.exceptions import ExtractionError, UnsupportedLayeringError
from binge.logger import get_logger

logger = get_logger(__name__)

_DECODE_ERRORS = (
    OSError,
    EOFError,
    lzma.LZMAError,
    tarfile.TarError,
    zipfile.BadZipFile,
    zlib.error,
    zstandard.ZstdError,
)


def _decompress(stream: BinaryIO, compression: Compression) -> IO[bytes]:
    """Wrap ``stream`` in a reader that undoes ``compression``."""
    match compression:
        case Compression.NONE:
            return stream
        case Compression.GZIP:
            return gzip.GzipFile(fileobj=stream, mode="rb")
        case Compression.XZ:
            return lzma.LZMAFile(stream, mode="rb")
        case Compression.ZSTD:
            return zstandard.ZstdDecompressor().stream_reader(
                stream, read_across_frames=True
            )
    msg = f"unknown compression {compression}"
    raise UnsupportedLayeringError(msg)


def _write_executable(source: IO[bytes], dest: Path, mode: int) -> Path:
    """Copy ``source`` to ``dest`` via a temporary sibling and set ``mode``."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{dest.name}.", suffix=".part", dir=dest.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as output:
            shutil.copyfileobj(source, output, CHUNK_SIZE)
        # A plain copy does not carry the executable bit over
        tmp_path.chmod(mode & 0o7777)
        tmp_path.replace(dest)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise

    logger.debug("Wrote %s (mode %o)", dest, mode & 0o7777)
    return dest


def _extract_single(
    reader: IO[bytes], destination_dir: Path, filename: Path
) -> Path:
    return _write_executable(
        reader, destination_dir / filename.name, SINGLE_FILE_MODE
    )


def _extract_tar(reader: IO[bytes], destination_dir: Path) -> Path:
    # Stream mode: entries are read in archive order without seeking
    with tarfile.open(fileobj=reader, mode="r|") as archive:
        for member in archive:
            if not member.isreg() or not member.mode & EXECUTABLE_BIT:
                continue
            name = PurePosixPath(member.name).name
            if not name:
                continue
            source = archive.extractfile(member)
            if source is None:
                continue
            with source:
                return _write_executable(
                    source, destination_dir / name, member.mode
                )

    msg = "archive contains no executable regular file"
    raise ExtractionError(msg)


def _enclosed_name(filename: str) -> PurePosixPath | None:
    """Return the entry's relative path, or None if it escapes the root."""
    path = PurePosixPath(filename.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts:
        return None
    parts = [part for part in path.parts if part not in ("", ".")]
    if not parts:
        return None
    return PurePosixPath(*parts)


def _extract_zip(reader: IO[bytes], destination_dir: Path) -> Path:
    with zipfile.ZipFile(reader) as archive:
        for info in archive.infolist():
            mode = info.external_attr >> 16
            if info.is_dir() or not mode & EXECUTABLE_BIT:
                continue
            # Entries without a file type bit are plain files
            if stat.S_IFMT(mode) and not stat.S_ISREG(mode):
                continue
            name = _enclosed_name(info.filename)
            if name is None:
                logger.warning("Skipping unsafe zip entry %s", info.filename)
                continue
            with archive.open(info) as source:
                return _write_executable(source, destination_dir / name, mode)

    msg = "archive contains no executable regular file"
    raise ExtractionError(msg)


def _ensure_seekable(stream: BinaryIO) -> IO[bytes]:
    """Zip needs its central directory, so spool non-seekable input."""
    if stream.seekable():
        return stream
    spooled = tempfile.SpooledTemporaryFile()  # noqa: SIM115
    shutil.copyfileobj(stream, spooled, CHUNK_SIZE)
    spooled.seek(0)
    return spooled


def extract(
    stream: BinaryIO,
    layering: Layering,
    destination_dir: Path,
    fallback_filename: Path,
) -> Path:
    """Decode ``stream`` and write the executable it contains.

    Args:
        stream: Readable binary stream positioned at the asset start
        layering: Classified compression and container of the asset
        destination_dir: Directory the executable is written into
        fallback_filename: Filename used when the asset is a bare file

    Returns:
        Path of the written executable

    Raises:
        UnsupportedLayeringError: For a compressed zip container
        ExtractionError: If no executable entry exists or decoding/writing
            fails

    """
    compression, container = layering.compression, layering.container

    if container is Container.ZIP and compression is not Compression.NONE:
        msg = f"{compression.value}-compressed zip archives are not supported"
        raise UnsupportedLayeringError(msg, target=str(fallback_filename))

    try:
        reader = _decompress(stream, compression)
        match container:
            case Container.NONE:
                return _extract_single(
                    reader, destination_dir, fallback_filename
                )
            case Container.TAR:
                return _extract_tar(reader, destination_dir)
            case Container.ZIP:
                return _extract_zip(_ensure_seekable(stream), destination_dir)
    except ExtractionError as e:
        if e.target is None:
            e.target = str(fallback_filename)
        raise
    except _DECODE_ERRORS as e:
        raise ExtractionError(str(e), target=str(fallback_filename)) from e

    msg = f"unhandled layering {layering}"
    raise UnsupportedLayeringError(msg, target=str(fallback_filename))
