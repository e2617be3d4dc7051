"""Shared fixtures and helpers for core tests.

Includes an aiohttp session double and builders for the archive layouts
release assets come in.
"""

import gzip
import io
import lzma
import tarfile
import zipfile
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest
import zstandard

# =============================================================================
# Async Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Async generator yielding chunks for simulating HTTP responses."""
    for chunk in chunks:
        yield chunk


def make_response(
    body: bytes = b"",
    raise_error: BaseException | None = None,
) -> AsyncMock:
    """Build a mock aiohttp response usable as ``async with`` target."""
    mock_response = AsyncMock()
    mock_response.__aenter__.return_value = mock_response
    mock_response.__aexit__.return_value = None
    mock_response.raise_for_status = MagicMock(side_effect=raise_error)
    mock_response.read.return_value = body
    mock_response.content.iter_chunked = lambda size: async_chunk_gen(
        [body[i : i + 4] for i in range(0, len(body), 4)] or [b""]
    )
    return mock_response


def release_json(tag: str, *filenames: str) -> bytes:
    """GitHub ``releases/latest`` body with one asset per filename."""
    return orjson.dumps(
        {
            "tag_name": tag,
            "assets": [
                {
                    "name": name,
                    "browser_download_url": f"https://dl.example/{tag}/{name}",
                }
                for name in filenames
            ],
        }
    )


@pytest.fixture
def mock_session() -> MagicMock:
    """Provide a mock aiohttp.ClientSession."""
    return MagicMock()


# =============================================================================
# Archive builders
# =============================================================================


def tar_bytes(entries: list[tuple[str, bytes, int]]) -> bytes:
    """Build an uncompressed tar from ``(name, data, mode)`` entries."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as archive:
        for name, data, mode in entries:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def zip_bytes(entries: list[tuple[str, bytes, int]]) -> bytes:
    """Build a zip whose entries carry Unix ``mode`` bits."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w") as archive:
        for name, data, mode in entries:
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            info.create_system = 3
            archive.writestr(info, data)
    return buffer.getvalue()


COMPRESSORS: dict[str, Any] = {
    "gz": gzip.compress,
    "xz": lzma.compress,
    "zst": lambda data: zstandard.ZstdCompressor().compress(data),
}
