"""Tests for ReleaseClient against a mocked aiohttp session."""

from typing import Any
from unittest.mock import MagicMock

import aiohttp
import pytest

from binge.core.github import ReleaseClient
from binge.domain import AssetRef, RepositoryIdentity
from binge.exceptions import ReleaseFetchError
from tests.core.conftest import make_response, release_json

REPO = RepositoryIdentity("BurntSushi", "ripgrep")


def _http_error(status: int) -> aiohttp.ClientResponseError:
    return aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=status, message="Nope"
    )


@pytest.mark.asyncio
async def test_latest_release_parses_tag_and_assets(
    mock_session: Any,
) -> None:
    """Test release metadata is turned into a ReleaseDescriptor."""
    mock_session.get.return_value = make_response(
        release_json("14.1.0", "rg-x86_64-unknown-linux-musl.tar.gz")
    )
    client = ReleaseClient(mock_session)

    release = await client.latest_release(REPO)

    mock_session.get.assert_called_once_with(
        "https://api.github.com/repos/BurntSushi/ripgrep/releases/latest"
    )
    assert release.tag == "14.1.0"
    assert release.assets == (
        AssetRef(
            "rg-x86_64-unknown-linux-musl.tar.gz",
            "https://dl.example/14.1.0/rg-x86_64-unknown-linux-musl.tar.gz",
        ),
    )


@pytest.mark.asyncio
async def test_latest_release_http_error(mock_session: Any) -> None:
    """Test a non-2xx status becomes ReleaseFetchError for the repo."""
    mock_session.get.return_value = make_response(
        raise_error=_http_error(404)
    )
    client = ReleaseClient(mock_session)

    with pytest.raises(ReleaseFetchError, match="HTTP 404") as exc_info:
        await client.latest_release(REPO)

    assert exc_info.value.target == "BurntSushi/ripgrep"


@pytest.mark.asyncio
async def test_latest_release_malformed_json(mock_session: Any) -> None:
    """Test a body that is not a release object is rejected."""
    mock_session.get.return_value = make_response(b'{"assets": []}')
    client = ReleaseClient(mock_session)

    with pytest.raises(ReleaseFetchError, match="malformed release"):
        await client.latest_release(REPO)


@pytest.mark.asyncio
async def test_latest_release_timeout(mock_session: Any) -> None:
    """Test timeouts are reported as fetch errors."""
    mock_session.get.side_effect = TimeoutError()
    client = ReleaseClient(mock_session)

    with pytest.raises(ReleaseFetchError, match="timed out"):
        await client.latest_release(REPO)


@pytest.mark.asyncio
async def test_download_spools_body(mock_session: Any) -> None:
    """Test the asset body is returned as a rewound temporary file."""
    body = b"0123456789abcdef-binary"
    mock_session.get.return_value = make_response(body)
    client = ReleaseClient(mock_session)

    stream = await client.download("https://dl.example/rg.tar.gz", REPO)

    with stream:
        assert stream.read() == body


@pytest.mark.asyncio
async def test_download_http_error(mock_session: Any) -> None:
    """Test a failed download raises ReleaseFetchError."""
    mock_session.get.return_value = make_response(
        raise_error=_http_error(503)
    )
    client = ReleaseClient(mock_session)

    with pytest.raises(ReleaseFetchError, match="HTTP 503"):
        await client.download("https://dl.example/rg.tar.gz", REPO)
