"""GitHub releases API client.

Fetches latest-release metadata and downloads assets through the shared
aiohttp session. Every failure (network, non-2xx status, malformed JSON)
surfaces as ReleaseFetchError; nothing is retried here.
"""

from __future__ import annotations

import tempfile
from typing import IO

import aiofiles
import aiohttp
import orjson

from binge.constants import CHUNK_SIZE, GITHUB_API_BASE_URL
from binge.domain import ReleaseDescriptor, RepositoryIdentity
from binge.exceptions import ReleaseFetchError
from binge.logger import get_logger

logger = get_logger(__name__)


class ReleaseClient:
    """Reads release data for many repositories over one shared session.

    The client holds no per-request state, so a single instance is passed
    to every concurrent task.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_base_url: str = GITHUB_API_BASE_URL,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session carrying default headers
            api_base_url: API root, overridable for GitHub Enterprise

        """
        self.session = session
        self.api_base_url = api_base_url.rstrip("/")

    def latest_release_url(self, identity: RepositoryIdentity) -> str:
        return (
            f"{self.api_base_url}/repos/{identity.owner}/"
            f"{identity.name}/releases/latest"
        )

    async def latest_release(
        self, identity: RepositoryIdentity
    ) -> ReleaseDescriptor:
        """Fetch the latest published release of ``identity``.

        Raises:
            ReleaseFetchError: On network error, non-2xx status or a body
                that is not a valid release object

        """
        url = self.latest_release_url(identity)
        logger.debug("Fetching %s", url)

        try:
            async with self.session.get(url) as response:
                response.raise_for_status()
                body = await response.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            raise ReleaseFetchError(
                _describe(e), target=identity.slug
            ) from e

        try:
            return ReleaseDescriptor.from_api_response(orjson.loads(body))
        except (orjson.JSONDecodeError, ValueError) as e:
            msg = f"malformed release metadata: {e}"
            raise ReleaseFetchError(msg, target=identity.slug) from e

    async def download(
        self, url: str, identity: RepositoryIdentity | None = None
    ) -> IO[bytes]:
        """Download ``url`` into an anonymous temporary file.

        Returns:
            Temporary file positioned at offset 0; closing it deletes it

        Raises:
            ReleaseFetchError: On network error or non-2xx status

        """
        target = identity.slug if identity else url
        logger.debug("Downloading %s", url)

        spool = tempfile.TemporaryFile()  # noqa: SIM115
        try:
            async with self.session.get(url) as response:
                response.raise_for_status()
                async with aiofiles.open(
                    spool.fileno(), mode="wb", closefd=False
                ) as f:
                    async for chunk in response.content.iter_chunked(
                        CHUNK_SIZE
                    ):
                        await f.write(chunk)
        except (aiohttp.ClientError, TimeoutError) as e:
            spool.close()
            raise ReleaseFetchError(_describe(e), target=target) from e
        except BaseException:
            spool.close()
            raise

        spool.seek(0)
        return spool


def _describe(error: BaseException) -> str:
    if isinstance(error, aiohttp.ClientResponseError):
        return f"HTTP {error.status} {error.message}"
    if isinstance(error, TimeoutError):
        return "request timed out"
    return str(error) or type(error).__name__
