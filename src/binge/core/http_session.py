"""HTTP session construction.

One aiohttp.ClientSession is created per process and shared, read-only,
by every concurrent repository task. Its connection pool is safe for
concurrent use inside one event loop.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from binge import __version__
from binge.constants import GITHUB_ACCEPT, GITHUB_API_VERSION, USER_AGENT
from binge.core.auth import GitHubAuthManager
from binge.types import GlobalConfig


def build_headers(auth_manager: GitHubAuthManager) -> dict[str, str]:
    """Default headers sent with every request."""
    return auth_manager.apply_auth(
        {
            "Accept": GITHUB_ACCEPT,
            "User-Agent": f"{USER_AGENT}/{__version__}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
    )


@asynccontextmanager
async def create_http_session(
    global_config: GlobalConfig,
    auth_manager: GitHubAuthManager,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create the shared HTTP session.

    Args:
        global_config: Global configuration
        auth_manager: Supplies the optional bearer token

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout_seconds = global_config["network"]["timeout_seconds"]
    timeout = aiohttp.ClientTimeout(
        total=None,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    connector = aiohttp.TCPConnector(
        limit=global_config["max_concurrent"] * 2,
    )

    async with aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
        headers=build_headers(auth_manager),
        raise_for_status=False,
    ) as session:
        yield session
