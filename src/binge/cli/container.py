"""Dependency container for one CLI invocation.

Holds everything a command needs that is not a plain value: settings, the
GitHub token, the manifest store and the shared HTTP session. Every service
is created on first access and the session is closed by cleanup().

Usage:
    >>> container = ServiceContainer()
    >>> try:
    ...     orchestrator = await container.create_orchestrator()
    ...     report = await orchestrator.update(manifest)
    ... finally:
    ...     await container.cleanup()
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from pathlib import Path

from binge.config import ConfigManager, Paths, install_path
from binge.constants import LOCK_FILE_NAME
from binge.core.auth import GitHubAuthManager
from binge.core.github import ReleaseClient
from binge.core.http_session import create_http_session
from binge.core.manifest import ManifestStore
from binge.core.orchestrator import Orchestrator
from binge.logger import get_logger
from binge.types import GlobalConfig

logger = get_logger(__name__)


class ServiceContainer:
    """Lazily built services shared by the command handlers.

    Not thread-safe; one container serves one event loop and one command.
    """

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        auth_manager: GitHubAuthManager | None = None,
        manifest_store: ManifestStore | None = None,
    ) -> None:
        self.config = config_manager or ConfigManager()
        self._auth_manager = auth_manager
        self._manifest_store = manifest_store
        self._global_config: GlobalConfig | None = None
        self._release_client: ReleaseClient | None = None
        self._exit_stack = AsyncExitStack()

    @property
    def global_config(self) -> GlobalConfig:
        """Settings, loaded once."""
        if self._global_config is None:
            self._global_config = self.config.load_global_config()
        return self._global_config

    @property
    def auth_manager(self) -> GitHubAuthManager:
        if self._auth_manager is None:
            self._auth_manager = GitHubAuthManager()
        return self._auth_manager

    @property
    def manifest_store(self) -> ManifestStore:
        if self._manifest_store is None:
            self._manifest_store = ManifestStore(Paths.manifest_file())
        return self._manifest_store

    @property
    def lock_path(self) -> Path:
        return self.manifest_store.path.with_name(LOCK_FILE_NAME)

    @property
    def install_dir(self) -> Path:
        """Directory new binaries go to.

        Raises:
            ConfigurationError: If none is configured and ``~/.local/bin``
                is not on PATH

        """
        return install_path(self.global_config)

    async def release_client(self) -> ReleaseClient:
        """Release client over the shared session, opened on first use."""
        if self._release_client is None:
            session = await self._exit_stack.enter_async_context(
                create_http_session(self.global_config, self.auth_manager)
            )
            logger.debug("Opened HTTP session")
            self._release_client = ReleaseClient(session)
        return self._release_client

    async def create_orchestrator(
        self, *, needs_install_dir: bool = True
    ) -> Orchestrator:
        """Build an orchestrator wired to the shared release client.

        Args:
            needs_install_dir: Resolve the install directory up front;
                updates write next to the existing binaries and skip it

        """
        install_dir = self.install_dir if needs_install_dir else None
        return Orchestrator(
            client=await self.release_client(),
            install_dir=install_dir,
            max_concurrent=self.global_config["max_concurrent"],
        )

    async def cleanup(self) -> None:
        """Close the HTTP session if one was opened."""
        await self._exit_stack.aclose()
        self._release_client = None
