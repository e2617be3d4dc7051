"""Install command handler."""

from argparse import Namespace

from binge.core.manifest import Manifest
from binge.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class InstallHandler(BaseCommandHandler):
    """Installs the latest release of each requested repository."""

    async def execute(self, args: Namespace) -> int:
        repos = self._parse_repos(args.repos)
        status = 0 if len(repos) == len(args.repos) else 1
        if not repos:
            logger.error("❌ No valid repositories given.")
            return 1

        orchestrator = await self.container.create_orchestrator()
        run_status = 0

        async def install(manifest: Manifest) -> Manifest:
            nonlocal run_status
            report = await orchestrator.install(repos, manifest)
            run_status = self._report(report)
            return report.manifest

        await self._with_manifest(install)
        return status or run_status
