"""Update command handler."""

from argparse import Namespace

from binge.core.manifest import Manifest
from binge.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class UpdateHandler(BaseCommandHandler):
    """Brings every installed binary to its latest release."""

    async def execute(self, args: Namespace) -> int:
        status = 0

        async def update(manifest: Manifest) -> Manifest:
            nonlocal status
            if not len(manifest):
                logger.info("Nothing is installed yet.")
                return manifest
            orchestrator = await self.container.create_orchestrator(
                needs_install_dir=False
            )
            report = await orchestrator.update(manifest)
            status = self._report(report)
            return report.manifest

        await self._with_manifest(update)
        return status
