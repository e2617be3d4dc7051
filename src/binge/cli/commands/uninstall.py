"""Uninstall command handler."""

from argparse import Namespace

from binge.core import operations
from binge.core.manifest import Manifest

from .base import BaseCommandHandler


class UninstallHandler(BaseCommandHandler):
    """Deletes installed binaries and forgets them."""

    async def execute(self, args: Namespace) -> int:
        repos = self._parse_repos(args.repos)

        async def uninstall(manifest: Manifest) -> Manifest:
            return operations.uninstall(repos, manifest)

        await self._with_manifest(uninstall)
        return 0 if len(repos) == len(args.repos) else 1
