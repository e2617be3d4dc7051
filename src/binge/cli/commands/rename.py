"""Rename command handler."""

from argparse import Namespace

from binge.core import operations
from binge.core.manifest import Manifest

from .base import BaseCommandHandler


class RenameHandler(BaseCommandHandler):
    """Renames an installed binary to the alias given after ``:``."""

    async def execute(self, args: Namespace) -> int:
        repos = self._parse_repos([args.repo])
        if not repos:
            return 1

        async def rename(manifest: Manifest) -> Manifest:
            return operations.rename(repos[0], manifest)

        await self._with_manifest(rename)
        return 0
