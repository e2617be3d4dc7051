"""List command handler."""

from argparse import Namespace

from binge.core import operations
from binge.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class ListHandler(BaseCommandHandler):
    """Prints installed binaries."""

    async def execute(self, args: Namespace) -> int:
        manifest = self.container.manifest_store.load()
        lines = operations.list_binaries(
            manifest, operations.ListFormat(args.format)
        )
        for line in lines:
            logger.info(line)
        return 0
