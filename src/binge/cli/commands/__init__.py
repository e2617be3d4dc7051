"""Command handlers, one per subcommand."""

from binge.cli.commands.base import BaseCommandHandler
from binge.cli.commands.install import InstallHandler
from binge.cli.commands.listing import ListHandler
from binge.cli.commands.rename import RenameHandler
from binge.cli.commands.token import TokenHandler
from binge.cli.commands.uninstall import UninstallHandler
from binge.cli.commands.update import UpdateHandler

__all__ = [
    "BaseCommandHandler",
    "InstallHandler",
    "ListHandler",
    "RenameHandler",
    "TokenHandler",
    "UninstallHandler",
    "UpdateHandler",
]
