"""CLI runner for binge.

Parses arguments, builds the service container and routes to the command
handler. Fatal errors end here with a non-zero exit status.
"""

from argparse import Namespace
from collections.abc import Sequence

from binge import __version__
from binge.cli.commands import (
    BaseCommandHandler,
    InstallHandler,
    ListHandler,
    RenameHandler,
    TokenHandler,
    UninstallHandler,
    UpdateHandler,
)
from binge.cli.container import ServiceContainer
from binge.cli.parser import CLIParser
from binge.exceptions import BingeError
from binge.logger import (
    apply_config,
    get_logger,
    restore_console_level,
    set_console_level_temporarily,
)

logger = get_logger(__name__)

HANDLERS: dict[str, type[BaseCommandHandler]] = {
    "install": InstallHandler,
    "uninstall": UninstallHandler,
    "update": UpdateHandler,
    "rename": RenameHandler,
    "list": ListHandler,
    "token": TokenHandler,
}


class CLIRunner:
    """Entry point object for one ``binge`` invocation."""

    def __init__(self, container: ServiceContainer | None = None) -> None:
        self.container = container or ServiceContainer()

    async def run(self, argv: Sequence[str] | None = None) -> int:
        """Run the CLI and return the exit status.

        Args:
            argv: Arguments without the program name

        """
        parser = CLIParser().build()
        args = parser.parse_args(argv)

        if args.version:
            print(__version__)
            return 0
        if not args.command:
            parser.print_help()
            return 1

        try:
            apply_config(self.container.global_config)
            return await self._execute_command(args)
        except BingeError as e:
            logger.error("❌ %s", e)
            return 1
        except KeyboardInterrupt:
            logger.info("⏹️  Operation cancelled by user")
            return 1
        finally:
            await self.container.cleanup()

    async def _execute_command(self, args: Namespace) -> int:
        handler = HANDLERS[args.command](self.container)

        verbose = getattr(args, "verbose", False)
        if verbose:
            set_console_level_temporarily("DEBUG")
        try:
            return await handler.execute(args)
        finally:
            if verbose:
                restore_console_level()
