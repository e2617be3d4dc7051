"""Command-line argument parser for binge."""

import argparse
from argparse import Namespace
from collections.abc import Sequence

from binge.core.operations import ListFormat

EPILOG = """
Examples:
  # Install one or more binaries (concurrently)
  %(prog)s install BurntSushi/ripgrep sharkdp/fd
  %(prog)s install cli/cli:gh

  # Update everything that is installed
  %(prog)s update

  # Rename an installed binary
  %(prog)s rename sharkdp/bat:batcat

  # Print a line that reinstalls the same set elsewhere
  %(prog)s list install

  # Store a GitHub token in the system keyring
  %(prog)s token --save
"""


class CLIParser:
    """Builds the ``binge`` argument parser."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments without the program name (defaults to
                ``sys.argv[1:]``)

        """
        return self.build().parse_args(argv)

    def build(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="binge",
            description="Install binaries from GitHub releases",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=EPILOG,
        )
        # Long form only so it cannot collide with subcommand flags
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show binge version and exit",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        self._add_install_command(subparsers)
        self._add_uninstall_command(subparsers)
        self._add_update_command(subparsers)
        self._add_rename_command(subparsers)
        self._add_list_command(subparsers)
        self._add_token_command(subparsers)
        return parser

    @staticmethod
    def _add_verbose(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug output on the console",
        )

    def _add_install_command(self, subparsers) -> None:
        install_parser = subparsers.add_parser(
            "install",
            help="Install the latest release of repositories",
        )
        install_parser.add_argument(
            "repos",
            nargs="+",
            metavar="OWNER/NAME[:ALIAS]",
            help="Repositories to install; ALIAS renames the executable",
        )
        self._add_verbose(install_parser)

    def _add_uninstall_command(self, subparsers) -> None:
        uninstall_parser = subparsers.add_parser(
            "uninstall",
            help="Remove installed binaries",
        )
        uninstall_parser.add_argument(
            "repos",
            nargs="+",
            metavar="OWNER/NAME",
            help="Repositories to uninstall",
        )
        self._add_verbose(uninstall_parser)

    def _add_update_command(self, subparsers) -> None:
        update_parser = subparsers.add_parser(
            "update",
            help="Update every installed binary to its latest release",
        )
        self._add_verbose(update_parser)

    def _add_rename_command(self, subparsers) -> None:
        rename_parser = subparsers.add_parser(
            "rename",
            help="Rename an installed binary",
        )
        rename_parser.add_argument(
            "repo",
            metavar="OWNER/NAME:ALIAS",
            help="Installed repository and its new executable name",
        )
        self._add_verbose(rename_parser)

    def _add_list_command(self, subparsers) -> None:
        list_parser = subparsers.add_parser(
            "list",
            help="List installed binaries",
        )
        list_parser.add_argument(
            "format",
            nargs="?",
            choices=[f.value for f in ListFormat],
            default=ListFormat.DEFAULT.value,
            help="'install' prints one line to pass to 'binge install'",
        )
        self._add_verbose(list_parser)

    def _add_token_command(self, subparsers) -> None:
        token_parser = subparsers.add_parser(
            "token",
            help="Manage the GitHub token kept in the system keyring",
        )
        group = token_parser.add_mutually_exclusive_group(required=True)
        group.add_argument(
            "--save", action="store_true", help="Prompt for and save a token"
        )
        group.add_argument(
            "--remove", action="store_true", help="Remove the saved token"
        )
        group.add_argument(
            "--status",
            action="store_true",
            help="Show where the token is taken from",
        )
        self._add_verbose(token_parser)
