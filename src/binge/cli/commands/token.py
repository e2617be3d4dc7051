"""Token command handler.

Saves, removes and reports the GitHub token kept in the system keyring.
A token in ``GITHUB_TOKEN`` always takes precedence over the keyring.
"""

import getpass
import os
from argparse import Namespace

from binge.constants import ENV_GITHUB_TOKEN
from binge.core.auth import (
    MAX_TOKEN_LENGTH,
    KeyringTokenStore,
    validate_github_token,
)
from binge.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class TokenHandler(BaseCommandHandler):
    """Handler for token command operations."""

    async def execute(self, args: Namespace) -> int:
        if args.save:
            return self._save_token()
        if args.remove:
            return self._remove_token()
        return self._show_status()

    @property
    def _token_store(self) -> KeyringTokenStore:
        return self.container.auth_manager.token_store

    def _save_token(self) -> int:
        """Prompt for a token twice and store it.

        Raises:
            ConfigurationError: If the keyring rejects the token

        """
        try:
            token = self._prompt_for_token()
        except (EOFError, KeyboardInterrupt):
            logger.error("Token input aborted")
            return 1
        except ValueError as e:
            logger.error("❌ %s", e)
            return 1

        self._token_store.save(token)
        logger.info("✅ GitHub token saved to keyring.")
        return 0

    def _remove_token(self) -> int:
        if self._token_store.delete():
            logger.info("GitHub token removed from keyring.")
        else:
            logger.warning("No GitHub token found in keyring.")
        return 0

    def _show_status(self) -> int:
        if os.environ.get(ENV_GITHUB_TOKEN, "").strip():
            logger.info("Using the token from %s.", ENV_GITHUB_TOKEN)
        elif self._token_store.get():
            logger.info("Using the token saved in the keyring.")
        else:
            logger.info("No token configured; requests are anonymous.")
            logger.info("💡 Use 'binge token --save' to raise rate limits.")
        return 0

    @staticmethod
    def _prompt_for_token() -> str:
        """Read and confirm a token without echoing it.

        Raises:
            ValueError: If the token is empty, too long, malformed or the
                confirmation differs

        """
        token = getpass.getpass("Enter your GitHub token (input hidden): ")
        token = token.strip()
        if not token:
            msg = "Token cannot be empty"
            raise ValueError(msg)
        if len(token) > MAX_TOKEN_LENGTH:
            msg = (
                "Token exceeds maximum allowed length "
                f"({MAX_TOKEN_LENGTH} characters)"
            )
            raise ValueError(msg)

        confirm = getpass.getpass("Confirm your GitHub token: ").strip()
        if token != confirm:
            msg = "Token confirmation does not match"
            raise ValueError(msg)

        if not validate_github_token(token):
            msg = (
                "Invalid GitHub token format. Expected a classic or "
                "fine-grained personal access token."
            )
            raise ValueError(msg)
        return token
