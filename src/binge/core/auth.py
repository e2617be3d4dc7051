"""GitHub token resolution and keyring storage.

The bearer token is looked up in ``GITHUB_TOKEN`` first and in the system
keyring second. No token means anonymous requests, which GitHub rate
limits more aggressively.
"""

from __future__ import annotations

import os
import re

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from binge.constants import ENV_GITHUB_TOKEN, KEYRING_SERVICE, KEYRING_USERNAME
from binge.exceptions import ConfigurationError
from binge.logger import get_logger

logger = get_logger(__name__)

MAX_TOKEN_LENGTH = 255

_TOKEN_PATTERNS = (
    re.compile(r"^[a-f0-9]{40}$"),  # classic personal access token
    re.compile(r"^gh[pousr]_[A-Za-z0-9_]{36,251}$"),
    re.compile(r"^github_pat_[A-Za-z0-9_]{36,243}$"),
)


def validate_github_token(token: str | None) -> bool:
    """Check that ``token`` looks like a GitHub token.

    Accepts classic 40-hex tokens and the prefixed ``ghp_``, ``gho_``,
    ``ghu_``, ``ghs_``, ``ghr_`` and ``github_pat_`` formats.
    """
    if not token:
        return False
    token = token.strip()
    if not token or len(token) > MAX_TOKEN_LENGTH:
        return False
    return any(pattern.match(token) for pattern in _TOKEN_PATTERNS)


class KeyringTokenStore:
    """Stores the GitHub token in the system keyring."""

    def __init__(
        self,
        service: str = KEYRING_SERVICE,
        username: str = KEYRING_USERNAME,
    ) -> None:
        self.service = service
        self.username = username

    def get(self) -> str | None:
        """Return the stored token, or None if absent or unavailable."""
        try:
            return keyring.get_password(self.service, self.username)
        except KeyringError as e:
            logger.debug("Keyring unavailable: %s", e)
            return None

    def save(self, token: str) -> None:
        """Store ``token``.

        Raises:
            ConfigurationError: If the token is malformed or the keyring
                rejects it

        """
        if not validate_github_token(token):
            msg = "token does not look like a GitHub token"
            raise ConfigurationError(msg)
        try:
            keyring.set_password(self.service, self.username, token.strip())
        except KeyringError as e:
            msg = f"cannot store token in keyring: {e}"
            raise ConfigurationError(msg) from e

    def delete(self) -> bool:
        """Remove the stored token. Returns False if none was stored."""
        try:
            keyring.delete_password(self.service, self.username)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            msg = f"cannot remove token from keyring: {e}"
            raise ConfigurationError(msg) from e
        return True


class GitHubAuthManager:
    """Resolves the bearer token and applies it to request headers."""

    def __init__(self, token_store: KeyringTokenStore | None = None) -> None:
        self.token_store = token_store or KeyringTokenStore()
        self._token: str | None = None
        self._resolved = False

    def get_token(self) -> str | None:
        """Return the token from the environment or the keyring.

        The lookup happens once; later calls return the cached value.
        """
        if not self._resolved:
            env_token = os.environ.get(ENV_GITHUB_TOKEN, "").strip()
            if env_token:
                logger.debug("Using GitHub token from %s", ENV_GITHUB_TOKEN)
                self._token = env_token
            else:
                self._token = self.token_store.get()
                if self._token:
                    logger.debug("Using GitHub token from keyring")
            self._resolved = True
        return self._token

    def apply_auth(self, headers: dict[str, str]) -> dict[str, str]:
        """Return a copy of ``headers`` with the Authorization header set."""
        headers = dict(headers)
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers
