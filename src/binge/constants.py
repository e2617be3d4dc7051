"""Application-wide constants for binge."""

from typing import Final

APP_NAME: Final[str] = "binge"

# Configuration
CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_VERSION: Final[str] = "1.0.0"
DEFAULT_MAX_CONCURRENT: Final[int] = 8
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
LOCAL_BIN_SUFFIX: Final[str] = ".local/bin"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_DIRECTORY: Final[str] = "directory"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_MAX_CONCURRENT: Final[str] = "max_concurrent"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_TIMEOUT_SECONDS: Final[str] = "timeout_seconds"
KEY_INSTALL_DIR: Final[str] = "install"

# Environment overrides
ENV_CONFIG_DIR: Final[str] = "BINGE_CONFIG_DIR"
ENV_STATE_DIR: Final[str] = "BINGE_STATE_DIR"
ENV_LOG_DIR: Final[str] = "BINGE_LOG_DIR"
ENV_GITHUB_TOKEN: Final[str] = "GITHUB_TOKEN"

# Manifest
MANIFEST_FILE_NAME: Final[str] = "manifest.json"
MANIFEST_FORMAT_VERSION: Final[int] = 1
LOCK_FILE_NAME: Final[str] = "binge.lock"

# GitHub API
GITHUB_API_BASE_URL: Final[str] = "https://api.github.com"
GITHUB_API_VERSION: Final[str] = "2022-11-28"
GITHUB_ACCEPT: Final[str] = "application/vnd.github+json"
USER_AGENT: Final[str] = "binge"

# Keyring
KEYRING_SERVICE: Final[str] = "binge"
KEYRING_USERNAME: Final[str] = "github_token"

# Extraction
EXECUTABLE_BIT: Final[int] = 0o100
SINGLE_FILE_MODE: Final[int] = 0o755
CHUNK_SIZE: Final[int] = 65536
IGNORED_ASSET_EXTENSIONS: Final[frozenset[str]] = frozenset({"vsix"})

# Logging
LOG_FILE_NAME: Final[str] = "binge.log"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 3
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - "
    "%(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
LOG_CONSOLE_FORMAT: Final[str] = "%(asctime)s - %(levelname)s - %(message)s"
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}
