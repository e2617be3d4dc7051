"""Exception classes for binge operations."""


class BingeError(Exception):
    """Base exception for binge operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the repository or file that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class IdentityParseError(BingeError):
    """Raised when an ``owner/name[:alias]`` reference is malformed."""

    error_prefix = "Invalid repository"


class ReleaseFetchError(BingeError):
    """Raised when latest-release metadata or an asset cannot be fetched."""

    error_prefix = "Release fetch failed"


class NoMatchingAssetError(BingeError):
    """Raised when no release asset matches the running platform."""

    error_prefix = "No suitable asset found"


class UnsupportedLayeringError(BingeError):
    """Raised for a recognized but unimplemented compression/container pair."""

    error_prefix = "Unsupported asset layering"


class ExtractionError(BingeError):
    """Raised when no executable can be extracted or writing it fails."""

    error_prefix = "Extraction failed"


class PersistenceError(BingeError):
    """Raised when the manifest cannot be read or written."""

    error_prefix = "Manifest error"


class ConfigurationError(BingeError):
    """Raised when settings are invalid or incomplete."""

    error_prefix = "Configuration error"


class LockError(BingeError):
    """Raised when the process lock cannot be acquired."""

    error_prefix = "Lock failed"
