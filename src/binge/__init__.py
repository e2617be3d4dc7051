"""Top-level package for binge.

License: MIT
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("binge")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
