"""Main CLI entry point for binge."""

import sys

import uvloop

from binge.cli import CLIRunner
from binge.logger import get_logger

logger = get_logger(__name__)


async def async_main() -> int:
    """Run the CLI inside the event loop."""
    logger.debug("CLI started")
    runner = CLIRunner()
    try:
        return await runner.run()
    except Exception:
        logger.exception("CLI encountered an error")
        raise


def main() -> None:
    """Run binge on uvloop and exit with the command's status."""
    try:
        sys.exit(uvloop.run(async_main()))
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        sys.exit(1)
    except Exception:
        logger.exception("❌ Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    main()
