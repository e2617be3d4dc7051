"""Base class shared by all command handlers."""

from abc import ABC, abstractmethod
from argparse import Namespace
from collections.abc import Awaitable, Callable, Iterable

from binge.cli.container import ServiceContainer
from binge.core.locking import LockManager
from binge.core.manifest import Manifest
from binge.core.orchestrator import Outcome, RunReport, TaskResult
from binge.domain import RepositoryIdentity
from binge.exceptions import IdentityParseError
from binge.logger import get_logger

logger = get_logger(__name__)

ManifestAction = Callable[[Manifest], Awaitable[Manifest]]


class BaseCommandHandler(ABC):
    """Common plumbing for command handlers.

    Handlers get every service through the container; CLIRunner is the
    only place that builds one.
    """

    def __init__(self, container: ServiceContainer) -> None:
        self.container = container

    @abstractmethod
    async def execute(self, args: Namespace) -> int:
        """Run the command and return the process exit status."""

    @staticmethod
    def _parse_repos(references: Iterable[str]) -> list[RepositoryIdentity]:
        """Parse references, reporting and skipping the malformed ones."""
        repos = []
        for reference in references:
            try:
                repos.append(RepositoryIdentity.parse(reference))
            except IdentityParseError as e:
                logger.error("❌ %s", e)
        return repos

    async def _with_manifest(self, action: ManifestAction) -> Manifest:
        """Load the manifest, apply ``action`` and save the result.

        The manifest is only written when ``action`` returns without raising
        and produced a different snapshot. The process lock is held
        throughout.
        """
        store = self.container.manifest_store
        async with LockManager(self.container.lock_path):
            manifest = store.load()
            updated = await action(manifest)
            if updated != manifest:
                store.save(updated)
        return updated

    @staticmethod
    def _report(report: RunReport) -> int:
        """Log one line per repository; 1 if any of them failed."""
        for result in report.results:
            _log_result(result)
        logger.debug("Finished in %.2fs", report.elapsed)
        return 1 if report.failures else 0


def _log_result(result: TaskResult) -> None:
    binary = result.binary
    match result.outcome:
        case Outcome.INSTALLED if binary is not None:
            logger.info(
                "✅ Installed %s %s to %s",
                result.repo,
                binary.version,
                binary.path,
            )
        case Outcome.UPDATED if binary is not None:
            previous = result.previous.version if result.previous else "?"
            logger.info(
                "✅ Updated %s %s → %s",
                result.repo,
                previous,
                binary.version,
            )
        case Outcome.UNCHANGED if binary is not None:
            logger.info("%s is up to date (%s)", result.repo, binary.version)
        case Outcome.SKIPPED if binary is not None:
            logger.info(
                "%s is already installed (%s)", result.repo, binary.version
            )
        case _:
            logger.error("❌ %s", result.error)
