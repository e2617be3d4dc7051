"""Concurrent install and update of release binaries.

Each repository gets one task that runs the pipeline
fetch -> match -> download -> extract. Tasks share nothing but the
read-only ReleaseClient and return a TaskResult value instead of raising;
results are folded into a new Manifest one at a time as tasks complete.
The input manifest is never mutated, so a run that dies halfway leaves
nothing but a fully computed snapshot to persist.

The number of tasks in flight is capped by ``max_concurrent``.
"""

from __future__ import annotations

import asyncio
import tempfile
import time
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from binge.core import extract as extraction
from binge.core import matcher
from binge.core.github import ReleaseClient
from binge.core.manifest import InstalledBinary, Manifest
from binge.domain import (
    Compression,
    Layering,
    ReleaseDescriptor,
    RepositoryIdentity,
)
from binge.exceptions import BingeError, NoMatchingAssetError
from binge.logger import get_logger

logger = get_logger(__name__)


class TaskStage(Enum):
    """Lifecycle of one repository task. DONE and FAILED are terminal."""

    PENDING = "pending"
    FETCHING = "fetching"
    MATCHING = "matching"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStage.DONE, TaskStage.FAILED)


class Outcome(Enum):
    """What happened to one repository."""

    INSTALLED = "installed"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TaskResult:
    """Result value of one repository task.

    Attributes:
        repo: Repository the task ran for
        outcome: What happened
        binary: Manifest entry after the task (None for a failed install)
        previous: Entry before an update, if any
        error: Failure cause when outcome is FAILED
        failed_stage: Stage the task was in when it failed

    """

    repo: RepositoryIdentity
    outcome: Outcome
    binary: InstalledBinary | None = None
    previous: InstalledBinary | None = None
    error: BingeError | None = None
    failed_stage: TaskStage | None = None


@dataclass(slots=True, frozen=True)
class RunReport:
    """Next manifest snapshot plus per-repository results."""

    manifest: Manifest
    results: tuple[TaskResult, ...]
    elapsed: float = 0.0

    def by_outcome(self, outcome: Outcome) -> list[TaskResult]:
        return [r for r in self.results if r.outcome is outcome]

    @property
    def failures(self) -> list[TaskResult]:
        return self.by_outcome(Outcome.FAILED)


class _TaskState:
    """Tracks the stage of one task; terminal stages cannot be left."""

    def __init__(self, repo: RepositoryIdentity) -> None:
        self.repo = repo
        self.stage = TaskStage.PENDING

    def advance(self, stage: TaskStage) -> None:
        if self.stage.is_terminal:
            msg = f"task for {self.repo} already {self.stage.value}"
            raise RuntimeError(msg)
        logger.debug("%s: %s -> %s", self.repo, self.stage.value, stage.value)
        self.stage = stage

    def fail(self) -> TaskStage:
        failed_at = self.stage
        self.advance(TaskStage.FAILED)
        return failed_at


def _sorted_results(results: Iterable[TaskResult]) -> tuple[TaskResult, ...]:
    return tuple(
        sorted(results, key=lambda r: (r.repo.owner, r.repo.name))
    )


def _fallback_filename(filename: str, layering: Layering) -> Path:
    """Name a bare executable after its asset, minus any compression suffix."""
    path = Path(filename)
    if layering.is_bare and layering.compression is not Compression.NONE:
        return Path(path.stem)
    return path


def _extract_staged(
    stream: BinaryIO,
    layering: Layering,
    destination_dir: Path,
    fallback_filename: Path,
    target: Path | None,
) -> Path:
    """Extract into a private directory, then move onto the final path.

    Only the final path is ever touched in ``destination_dir``; without a
    ``target`` the file keeps the name it had in the archive.
    """
    destination_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(
        prefix=".binge-", dir=destination_dir
    ) as staging:
        staging_dir = Path(staging)
        written = extraction.extract(
            stream, layering, staging_dir, fallback_filename
        )
        final = target or destination_dir / written.relative_to(staging_dir)
        final.parent.mkdir(parents=True, exist_ok=True)
        written.replace(final)
    return final


class Orchestrator:
    """Runs install and update pipelines for many repositories at once."""

    def __init__(
        self,
        client: ReleaseClient,
        install_dir: Path | None,
        max_concurrent: int,
        platform: tuple[str, str] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Shared release client
            install_dir: Directory new binaries are installed into; only
                required by install()
            max_concurrent: Maximum number of tasks in flight
            platform: ``(arch, os)`` to match assets for (defaults to the
                running platform)

        """
        if max_concurrent < 1:
            msg = "max_concurrent must be at least 1"
            raise ValueError(msg)
        self.client = client
        self.install_dir = install_dir
        self.max_concurrent = max_concurrent
        self.arch, self.os_name = platform or matcher.current_platform()

    async def _fetch_and_extract(
        self,
        task: _TaskState,
        release: ReleaseDescriptor,
        destination_dir: Path,
        target: Path | None = None,
    ) -> Path:
        task.advance(TaskStage.MATCHING)
        selection = matcher.select(release.assets, self.arch, self.os_name)
        if selection is None:
            msg = (
                f"no asset for {self.arch}-{self.os_name} among "
                f"{len(release.assets)} assets of {release.tag}"
            )
            raise NoMatchingAssetError(msg, target=task.repo.slug)
        asset, layering = selection

        task.advance(TaskStage.DOWNLOADING)
        stream = await self.client.download(asset.download_url, task.repo)

        task.advance(TaskStage.EXTRACTING)
        with stream:
            return await asyncio.to_thread(
                _extract_staged,
                stream,
                layering,
                destination_dir,
                _fallback_filename(asset.filename, layering),
                target,
            )

    async def _guarded(
        self,
        semaphore: asyncio.Semaphore,
        task: _TaskState,
        work: Awaitable[TaskResult],
        fallback: InstalledBinary | None,
    ) -> TaskResult:
        """Run ``work`` under the semaphore and turn errors into results."""
        async with semaphore:
            try:
                return await work
            except BingeError as e:
                error = e
            except Exception as e:  # noqa: BLE001
                logger.debug(
                    "Unexpected error for %s", task.repo, exc_info=True
                )
                error = BingeError(
                    f"{type(e).__name__}: {e}", target=task.repo.slug
                )

        failed_stage = task.fail()
        logger.debug("%s failed while %s", task.repo, failed_stage.value)
        return TaskResult(
            repo=task.repo,
            outcome=Outcome.FAILED,
            binary=fallback,
            previous=fallback,
            error=error,
            failed_stage=failed_stage,
        )

    async def _install_one(
        self, task: _TaskState, install_dir: Path
    ) -> TaskResult:
        task.advance(TaskStage.FETCHING)
        release = await self.client.latest_release(task.repo)
        target = install_dir / task.repo.alias if task.repo.alias else None
        path = await self._fetch_and_extract(
            task, release, install_dir, target
        )

        task.advance(TaskStage.DONE)
        return TaskResult(
            repo=task.repo,
            outcome=Outcome.INSTALLED,
            binary=InstalledBinary(
                repo=task.repo, path=path.absolute(), version=release.tag
            ),
        )

    async def _update_one(
        self, task: _TaskState, binary: InstalledBinary
    ) -> TaskResult:
        task.advance(TaskStage.FETCHING)
        release = await self.client.latest_release(binary.repo)

        # Opaque tags: any difference is an update, no version ordering
        if release.tag == binary.version:
            task.advance(TaskStage.DONE)
            return TaskResult(
                repo=binary.repo,
                outcome=Outcome.UNCHANGED,
                binary=binary,
                previous=binary,
            )

        # Archives name the file after the project; keep renamed binaries
        await self._fetch_and_extract(
            task, release, binary.path.parent, binary.path
        )

        task.advance(TaskStage.DONE)
        return TaskResult(
            repo=binary.repo,
            outcome=Outcome.UPDATED,
            binary=replace(binary, version=release.tag),
            previous=binary,
        )

    async def install(
        self,
        requested: Iterable[RepositoryIdentity],
        manifest: Manifest,
    ) -> RunReport:
        """Install every requested repository that is not installed yet.

        Args:
            requested: Repositories to install
            manifest: Current manifest snapshot (left untouched)

        Returns:
            Report holding the next manifest snapshot

        """
        start = time.monotonic()
        results: list[TaskResult] = []
        pending: list[RepositoryIdentity] = []

        for repo in dict.fromkeys(requested):
            existing = manifest.get(repo)
            if existing is not None:
                results.append(
                    TaskResult(repo, Outcome.SKIPPED, binary=existing)
                )
            else:
                pending.append(repo)

        next_manifest = manifest
        if pending:
            if self.install_dir is None:
                msg = "install directory is not configured"
                raise ValueError(msg)
            semaphore = asyncio.Semaphore(self.max_concurrent)
            tasks = []
            for repo in pending:
                task = _TaskState(repo)
                tasks.append(
                    self._guarded(
                        semaphore,
                        task,
                        self._install_one(task, self.install_dir),
                        fallback=None,
                    )
                )

            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                results.append(result)
                if result.outcome is Outcome.INSTALLED and result.binary:
                    next_manifest = next_manifest.upsert(result.binary)

        return RunReport(
            manifest=next_manifest,
            results=_sorted_results(results),
            elapsed=time.monotonic() - start,
        )

    async def update(self, manifest: Manifest) -> RunReport:
        """Check every installed binary and install newer releases.

        Failed checks and failed updates keep the previous entry, so the
        returned manifest always has one entry per input binary.
        """
        start = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrent)
        tasks = []
        for binary in manifest:
            task = _TaskState(binary.repo)
            tasks.append(
                self._guarded(
                    semaphore,
                    task,
                    self._update_one(task, binary),
                    fallback=binary,
                )
            )

        results: list[TaskResult] = []
        next_manifest = manifest
        for next_done in asyncio.as_completed(tasks):
            result = await next_done
            results.append(result)
            if result.outcome is Outcome.UPDATED and result.binary:
                next_manifest = next_manifest.upsert(result.binary)

        return RunReport(
            manifest=next_manifest,
            results=_sorted_results(results),
            elapsed=time.monotonic() - start,
        )
