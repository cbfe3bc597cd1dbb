"""Core sync engine for executing sync operations."""

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..config import DEFAULT_MAX_THREADS
from ..models import File
from ..output import OutputFormatter
from .cancel import CancelToken
from .comparator import FileComparator, SyncAction, SyncDecision
from .operations import SyncOperations
from .scheduler import SyncScheduler

if TYPE_CHECKING:
    from ..providers.base import StorageProvider

logger = logging.getLogger(__name__)


@dataclass
class SyncOptions:
    """Options controlling a sync run."""

    delete: bool = False
    """Delete destination files that do not exist on the source"""

    public: bool = False
    """Make uploaded objects publicly readable"""

    max_threads: int = DEFAULT_MAX_THREADS
    """Maximum number of concurrent copy/delete actions"""

    dry_run: bool = False
    """Only show what would be done"""

    timeout: Optional[float] = None
    """Deadline for the whole run in seconds (None for no deadline)"""

    def __post_init__(self) -> None:
        if self.max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")


class SyncEngine:
    """Core sync engine that orchestrates one-way file synchronization."""

    def __init__(
        self,
        source: "StorageProvider",
        dest: "StorageProvider",
        output: Optional[OutputFormatter] = None,
        options: Optional[SyncOptions] = None,
    ):
        """Initialize sync engine.

        Args:
            source: Provider to read files from
            dest: Provider to write files to
            output: Output formatter for displaying progress/status
            options: Sync options (defaults to SyncOptions())
        """
        self.source = source
        self.dest = dest
        self.output = output or OutputFormatter()
        self.options = options or SyncOptions()
        self.operations = SyncOperations(source, dest)

    def sync(self, source_address: str, dest_address: str) -> dict:
        """Synchronize ``dest_address`` with ``source_address``.

        Listing failures on either side abort the run before anything is
        transferred. Individual copy and delete failures are counted in
        the returned statistics.

        Args:
            source_address: Source root (local path or s3://bucket/path)
            dest_address: Destination root (local path or s3://bucket/path)

        Returns:
            Dictionary with sync statistics

        Examples:
            >>> engine = SyncEngine(LocalProvider(), S3Provider())
            >>> stats = engine.sync("./site", "s3://bucket/site")
            >>> print(f"Copied {stats['copies']} files")
        """
        cancel_token = CancelToken(self.options.timeout)

        source_base = self.source.get_absolute_path(source_address)
        dest_base = self.dest.get_absolute_path(dest_address)

        # Step 1: List both sides
        source_files, dest_files = self._list_both(
            source_base, dest_base, cancel_token
        )

        # Step 2: Compare files and determine actions
        comparator = FileComparator(delete_enabled=self.options.delete)
        decisions = comparator.compare_files(
            {f.filename: f for f in source_files},
            {f.filename: f for f in dest_files},
        )
        stats = self._categorize_decisions(decisions)

        for decision in decisions:
            if decision.action == SyncAction.SKIP:
                logger.debug("%s Skip (%s)", decision.relative_path, decision.reason)

        # Step 3: Display plan
        self._display_sync_plan(stats)

        # Step 4: Execute actions
        if not self.options.dry_run:
            to_copy = self._files_for(decisions, SyncAction.COPY)
            to_delete = self._files_for(decisions, SyncAction.DELETE)
            if to_copy or to_delete:
                scheduler = SyncScheduler(
                    self.operations,
                    output=self.output,
                    max_workers=self.options.max_threads,
                    cancel_token=cancel_token,
                )
                _, failures = scheduler.execute(
                    to_copy,
                    to_delete,
                    source_base,
                    dest_base,
                    public=self.options.public,
                )
                stats["failures"] = failures
                stats["cancelled"] = scheduler.not_dispatched

        # Step 5: Display summary
        self._display_summary(stats)

        return stats

    def _list_both(
        self, source_base: str, dest_base: str, cancel_token: CancelToken
    ) -> tuple[list[File], list[File]]:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            start = time.time()
            task = progress.add_task("Listing source...", total=None)
            source_files = self.source.list_files(source_base, cancel_token)
            progress.update(
                task, description=f"Found {len(source_files)} source file(s)"
            )
            logger.debug(
                "Source listing took %.2fs for %d files",
                time.time() - start,
                len(source_files),
            )

            start = time.time()
            task = progress.add_task("Listing destination...", total=None)
            dest_files = self.dest.list_files(
                dest_base, cancel_token, missing_ok=True
            )
            progress.update(
                task, description=f"Found {len(dest_files)} destination file(s)"
            )
            logger.debug(
                "Destination listing took %.2fs for %d files",
                time.time() - start,
                len(dest_files),
            )

        return source_files, dest_files

    @staticmethod
    def _files_for(decisions: list[SyncDecision], action: SyncAction) -> list[File]:
        files = []
        for decision in decisions:
            if decision.action != action:
                continue
            file = decision.source_file if action == SyncAction.COPY else decision.dest_file
            if file is not None:
                files.append(file)
        return files

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary."""
        return {
            "copies": 0,
            "deletes": 0,
            "skips": 0,
            "failures": 0,
            "cancelled": 0,
        }

    def _categorize_decisions(self, decisions: list[SyncDecision]) -> dict:
        """Categorize decisions into statistics.

        Args:
            decisions: List of sync decisions

        Returns:
            Dictionary with statistics
        """
        stats = self._create_empty_stats()

        for decision in decisions:
            if decision.action == SyncAction.COPY:
                stats["copies"] += 1
            elif decision.action == SyncAction.DELETE:
                stats["deletes"] += 1
            elif decision.action == SyncAction.SKIP:
                stats["skips"] += 1

        return stats

    def _display_sync_plan(self, stats: dict) -> None:
        if self.output.quiet:
            return

        if self.options.dry_run:
            self.output.info("Dry run: No changes will be made")
        self.output.info("Sync plan:")
        self.output.info(f"  Copy: {stats['copies']} file(s)")
        if self.options.delete:
            self.output.info(f"  Delete: {stats['deletes']} file(s)")
        self.output.info(f"  Skip: {stats['skips']} file(s)")
        self.output.print("")

    def _display_summary(self, stats: dict) -> None:
        if self.output.quiet:
            return

        self.output.print("")
        if self.options.dry_run:
            self.output.success("Dry run complete!")
            return

        if stats["copies"] + stats["deletes"] == 0:
            self.output.success("No changes needed - everything is in sync!")
            return

        self.output.print_summary(
            "Sync summary:",
            [
                ("Copies", stats["copies"]),
                ("Deletes", stats["deletes"]),
                ("Skips", stats["skips"]),
                ("Failures", stats["failures"]),
            ],
        )
        if stats["failures"]:
            self.output.warning(
                f"Sync finished with {stats['failures']} failure(s)"
            )
        else:
            self.output.success("Sync complete!")
