"""Batch generation and cleanup of public stylesheets.

This module provides:
- BatchDriver: parse_all() regenerates, clean_all() removes public stylesheets
- BatchResult: Aggregated outcome of a batch run
- BatchFailure: A per-file failure recorded when fail_fast is off
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console

from lessmore_core.cache import CacheManager
from lessmore_core.resolver import SourceResolver
from lessmore_core.sources import ResolvedSource

logger = structlog.get_logger(__name__)

Notifier = Callable[[str], None]

_console = Console(highlight=False)


def print_notice(message: str) -> None:
    """Default notifier: print the notice to the console."""
    _console.print(message, markup=False)


class BatchFailure(BaseModel):
    """A source that failed during a batch run.

    Attributes:
        source: Path of the failing source file.
        error: Exception type and message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: Path
    error: str


class BatchResult(BaseModel):
    """Outcome of parse_all() or clean_all().

    Attributes:
        written: Public stylesheets written (parse).
        skipped: Public stylesheets already up to date (parse).
        deleted: Public stylesheets removed (clean).
        failures: Sources that failed (only populated when fail_fast is off).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    written: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)
    deleted: list[Path] = Field(default_factory=list)
    failures: list[BatchFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if no source failed."""
        return not self.failures


class BatchDriver:
    """Regenerates or removes the public stylesheet tree.

    With fail_fast (the default) the first failing source aborts the run
    and its exception propagates. Otherwise failures are collected in the
    result and the run continues with the next source.

    Attributes:
        resolver: Resolver for roots and public paths.
        cache: Cache manager used to produce CSS.
        fail_fast: Stop on first failure.

    Example:
        >>> driver = BatchDriver(resolver, cache)
        >>> result = driver.parse_all()
        >>> len(result.written)
        3
    """

    def __init__(
        self,
        resolver: SourceResolver,
        cache: CacheManager,
        *,
        fail_fast: bool = True,
        notify: Notifier | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            resolver: Resolver for roots and public paths.
            cache: Cache manager used to produce CSS.
            fail_fast: Stop on first failure.
            notify: Receives one human-readable notice per file written or
                deleted. Prints to the console when None.
        """
        self.resolver = resolver
        self.cache = cache
        self.fail_fast = fail_fast
        self.notify = notify or print_notice
        self._log = logger.bind(component="batch_driver")

    def parse_all(self) -> BatchResult:
        """Generate every source and refresh its public stylesheet.

        A public stylesheet is written when it is missing or when its source
        root changed after it was last written.

        Returns:
            BatchResult listing written and skipped stylesheets.
        """
        written: list[Path] = []
        skipped: list[Path] = []
        failures: list[BatchFailure] = []

        for root in self.resolver.source_roots:
            for source in self.resolver.enumerate_all([root]):
                try:
                    destination, was_written = self._parse_one(root, source)
                except Exception as e:
                    if self.fail_fast:
                        raise
                    failures.append(self._failure(source, e))
                    continue
                (written if was_written else skipped).append(destination)

        self._log.info(
            "batch_completed",
            operation="parse",
            written=len(written),
            skipped=len(skipped),
            failed=len(failures),
        )
        return BatchResult(written=written, skipped=skipped, failures=failures)

    def clean_all(self) -> BatchResult:
        """Delete the public stylesheet of every source, where present.

        Returns:
            BatchResult listing deleted stylesheets.
        """
        deleted: list[Path] = []
        failures: list[BatchFailure] = []

        for root in self.resolver.source_roots:
            for source in self.resolver.enumerate_all([root]):
                css_file = self.resolver.derived_path_for(source)
                if not css_file.exists():
                    continue
                try:
                    css_file.unlink()
                except Exception as e:
                    if self.fail_fast:
                        raise
                    failures.append(self._failure(source, e))
                    continue
                self.notify(f"deleting {css_file}")
                self._log.debug("artifact_deleted", path=str(css_file))
                deleted.append(css_file)

        self._log.info(
            "batch_completed",
            operation="clean",
            deleted=len(deleted),
            failed=len(failures),
        )
        return BatchResult(deleted=deleted, failures=failures)

    def _parse_one(self, root: Path, source: ResolvedSource) -> tuple[Path, bool]:
        css = self.cache.generate(source.key)
        destination = self.resolver.derived_path_for(source)

        if destination.exists() and root.stat().st_ctime <= destination.stat().st_ctime:
            return destination, False

        self.notify(f"writing {destination}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(css if css.endswith("\n") else css + "\n", newline="")
        self._log.debug("artifact_written", path=str(destination), source=str(source.path))
        return destination, True

    def _failure(self, source: ResolvedSource, error: Exception) -> BatchFailure:
        self._log.warning(
            "batch_source_failed",
            source=str(source.path),
            error_type=type(error).__name__,
            error=str(error),
        )
        return BatchFailure(source=source.path, error=f"{type(error).__name__}: {error}")
