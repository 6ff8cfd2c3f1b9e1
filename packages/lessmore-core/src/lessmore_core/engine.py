"""LessMore facade.

Composes the resolver, compiler adapter, cache manager and batch driver
around one LessMoreConfig. This is the object host applications hold on
to: roots are registered at startup, then exists()/generate() serve
requests and parse_all()/clean_all() manage the public tree.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from lessmore_core.batch import BatchDriver, BatchResult, Notifier
from lessmore_core.cache import CacheManager
from lessmore_core.compiler import LessCompiler
from lessmore_core.config import LessMoreConfig
from lessmore_core.resolver import KeyLike, SourceResolver
from lessmore_core.sources import ResolvedSource


class LessMore:
    """Stylesheet compilation with an mtime-based disk cache.

    Attributes:
        config: Shared configuration.
        resolver: Source root registry and path mapping.
        compiler: LESS compiler adapter.
        cache: Cache manager.
        batch: Batch driver.

    Example:
        >>> less = LessMore(LessMoreConfig(project_root=Path("/srv/app")))
        >>> less.add_source_root("/srv/app/app/stylesheets")
        >>> less.exists(["screen"])
        True
        >>> css = less.generate(["screen"])
    """

    def __init__(
        self,
        config: LessMoreConfig,
        *,
        compiler: LessCompiler | None = None,
        roots: Iterable[Path | str] = (),
        fail_fast: bool = True,
        notify: Notifier | None = None,
    ) -> None:
        """Initialize LessMore.

        Args:
            config: Shared configuration.
            compiler: Compiler adapter. Creates a lesscpy-backed one when None.
            roots: Initial source roots.
            fail_fast: Abort batch runs on the first failing source.
            notify: Receiver for batch notices (console when None).

        Raises:
            ConfigurationError: If no compiler is given and lesscpy is missing.
        """
        self.config = config
        self.resolver = SourceResolver(config, roots)
        self.compiler = compiler if compiler is not None else LessCompiler()
        self.cache = CacheManager(config, self.resolver, self.compiler)
        self.batch = BatchDriver(self.resolver, self.cache, fail_fast=fail_fast, notify=notify)

    @property
    def source_roots(self) -> tuple[Path, ...]:
        """Registered source roots in registration order."""
        return self.resolver.source_roots

    def add_source_root(self, path: Path | str) -> None:
        """Register a source root (duplicates are ignored)."""
        self.resolver.add_source_root(path)

    def set_source_root(self, path: Path | str) -> None:
        """Replace all source roots with one root."""
        self.resolver.set_source_root(path)

    def exists(self, key: KeyLike) -> bool:
        """Whether a non-partial stylesheet exists for key."""
        return self.resolver.exists(key)

    def generate(self, key: KeyLike) -> str:
        """Return CSS for key, from cache when fresh."""
        return self.cache.generate(key)

    def all_sources(self) -> list[ResolvedSource]:
        """Every compilable, non-partial source across all roots."""
        return self.resolver.enumerate_all()

    def parse_all(self) -> BatchResult:
        """Regenerate the public stylesheet tree."""
        return self.batch.parse_all()

    def clean_all(self) -> BatchResult:
        """Remove every generated public stylesheet."""
        return self.batch.clean_all()
