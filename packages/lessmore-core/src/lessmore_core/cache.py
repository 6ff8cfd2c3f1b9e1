"""Stylesheet cache manager.

Decides whether a cached stylesheet can be reused or must be regenerated.
The cache entry's modification time is the only freshness signal: an
entry is fresh when its mtime is greater than or equal to the source's.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from lessmore_core.compiler import LessCompiler
from lessmore_core.config import LessMoreConfig
from lessmore_core.errors import PersistenceError, SourceNotFoundError
from lessmore_core.resolver import KeyLike, SourceResolver
from lessmore_core.sources import ArtifactKey, ResolvedSource, SourceKind

logger = structlog.get_logger(__name__)

ENTRY_TERMINATOR = "\n"


def read_verbatim(path: Path) -> str:
    """Read a text file without newline translation."""
    with path.open("r", newline="") as f:
        return f.read()


class CacheManager:
    """Serves stylesheets from the disk cache or regenerates them.

    Attributes:
        config: Shared lessmore configuration.
        resolver: Resolver for sources and cache paths.
        compiler: LESS compiler adapter.

    Example:
        >>> manager = CacheManager(config, resolver, LessCompiler())
        >>> css = manager.generate(["screen"])
    """

    def __init__(
        self,
        config: LessMoreConfig,
        resolver: SourceResolver,
        compiler: LessCompiler,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.compiler = compiler
        self._log = logger.bind(component="cache_manager")

    def generate(self, key: KeyLike) -> str:
        """Return the CSS for a key, compiling only when the cache is stale.

        Args:
            key: Stylesheet key (ArtifactKey, 'a/b' string or segment list).

        Returns:
            The generated CSS text.

        Raises:
            SourceNotFoundError: If no source root holds the key.
            PersistenceError: If caching is on and the cache write failed.
                The generated CSS is available as ``error.css``.
        """
        key = ArtifactKey.of(key)
        source = self.resolver.resolve_source(key)
        if source is None:
            raise SourceNotFoundError(key.segments, self.resolver.source_roots)

        destination = self.resolver.cache_path_for(key)

        if self.is_fresh(source, destination):
            self._log.debug("cache_hit", key=str(key), path=str(destination))
            return self._read_entry(destination)

        self._log.debug("cache_miss", key=str(key), source=str(source.path))
        css = self.render(source)

        if self.config.cache_enabled:
            self._persist(destination, css)

        return css

    def is_fresh(self, source: ResolvedSource, destination: Path) -> bool:
        """Whether the cache entry at destination can be served for source."""
        if not self.config.cache_enabled or not destination.exists():
            return False
        return destination.stat().st_mtime >= source.mtime

    def render(self, source: ResolvedSource) -> str:
        """Produce CSS for a source without consulting the cache."""
        text = read_verbatim(source.path)
        if source.kind is SourceKind.PASS_THROUGH:
            return text
        css = self.compiler.compile(text, source.path)
        return self.compiler.postprocess(
            css,
            self.config.compression_enabled,
            self.config.header_enabled,
            source.path,
        )

    @staticmethod
    def _read_entry(destination: Path) -> str:
        # Entries end with the newline written by _persist; it is not part of the CSS.
        text = read_verbatim(destination)
        return text[:-1] if text.endswith(ENTRY_TERMINATOR) else text

    def _persist(self, destination: Path, css: str) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(css + ENTRY_TERMINATOR, newline="")
        except OSError as e:
            raise PersistenceError(
                destination,
                css,
                internal_details=f"{type(e).__name__}: {e}",
            ) from e
        self._log.debug("cache_written", path=str(destination))
