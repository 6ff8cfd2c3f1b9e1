"""Source path resolution for lessmore.

This module handles mapping between logical stylesheet keys and files:
- SourceResolver: Registered source roots, key lookup, enumeration
- Cache and public output path derivation, including plugin namespacing

Lookup order is root registration order first, then extension order
(.css, .less, .lss). The first existing file wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from lessmore_core.config import LessMoreConfig
from lessmore_core.sources import (
    OUTPUT_SUFFIX,
    SOURCE_EXTENSIONS,
    ArtifactKey,
    ResolvedSource,
    is_partial,
)

logger = structlog.get_logger(__name__)

KeyLike = ArtifactKey | str | Sequence[str]


class SourceResolver:
    """Resolves stylesheet keys against an ordered list of source roots.

    Attributes:
        config: Shared lessmore configuration.

    Example:
        >>> resolver = SourceResolver(config)
        >>> resolver.add_source_root("app/stylesheets")
        >>> source = resolver.resolve_source(["admin", "screen"])
        >>> resolver.derived_path_for(source)
        PosixPath('/srv/app/public/stylesheets/admin/screen.css')
    """

    def __init__(self, config: LessMoreConfig, roots: Iterable[Path | str] = ()) -> None:
        """Initialize the resolver.

        Args:
            config: Shared lessmore configuration.
            roots: Initial source roots, registered in order.
        """
        self.config = config
        self._roots: list[Path] = []
        self._log = logger.bind(component="source_resolver")
        for root in roots:
            self.add_source_root(root)

    @property
    def source_roots(self) -> tuple[Path, ...]:
        """Registered source roots in registration order."""
        return tuple(self._roots)

    def add_source_root(self, path: Path | str) -> None:
        """Register a source root. Already registered roots are ignored.

        Args:
            path: Directory scanned recursively for stylesheets.
        """
        root = Path(path).expanduser().resolve()
        if root in self._roots:
            return
        self._roots.append(root)
        self._log.debug("source_root_added", root=str(root), position=len(self._roots))

    def set_source_root(self, path: Path | str) -> None:
        """Replace all registered roots with a single root."""
        self._roots.clear()
        self.add_source_root(path)

    def _find_in_root(self, root: Path, key: ArtifactKey) -> Path | None:
        for suffix in SOURCE_EXTENSIONS:
            candidate = root.joinpath(*key.directories, key.name + suffix)
            if candidate.is_file():
                return candidate
        return None

    def resolve_source(self, key: KeyLike) -> ResolvedSource | None:
        """Find the source file for a key.

        Args:
            key: Stylesheet key (ArtifactKey, 'a/b' string or segment list).

        Returns:
            The first match across roots, or None if no root holds the key.
        """
        key = ArtifactKey.of(key)
        for root in self._roots:
            found = self._find_in_root(root, key)
            if found is not None:
                return ResolvedSource.at(found, root)

        # A retry under the first root would repeat the loop's first lookup.
        self._log.debug("source_not_found", key=str(key), roots=len(self._roots))
        return None

    def exists(self, key: KeyLike) -> bool:
        """Return True if a non-partial key resolves to a source file."""
        key = ArtifactKey.of(key)
        if key.is_partial:
            return False
        return self.resolve_source(key) is not None

    def cache_path_for(self, key: KeyLike) -> Path:
        """Path of the internal cache entry for a key."""
        key = ArtifactKey.of(key)
        return self.config.cache_dir.joinpath(*key.directories, key.name + OUTPUT_SUFFIX)

    def plugin_name_for(self, source: ResolvedSource) -> str | None:
        """Name of the plugin owning a source, or None for application sources."""
        try:
            relative = source.path.relative_to(self.config.plugin_root)
        except ValueError:
            return None
        if len(relative.parts) < 2:
            return None
        return relative.parts[0]

    def derived_path_for(self, source: ResolvedSource, destination: str | None = None) -> Path:
        """Public output path for a source.

        Plugin sources go to public/<plugin-assets>/<plugin>/<destination>/,
        all others to public/<destination>/. The source's path below its
        root is mirrored with the extension swapped to .css.

        Args:
            source: Resolved source file.
            destination: Destination sub-path. Defaults to the configured one.

        Returns:
            Absolute path of the generated stylesheet.
        """
        destination = destination if destination is not None else self.config.destination
        relative = source.output_relative_path
        plugin = self.plugin_name_for(source)
        if plugin is not None:
            base = self.config.public_dir / self.config.plugin_assets_dir / plugin / destination
        else:
            base = self.config.public_dir / destination
        return base / relative

    def enumerate_all(self, roots: Iterable[Path] | None = None) -> list[ResolvedSource]:
        """List every compilable, non-partial source.

        Results are grouped by root in the order given (registration order
        by default). Order within a root is not significant.

        Args:
            roots: Roots to scan. Defaults to all registered roots.
        """
        scan = self._roots if roots is None else [Path(root) for root in roots]
        sources: list[ResolvedSource] = []
        for root in scan:
            for suffix in SOURCE_EXTENSIONS:
                for path in sorted(root.rglob(f"*{suffix}")):
                    if path.is_file() and not is_partial(path.name):
                        sources.append(ResolvedSource.at(path, root))
        return sources
