"""Stylesheet source models.

This module provides:
- SourceKind: Whether a source is served as-is or needs compiling
- ArtifactKey: Logical stylesheet identifier (path segments, no extension)
- ResolvedSource: An existing source file under a registered root
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Marker prefix for import-only stylesheets
PARTIAL_PREFIX = "_"

# Extension of every generated artifact
OUTPUT_SUFFIX = ".css"


class SourceKind(str, Enum):
    """How a source file becomes CSS.

    - PASS_THROUGH: Plain CSS, served verbatim
    - COMPILE: LESS source, run through the compiler
    """

    PASS_THROUGH = "pass_through"
    COMPILE = "compile"


# Lookup order matters: the first extension with an existing file wins.
SOURCE_EXTENSIONS: dict[str, SourceKind] = {
    ".css": SourceKind.PASS_THROUGH,
    ".less": SourceKind.COMPILE,
    ".lss": SourceKind.COMPILE,
}


def kind_for(path: PurePath) -> SourceKind:
    """Return the SourceKind for a source path.

    Raises:
        ValueError: If the extension is not an accepted source extension.
    """
    try:
        return SOURCE_EXTENSIONS[path.suffix]
    except KeyError:
        msg = f"Unsupported stylesheet extension: {path.suffix or '(none)'}"
        raise ValueError(msg) from None


def is_partial(name: str) -> bool:
    """Return True if a file or segment name marks a partial."""
    return name.startswith(PARTIAL_PREFIX)


class ArtifactKey(BaseModel):
    """Logical identifier of a stylesheet.

    Directory segments plus a base name without extension, e.g.
    ("admin", "screen") for admin/screen.less.

    Attributes:
        segments: Non-empty tuple of path segments.

    Example:
        >>> key = ArtifactKey.from_string("admin/screen")
        >>> key.segments
        ('admin', 'screen')
        >>> ArtifactKey(segments=("_mixins",)).is_partial
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    segments: tuple[str, ...] = Field(..., min_length=1)

    @field_validator("segments")
    @classmethod
    def validate_segments(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject empty segments and segments containing separators."""
        for segment in v:
            if not segment or segment in (".", ".."):
                msg = f"Invalid key segment: {segment!r}"
                raise ValueError(msg)
            if "/" in segment or "\\" in segment:
                msg = f"Key segment cannot contain a path separator: {segment!r}"
                raise ValueError(msg)
        return v

    def __str__(self) -> str:
        """Return the slash-joined key."""
        return "/".join(self.segments)

    @property
    def name(self) -> str:
        """Base name (last segment)."""
        return self.segments[-1]

    @property
    def directories(self) -> tuple[str, ...]:
        """Directory segments preceding the base name."""
        return self.segments[:-1]

    @property
    def is_partial(self) -> bool:
        """Whether the key names an import-only partial."""
        return is_partial(self.name)

    @classmethod
    def of(cls, segments: ArtifactKey | str | tuple[str, ...] | list[str]) -> ArtifactKey:
        """Coerce a key, slash-separated string or segment sequence to an ArtifactKey."""
        if isinstance(segments, ArtifactKey):
            return segments
        if isinstance(segments, str):
            return cls.from_string(segments)
        return cls(segments=tuple(segments))

    @classmethod
    def from_string(cls, value: str) -> ArtifactKey:
        """Parse a slash-separated key such as 'admin/screen'."""
        return cls(segments=tuple(part for part in value.strip("/").split("/")))

    @classmethod
    def from_relative_path(cls, relative: PurePath) -> ArtifactKey:
        """Build the key for a source path relative to its root (extension dropped)."""
        parts = relative.parts
        return cls(segments=(*parts[:-1], relative.stem))


class ResolvedSource(BaseModel):
    """A source file that exists under one registered root.

    Attributes:
        path: Absolute path of the source file.
        root: The source root the file was found under.
        kind: PASS_THROUGH for .css, COMPILE for .less/.lss.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path
    root: Path
    kind: SourceKind

    @classmethod
    def at(cls, path: Path, root: Path) -> ResolvedSource:
        """Create a ResolvedSource, deriving kind from the extension."""
        return cls(path=path, root=root, kind=kind_for(path))

    @property
    def relative_path(self) -> Path:
        """Path of the source relative to its root."""
        return self.path.relative_to(self.root)

    @property
    def output_relative_path(self) -> Path:
        """Relative path of the generated artifact (extension swapped to .css)."""
        return self.relative_path.with_suffix(OUTPUT_SUFFIX)

    @property
    def key(self) -> ArtifactKey:
        """Logical key of this source."""
        return ArtifactKey.from_relative_path(self.relative_path)

    @property
    def mtime(self) -> float:
        """Modification time of the source file."""
        return self.path.stat().st_mtime
