"""LESS compiler adapter.

Wraps the external LESS engine (lesscpy) behind a single compile()
operation and applies lessmore's post-processing: newline compression
and the auto-generated header banner.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import structlog

from lessmore_core.errors import ConfigurationError

logger = structlog.get_logger(__name__)

CompileFunction = Callable[[str, Path | None], str]

HEADER = (
    "/*\n\n\n\n\n\tThis file was auto generated by Less (http://lesscss.org). "
    "To change the contents of this file, edit %s instead.\n\n\n\n\n*/"
)

# Package that provides the LESS engine
ENGINE_PACKAGE = "lesscpy"


class _NamedSource(io.StringIO):
    """In-memory source that reports a file name to the engine."""

    def __init__(self, text: str, name: str) -> None:
        super().__init__(text)
        self.name = name


def load_engine() -> CompileFunction:
    """Import the LESS engine and return its compile function.

    Returns:
        Function mapping (source text, source path) to CSS.

    Raises:
        ConfigurationError: If lesscpy is not installed.
    """
    try:
        import lesscpy
    except ImportError as e:
        raise ConfigurationError(
            f"{e} (You may need to install the {ENGINE_PACKAGE} package)",
            internal_details=f"import {ENGINE_PACKAGE} failed: {e!r}",
        ) from e

    def _compile(source_text: str, source_path: Path | None) -> str:
        if source_path is None:
            return lesscpy.compile(io.StringIO(source_text), minify=False)
        return lesscpy.compile(_NamedSource(source_text, str(source_path)), minify=False)

    return _compile


def postprocess(css: str, compression: bool, header: bool, source_path: Path | str) -> str:
    """Apply compression and header injection to compiled CSS.

    Compression deletes every newline character. The header is prepended
    afterwards so it keeps its own line breaks.

    Args:
        css: Compiled CSS.
        compression: Remove all newlines.
        header: Prepend the auto-generated banner.
        source_path: Source file named in the banner.

    Returns:
        Post-processed CSS.

    Example:
        >>> postprocess("a {\\n  color: red;\\n}\\n", True, False, "screen.less")
        'a {  color: red;}'
    """
    if compression:
        css = css.replace("\n", "")
    if header:
        css = (HEADER % source_path) + css
    return css


class LessCompiler:
    """Adapter around the LESS engine.

    Attributes:
        compile_count: Number of engine invocations so far.

    Example:
        >>> compiler = LessCompiler()
        >>> css = compiler.compile("@c: #fff;\\na { color: @c; }", Path("screen.less"))
        >>> compiler.compile_count
        1
    """

    def __init__(self, engine: CompileFunction | None = None) -> None:
        """Initialize the adapter.

        Args:
            engine: Compile function to use. Loads lesscpy when None.

        Raises:
            ConfigurationError: If no engine is given and lesscpy is missing.
        """
        self._engine = engine if engine is not None else load_engine()
        self.compile_count = 0

    def compile(self, source_text: str, source_path: Path | None = None) -> str:
        """Compile LESS source text to CSS.

        Engine faults propagate unmodified.

        Args:
            source_text: LESS source.
            source_path: Source file the text came from (used for diagnostics).

        Returns:
            Compiled CSS.
        """
        self.compile_count += 1
        logger.debug("less_compile", source=str(source_path) if source_path else None)
        return self._engine(source_text, source_path)

    def postprocess(
        self,
        css: str,
        compression: bool,
        header: bool,
        source_path: Path | str,
    ) -> str:
        """Apply compression and header injection. See module-level postprocess()."""
        return postprocess(css, compression, header, source_path)
