"""Unit tests for CacheManager.

This module tests the reuse-or-recompile decision:
- First generation compiles, post-processes and persists
- Unchanged sources are served from cache without compiling
- Newer sources force recompilation; equal mtimes count as fresh
- Pass-through CSS, disabled caching and failure modes
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import pytest

from lessmore_core.cache import CacheManager
from lessmore_core.compiler import HEADER, LessCompiler
from lessmore_core.config import LessMoreConfig
from lessmore_core.errors import PersistenceError, SourceNotFoundError
from lessmore_core.resolver import SourceResolver


@pytest.fixture
def make_manager(
    make_config: Callable[..., LessMoreConfig],
    app_stylesheets: Path,
    compiler: LessCompiler,
) -> Callable[..., CacheManager]:
    """Factory for a CacheManager over app/stylesheets."""

    def _make(**config_kwargs: object) -> CacheManager:
        config = make_config(**config_kwargs)
        resolver = SourceResolver(config, [app_stylesheets])
        return CacheManager(config, resolver, compiler)

    return _make


class TestFirstGeneration:
    """Tests for generation without a cache entry."""

    def test_compiles_and_persists(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
    ) -> None:
        """Output equals postprocess(compile(source)) and is cached with a newline."""
        source = write_source(app_stylesheets, "screen.less")
        manager = make_manager(perform_caching=True, compression=True, header=False)

        css = manager.generate(["screen"])

        expected = manager.compiler.postprocess(
            manager.compiler._engine(source.read_text(), source), True, False, source
        )
        assert css == expected == "body {  color: red;}"
        cache_file = project_root / "tmp" / "less-cache" / "screen.css"
        assert cache_file.read_text() == css + "\n"

    def test_header_names_source(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
    ) -> None:
        """In development the banner names the source file."""
        source = write_source(app_stylesheets, "screen.less")

        css = make_manager().generate("screen")

        assert css.startswith(HEADER % source)
        assert css.endswith("body {\n  color: red;\n}\n")

    def test_nested_key_creates_directories(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
    ) -> None:
        """Cache directories mirror the key."""
        write_source(app_stylesheets, "admin/forms/screen.lss")

        make_manager(perform_caching=True).generate(["admin", "forms", "screen"])

        assert (project_root / "tmp" / "less-cache" / "admin" / "forms" / "screen.css").is_file()


class TestCacheReuse:
    """Tests for the mtime comparison."""

    def test_second_call_served_from_cache(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
    ) -> None:
        """An unchanged source is not recompiled and output is identical."""
        write_source(app_stylesheets, "screen.less")
        manager = make_manager(perform_caching=True)

        first = manager.generate(["screen"])
        second = manager.generate(["screen"])

        assert second == first
        assert manager.compiler.compile_count == 1

    def test_hit_returns_cached_bytes_verbatim(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
        pin_mtime: Callable[[Path, float], None],
    ) -> None:
        """A fresh entry is returned as stored, without post-processing."""
        source = write_source(app_stylesheets, "screen.less")
        cache_file = project_root / "tmp" / "less-cache" / "screen.css"
        cache_file.parent.mkdir(parents=True)
        cache_file.write_text("cached!\n")
        now = time.time()
        pin_mtime(source, now - 10)
        pin_mtime(cache_file, now)

        manager = make_manager(perform_caching=True, compression=True, header=True)

        assert manager.generate(["screen"]) == "cached!"
        assert manager.compiler.compile_count == 0

    def test_equal_mtime_is_a_hit(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
        pin_mtime: Callable[[Path, float], None],
    ) -> None:
        """Identical timestamps favour the cache."""
        source = write_source(app_stylesheets, "screen.less")
        manager = make_manager(perform_caching=True)
        manager.generate(["screen"])
        cache_file = project_root / "tmp" / "less-cache" / "screen.css"

        stamp = time.time() - 100
        pin_mtime(source, stamp)
        pin_mtime(cache_file, stamp)
        manager.generate(["screen"])

        assert manager.compiler.compile_count == 1

    def test_touched_source_recompiles(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
        pin_mtime: Callable[[Path, float], None],
    ) -> None:
        """A source newer than its entry is recompiled and the entry overwritten."""
        source = write_source(app_stylesheets, "screen.less")
        manager = make_manager(perform_caching=True, header=False)
        manager.generate(["screen"])
        cache_file = project_root / "tmp" / "less-cache" / "screen.css"

        source.write_text("@color: red;\na {\n  color: @color;\n}\n")
        stamp = time.time() - 100
        pin_mtime(cache_file, stamp)
        pin_mtime(source, stamp + 1)

        css = manager.generate(["screen"])

        assert manager.compiler.compile_count == 2
        assert css == "a {\n  color: red;\n}\n"
        assert cache_file.read_text() == css + "\n"

    def test_caching_disabled_always_compiles(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
    ) -> None:
        """Without perform_caching nothing is read from or written to the cache."""
        write_source(app_stylesheets, "screen.less")
        manager = make_manager(perform_caching=False)

        manager.generate(["screen"])
        manager.generate(["screen"])

        assert manager.compiler.compile_count == 2
        assert not (project_root / "tmp").exists()


class TestPassThrough:
    """Tests for plain CSS sources."""

    def test_css_read_verbatim(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
    ) -> None:
        """CSS sources skip the compiler, compression and header."""
        write_source(app_stylesheets, "print.css", "body {\n  margin: 0;\n}\n")
        manager = make_manager(compression=True, header=True)

        assert manager.generate(["print"]) == "body {\n  margin: 0;\n}\n"
        assert manager.compiler.compile_count == 0

    def test_crlf_line_endings_kept(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        project_root: Path,
    ) -> None:
        """Carriage returns survive generation, the cache entry and a cache hit."""
        crlf = b"body {\r\n  margin: 0;\r\n}\r\n"
        (app_stylesheets / "print.css").write_bytes(crlf)
        manager = make_manager(perform_caching=True)

        first = manager.generate(["print"])
        second = manager.generate(["print"])

        assert first == second == crlf.decode()
        cache_file = project_root / "tmp" / "less-cache" / "print.css"
        assert cache_file.read_bytes() == crlf + b"\n"


class TestFailures:
    """Tests for failure modes."""

    def test_missing_source(
        self, make_manager: Callable[..., CacheManager], app_stylesheets: Path
    ) -> None:
        """Unknown keys raise SourceNotFoundError naming the key and roots."""
        with pytest.raises(SourceNotFoundError) as exc_info:
            make_manager().generate(["admin", "missing"])

        assert exc_info.value.key == ("admin", "missing")
        assert exc_info.value.searched_roots == [app_stylesheets]
        assert "admin/missing" in str(exc_info.value)

    def test_compiler_fault_propagates(
        self,
        make_config: Callable[..., LessMoreConfig],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
    ) -> None:
        """Compiler exceptions surface untranslated and nothing is cached."""
        write_source(app_stylesheets, "broken.less", "a {")

        def engine(text: str, path: Path | None) -> str:
            raise SyntaxError("unexpected end of input")

        config = make_config(perform_caching=True)
        manager = CacheManager(
            config, SourceResolver(config, [app_stylesheets]), LessCompiler(engine=engine)
        )

        with pytest.raises(SyntaxError, match="unexpected end of input"):
            manager.generate(["broken"])
        assert not (project_root / "tmp" / "less-cache" / "broken.css").exists()

    def test_write_failure_carries_css(
        self,
        make_manager: Callable[..., CacheManager],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
        project_root: Path,
    ) -> None:
        """A failed cache write raises PersistenceError holding the generated CSS."""
        write_source(app_stylesheets, "admin/screen.less")
        blocker = project_root / "tmp" / "less-cache" / "admin"
        blocker.parent.mkdir(parents=True)
        blocker.write_text("a file where a directory should be")

        with pytest.raises(PersistenceError) as exc_info:
            make_manager(perform_caching=True, header=False).generate(["admin", "screen"])

        assert exc_info.value.css == "body {\n  color: red;\n}\n"
        assert isinstance(exc_info.value.__cause__, OSError)


class TestEndToEnd:
    """Single stylesheet, compressed, generated twice."""

    def test_compressed_screen(
        self,
        make_config: Callable[..., LessMoreConfig],
        app_stylesheets: Path,
        write_source: Callable[..., Path],
    ) -> None:
        """Compressed output has no newlines and compiles only once."""
        write_source(app_stylesheets, "screen.less", "@color: red;\nbody {\n  color: @color;\n}\n")
        config = make_config(environment="production", perform_caching=True)
        compiler = LessCompiler(engine=lambda text, path: "body {\n  color: #ff0000;\n}\n")
        manager = CacheManager(config, SourceResolver(config, [app_stylesheets]), compiler)

        first = manager.generate(["screen"])
        second = manager.generate(["screen"])

        assert first == "body {  color: #ff0000;}"
        assert "\n" not in first
        assert second == first
        assert compiler.compile_count == 1
