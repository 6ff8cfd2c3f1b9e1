"""Shared pytest fixtures for lessmore-core tests.

Provides a project layout in tmp_path, a counting fake LESS engine and
helpers for writing sources and pinning modification times.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from lessmore_core.compiler import LessCompiler
from lessmore_core.config import ENVIRONMENT_VAR, LessMoreConfig

DEFAULT_LESS = "@color: red;\nbody {\n  color: @color;\n}\n"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove LESSMORE_ENV and any Heroku variables from the environment."""
    for key in list(os.environ):
        if key == ENVIRONMENT_VAR or key.lower().startswith("heroku"):
            monkeypatch.delenv(key)


def fake_less(source_text: str, source_path: Path | None) -> str:
    """Deterministic stand-in for the LESS engine.

    Substitutes a single @color variable and keeps line breaks, so
    compression is observable.
    """
    lines = [line for line in source_text.splitlines() if not line.startswith("@color:")]
    return "\n".join(lines).replace("@color", "red") + "\n"


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return an empty application root."""
    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def app_stylesheets(project_root: Path) -> Path:
    """Return <project>/app/stylesheets, created."""
    path = project_root / "app" / "stylesheets"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def plugin_stylesheets(project_root: Path) -> Path:
    """Return <project>/vendor/plugins/blog/app/stylesheets, created."""
    path = project_root / "vendor" / "plugins" / "blog" / "app" / "stylesheets"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def compiler() -> LessCompiler:
    """Return a LessCompiler backed by the fake engine."""
    return LessCompiler(engine=fake_less)


@pytest.fixture
def make_config(project_root: Path) -> Callable[..., LessMoreConfig]:
    """Factory for LessMoreConfig rooted at project_root (development by default)."""

    def _make(**kwargs: object) -> LessMoreConfig:
        kwargs.setdefault("environment", "development")
        return LessMoreConfig(project_root=project_root, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def write_source() -> Callable[..., Path]:
    """Factory writing a source file below a root, creating directories."""

    def _write(root: Path, relative: str, content: str = DEFAULT_LESS) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


def set_mtime(path: Path, timestamp: float) -> None:
    """Pin both atime and mtime of path."""
    os.utime(path, (timestamp, timestamp))


@pytest.fixture
def pin_mtime() -> Callable[[Path, float], None]:
    """Return the set_mtime helper as a fixture."""
    return set_mtime
