"""Shared test fixtures for lessmore-cli tests.

Provides CliRunner fixtures, a sample project on disk and a fake LESS
engine so commands run without lesscpy.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner, Result

import lessmore_core.compiler

SCREEN_LESS = "@color: red;\nbody {\n  color: @color;\n}\n"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Send warnings and errors to stderr; drop debug chatter."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove LESSMORE_ENV and Heroku variables from the environment."""
    for key in list(os.environ):
        if key == "LESSMORE_ENV" or key.lower().startswith("heroku"):
            monkeypatch.delenv(key)


def fake_less(source_text: str, source_path: Path | None) -> str:
    """Stand-in LESS engine substituting @color and keeping line breaks."""
    if "syntax-error" in source_text:
        raise ValueError("parse error near 'syntax-error'")
    lines = [line for line in source_text.splitlines() if not line.startswith("@color:")]
    return "\n".join(lines).replace("@color", "red") + "\n"


@pytest.fixture(autouse=True)
def fake_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    """Route LessCompiler() to the fake engine."""
    monkeypatch.setattr(lessmore_core.compiler, "load_engine", lambda: fake_less)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project with one application and one plugin stylesheet.

    Layout:
        app/stylesheets/screen.less
        app/stylesheets/_mixins.less
        vendor/plugins/blog/app/stylesheets/blog.less
    """
    root = tmp_path / "project"
    app = root / "app" / "stylesheets"
    plugin = root / "vendor" / "plugins" / "blog" / "app" / "stylesheets"
    app.mkdir(parents=True)
    plugin.mkdir(parents=True)
    (app / "screen.less").write_text(SCREEN_LESS)
    (app / "_mixins.less").write_text("@color: blue;\n")
    (plugin / "blog.less").write_text(SCREEN_LESS)
    return root.resolve()


@pytest.fixture
def run(cli_runner: CliRunner, project: Path) -> Callable[..., Result]:
    """Invoke the lessmore CLI against the sample project.

    Returns:
        Function taking command arguments and returning the click Result.
    """
    from lessmore_cli.main import cli

    def _run(*args: str, project_root: Path | None = None) -> Result:
        root = project_root or project
        return cli_runner.invoke(cli, [*args, "--project-root", str(root)])

    return _run
