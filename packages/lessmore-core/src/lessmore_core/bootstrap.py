"""Startup wiring for host applications.

Registers the conventional source roots and prepares the public
stylesheet tree:
- <project>/app/stylesheets
- <project>/<plugin prefix>/<plugin>/app/stylesheets for each plugin
- every extra path listed in LessMoreConfig.source_paths

When page caching is on the public tree is generated up front,
otherwise any previously generated stylesheets are removed so requests
are served dynamically.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from lessmore_core.batch import BatchResult
from lessmore_core.engine import LessMore

logger = structlog.get_logger(__name__)

# Stylesheet directory inside an application or plugin
STYLESHEETS_DIR = Path("app") / "stylesheets"


def default_source_roots(engine: LessMore) -> list[Path]:
    """Conventional source roots that exist for the configured project.

    Returns:
        Existing directories, application first, then plugins by name,
        then configured extra paths.
    """
    config = engine.config
    roots: list[Path] = []

    app_root = config.project_root / STYLESHEETS_DIR
    if app_root.is_dir():
        roots.append(app_root)

    if config.plugin_root.is_dir():
        for plugin_dir in sorted(config.plugin_root.iterdir()):
            plugin_stylesheets = plugin_dir / STYLESHEETS_DIR
            if plugin_stylesheets.is_dir():
                roots.append(plugin_stylesheets)

    for extra in config.source_paths:
        path = extra if extra.is_absolute() else config.project_root / extra
        if path.is_dir():
            roots.append(path)
        else:
            logger.warning("source_path_missing", path=str(path))

    return roots


def initialize(engine: LessMore) -> BatchResult:
    """Register default source roots, then parse or clean.

    Args:
        engine: LessMore instance to wire up.

    Returns:
        Result of parse_all() when page caching is on, else of clean_all().
    """
    for root in default_source_roots(engine):
        engine.add_source_root(root)

    page_cache = engine.config.page_cache
    logger.info(
        "lessmore_initialized",
        environment=engine.config.environment,
        roots=[str(root) for root in engine.source_roots],
        page_cache=page_cache,
    )

    if page_cache:
        return engine.parse_all()
    return engine.clean_all()
