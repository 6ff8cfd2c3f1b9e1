"""lessmore init command - Startup wiring for a project."""

from __future__ import annotations

from typing import Any

import click

from lessmore_cli.context import build_engine, engine_options
from lessmore_cli.errors import EXIT_USER_ERROR, handle_lessmore_error
from lessmore_cli.output import error, info, success, warning


@click.command()
@engine_options
def init(**options: Any) -> None:
    """Register the project's stylesheet roots, then parse or clean.

    With page caching on (`--cache`, not on Heroku) all public
    stylesheets are generated. Otherwise previously generated ones are
    removed so they are served dynamically.
    """
    from lessmore_core.bootstrap import initialize

    engine = build_engine(register_defaults=False, **options)

    try:
        result = initialize(engine)
    except Exception as e:
        handle_lessmore_error(e)

    if not engine.source_roots:
        warning("No stylesheet roots found under app/stylesheets or vendor/plugins")
    info(f"Source roots: {len(engine.source_roots)}")
    for failure in result.failures:
        error(f"{failure.source}: {failure.error}")
    if not result.ok:
        raise SystemExit(EXIT_USER_ERROR)

    if engine.config.page_cache:
        success(f"Wrote {len(result.written)} stylesheet(s), {len(result.skipped)} up to date")
    else:
        success(f"Deleted {len(result.deleted)} stylesheet(s)")
