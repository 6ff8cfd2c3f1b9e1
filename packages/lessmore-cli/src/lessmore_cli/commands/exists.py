"""lessmore exists command - Check that a stylesheet can be generated."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from lessmore_cli.context import build_engine, engine_options, parse_key
from lessmore_cli.errors import EXIT_USER_ERROR
from lessmore_cli.output import error, success

if TYPE_CHECKING:
    from lessmore_core.sources import ArtifactKey


@click.command()
@click.argument("key", callback=parse_key)
@engine_options
def exists(key: ArtifactKey, **options: Any) -> None:
    """Exit 0 if KEY names a stylesheet, 1 otherwise.

    Partials (names starting with `_`) never count as existing.
    """
    engine = build_engine(**options)

    if engine.exists(key):
        success(f"{key} exists")
        return

    error(f"{key} not found")
    raise SystemExit(EXIT_USER_ERROR)
