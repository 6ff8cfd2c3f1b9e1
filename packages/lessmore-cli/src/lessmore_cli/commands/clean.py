"""lessmore clean command - Remove generated public stylesheets."""

from __future__ import annotations

from typing import Any

import click

from lessmore_cli.context import build_engine, engine_options
from lessmore_cli.errors import EXIT_SYSTEM_ERROR, handle_lessmore_error
from lessmore_cli.output import error, success


@click.command()
@engine_options
@click.option(
    "-k",
    "--keep-going",
    is_flag=True,
    default=False,
    help="Continue with the remaining stylesheets when a delete fails.",
)
def clean(keep_going: bool, **options: Any) -> None:
    """Remove the public stylesheet generated for each source.

    Sources themselves and the internal cache under tmp/ are left alone.

    Examples:

        lessmore clean

        lessmore clean --destination css
    """
    engine = build_engine(fail_fast=not keep_going, **options)

    try:
        result = engine.clean_all()
    except Exception as e:
        handle_lessmore_error(e)

    for failure in result.failures:
        error(f"{failure.source}: {failure.error}")

    if not result.ok:
        raise SystemExit(EXIT_SYSTEM_ERROR)

    success(f"Deleted {len(result.deleted)} stylesheet(s)")
