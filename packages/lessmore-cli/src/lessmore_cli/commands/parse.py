"""lessmore parse command - Generate the public stylesheet tree."""

from __future__ import annotations

from typing import Any

import click

from lessmore_cli.context import build_engine, engine_options
from lessmore_cli.errors import EXIT_USER_ERROR, handle_lessmore_error
from lessmore_cli.output import error, success


@click.command()
@engine_options
@click.option(
    "-k",
    "--keep-going",
    is_flag=True,
    default=False,
    help="Continue with the remaining stylesheets when one fails.",
)
def parse(keep_going: bool, **options: Any) -> None:
    """Generate every public stylesheet.

    Compiles all sources under the registered roots and writes them to
    public/<destination>, refreshing files whose source root changed.

    Examples:

        lessmore parse

        lessmore parse --env production --keep-going
    """
    engine = build_engine(fail_fast=not keep_going, **options)

    try:
        result = engine.parse_all()
    except Exception as e:
        handle_lessmore_error(e)

    for failure in result.failures:
        error(f"{failure.source}: {failure.error}")

    if not result.ok:
        error(f"{len(result.failures)} stylesheet(s) failed")
        raise SystemExit(EXIT_USER_ERROR)

    success(f"Wrote {len(result.written)} stylesheet(s), {len(result.skipped)} up to date")
