"""lessmore generate command - Print the CSS for one stylesheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from lessmore_cli.context import build_engine, engine_options, parse_key
from lessmore_cli.errors import handle_lessmore_error

if TYPE_CHECKING:
    from lessmore_core.sources import ArtifactKey


@click.command()
@click.argument("key", callback=parse_key)
@engine_options
def generate(key: ArtifactKey, **options: Any) -> None:
    """Print the CSS for KEY (e.g. `screen` or `admin/screen`).

    Served from the disk cache when it is enabled and fresh. When the
    cache cannot be written the freshly generated CSS is still printed.

    Examples:

        lessmore generate screen

        lessmore generate admin/screen --cache --compression
    """
    from lessmore_core.errors import PersistenceError

    engine = build_engine(**options)

    try:
        css = engine.generate(key)
    except PersistenceError as e:
        css = e.css
    except Exception as e:
        handle_lessmore_error(e)

    click.echo(css)
