"""CLI entry point for lessmore.

This module defines the main CLI group using the LazyGroup pattern so
--help stays fast: command modules (and lessmore-core with its compiler)
are only imported when a command is invoked.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from lessmore_cli import __version__
from lessmore_cli.logging import configure_logging
from lessmore_cli.output import set_no_color

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"parse": "lessmore_cli.commands.parse.parse"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return sorted command names, lazy and directly registered."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing its module on first use."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "parse": "lessmore_cli.commands.parse.parse",
    "clean": "lessmore_cli.commands.clean.clean",
    "generate": "lessmore_cli.commands.generate.generate",
    "exists": "lessmore_cli.commands.exists.exists",
    "init": "lessmore_cli.commands.init.init",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="lessmore")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log cache hits, misses and writes to stderr.",
)
def cli(verbose: bool) -> None:
    """lessmore - LESS stylesheets with an on-disk cache.

    Compiles `.less`/`.lss` sources (and passes `.css` through) from
    `app/stylesheets` and plugin stylesheet directories into `public/`.

    **Commands:**

    - `lessmore parse` - Generate all public stylesheets
    - `lessmore clean` - Remove generated public stylesheets
    - `lessmore generate screen` - Print the CSS for one stylesheet
    - `lessmore exists admin/screen` - Check a stylesheet exists
    - `lessmore init` - Parse or clean depending on the environment
    """
    configure_logging(verbose=verbose)


if __name__ == "__main__":
    cli()
