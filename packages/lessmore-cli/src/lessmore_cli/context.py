"""Shared options and engine construction for lessmore commands.

Every command accepts the same project/configuration options; they are
declared once here and turned into a ready-to-use LessMore instance by
build_engine().
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import click

from lessmore_cli.errors import CLIError, format_pydantic_error, handle_lessmore_error
from lessmore_cli.output import notice

if TYPE_CHECKING:
    from lessmore_core import LessMore, LessMoreConfig

F = TypeVar("F", bound=Callable[..., Any])

_ENGINE_OPTIONS = [
    click.option(
        "-p",
        "--project-root",
        "project_root",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Application root [default: directory of --config, else .]",
    ),
    click.option(
        "-e",
        "--env",
        "environment",
        type=str,
        default=None,
        help="Environment name [default: $LESSMORE_ENV or development]",
    ),
    click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Path to lessmore.yaml [default: <project-root>/lessmore.yaml if present]",
    ),
    click.option(
        "--compression/--no-compression",
        default=None,
        help="Strip newlines from compiled CSS.",
    ),
    click.option(
        "--header/--no-header",
        default=None,
        help="Prepend the auto-generated banner.",
    ),
    click.option(
        "-d",
        "--destination",
        "destination_path",
        type=str,
        default=None,
        help="Sub-path under public/ for generated stylesheets.",
    ),
    click.option(
        "--cache/--no-cache",
        "perform_caching",
        default=None,
        help="Use the disk cache under tmp/.",
    ),
    click.option(
        "-s",
        "--source",
        "sources",
        type=click.Path(file_okay=False, path_type=Path),
        multiple=True,
        help="Additional source root (repeatable). Searched before the defaults.",
    ),
]


def engine_options(func: F) -> F:
    """Decorate a command with the shared project/configuration options."""
    for option in reversed(_ENGINE_OPTIONS):
        func = option(func)
    return func


def load_config(
    project_root: Path | None,
    config_path: Path | None = None,
    **overrides: Any,
) -> LessMoreConfig:
    """Load LessMoreConfig from lessmore.yaml (if any) plus CLI overrides.

    Args:
        project_root: Application root. None uses the config file's
            directory, or the working directory when there is no file.
        config_path: Explicit config file. Falls back to <project_root>/lessmore.yaml.
        **overrides: Setting overrides; None values are ignored.

    Returns:
        Validated configuration.

    Raises:
        CLIError: If the config file or an override is invalid.
    """
    from pydantic import ValidationError as PydanticValidationError

    from lessmore_core.config import CONFIG_FILE_NAME, LessMoreConfig

    settings = {key: value for key, value in overrides.items() if value is not None}
    candidate = config_path or (project_root or Path(".")) / CONFIG_FILE_NAME

    try:
        if config_path is not None or candidate.exists():
            return LessMoreConfig.from_yaml(candidate, project_root=project_root, **settings)
        return LessMoreConfig(project_root=project_root or Path("."), **settings)
    except PydanticValidationError as e:
        raise CLIError(format_pydantic_error(e)) from e
    except Exception as e:
        handle_lessmore_error(e)


def build_engine(
    *,
    project_root: Path | None,
    config_path: Path | None,
    sources: tuple[Path, ...] = (),
    fail_fast: bool = True,
    register_defaults: bool = True,
    **overrides: Any,
) -> LessMore:
    """Create a LessMore instance from command options.

    Explicit --source roots are registered first, then the conventional
    application and plugin roots.

    Raises:
        CLIError: If configuration is invalid or lesscpy is not installed.
    """
    from lessmore_core import LessMore, default_source_roots

    config = load_config(project_root, config_path, **overrides)

    try:
        engine = LessMore(config, roots=sources, fail_fast=fail_fast, notify=notice)
    except Exception as e:
        handle_lessmore_error(e)

    if register_defaults:
        for root in default_source_roots(engine):
            engine.add_source_root(root)
    return engine


def parse_key(ctx: click.Context, param: click.Parameter, value: str) -> Any:
    """Click callback turning 'admin/screen' into an ArtifactKey."""
    from lessmore_core.sources import ArtifactKey

    try:
        return ArtifactKey.from_string(value)
    except ValueError as e:
        raise click.BadParameter(f"'{value}' is not a valid stylesheet key") from e
