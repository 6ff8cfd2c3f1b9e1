"""Configuration model for lessmore.

This module provides:
- LessMoreConfig: Immutable settings shared by every lessmore component
- ENVIRONMENT_DEFAULTS: Per-environment defaults for compression/header/destination
- get_environment: Environment selection from LESSMORE_ENV
- is_heroku: Heroku detection (page caching is never used there)

Settings resolve in two tiers: an explicit value set on the config always
wins, otherwise the default for the active environment applies. Environments
without an entry in ENVIRONMENT_DEFAULTS use the production defaults.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from lessmore_core.errors import ConfigurationError

# Environment variable for environment selection
ENVIRONMENT_VAR = "LESSMORE_ENV"

DEFAULT_ENVIRONMENT = "development"

# Environment whose defaults apply to unrecognised environments
FALLBACK_ENVIRONMENT = "production"

ENVIRONMENT_DEFAULTS: dict[str, dict[str, Any]] = {
    "production": {
        "compression": True,
        "header": False,
        "destination_path": "stylesheets",
    },
    "development": {
        "compression": False,
        "header": True,
        "destination_path": "stylesheets",
    },
}

DEFAULT_CACHE_NAME = "less-cache"
DEFAULT_PLUGIN_SOURCE_PREFIX = "vendor/plugins"
DEFAULT_PLUGIN_ASSETS_DIR = "plugin-assets"

# Standard config file name
CONFIG_FILE_NAME = "lessmore.yaml"

_HEROKU_PATTERN = re.compile(r"^heroku", re.IGNORECASE)


def get_environment() -> str:
    """Get the current environment from the LESSMORE_ENV variable.

    Returns:
        Environment name (development, production, ...).
    """
    return os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)


def is_heroku(environ: Mapping[str, str] | None = None) -> bool:
    """Return True if any environment variable name starts with 'heroku'.

    Args:
        environ: Environment mapping to inspect. Defaults to os.environ.
    """
    environ = os.environ if environ is None else environ
    return any(_HEROKU_PATTERN.match(key) for key in environ)


class LessMoreConfig(BaseModel):
    """Settings for stylesheet compilation and caching.

    Attributes:
        project_root: Application root. The cache lives under tmp/ and
            generated stylesheets under public/.
        environment: Active environment name, selects the defaults.
        compression: Explicit compression override (None uses the default).
        header: Explicit header banner override (None uses the default).
        destination_path: Explicit public sub-path override (None uses the default).
        perform_caching: Host framework's caching flag. Enables the disk cache.
        cache_name: Directory name of the cache tree under tmp/.
        plugin_source_prefix: Project-relative directory holding plugins.
        plugin_assets_dir: Public directory for plugin-owned stylesheets.
        source_paths: Extra source roots registered at startup.

    Example:
        >>> config = LessMoreConfig(project_root=Path("/srv/app"), environment="production")
        >>> config.compression_enabled
        True
        >>> LessMoreConfig(project_root=Path("/srv/app"), compression=False).compression_enabled
        False
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_root: Path = Field(..., description="Application root directory")
    environment: str = Field(
        default_factory=get_environment,
        min_length=1,
        description="Active environment name",
    )
    compression: bool | None = Field(default=None, description="Strip newlines from output")
    header: bool | None = Field(default=None, description="Prepend auto-generated banner")
    destination_path: str | None = Field(
        default=None,
        description="Sub-path under public/ for generated stylesheets",
    )
    perform_caching: bool = Field(default=False, description="Enable the disk cache")
    cache_name: str = Field(default=DEFAULT_CACHE_NAME, min_length=1)
    plugin_source_prefix: str = Field(default=DEFAULT_PLUGIN_SOURCE_PREFIX, min_length=1)
    plugin_assets_dir: str = Field(default=DEFAULT_PLUGIN_ASSETS_DIR, min_length=1)
    source_paths: list[Path] = Field(default_factory=list)

    @field_validator("project_root")
    @classmethod
    def resolve_project_root(cls, v: Path) -> Path:
        """Normalize the project root to an absolute path."""
        return v.expanduser().resolve()

    def _setting(self, name: str) -> Any:
        explicit = getattr(self, name)
        if explicit is not None:
            return explicit
        defaults = ENVIRONMENT_DEFAULTS.get(
            self.environment, ENVIRONMENT_DEFAULTS[FALLBACK_ENVIRONMENT]
        )
        return defaults[name]

    @property
    def compression_enabled(self) -> bool:
        """Whether newlines are stripped from compiled output."""
        return bool(self._setting("compression"))

    @property
    def header_enabled(self) -> bool:
        """Whether the auto-generated banner is prepended to compiled output."""
        return bool(self._setting("header"))

    @property
    def destination(self) -> str:
        """Public sub-path where generated stylesheets live."""
        return str(self._setting("destination_path"))

    @property
    def cache_enabled(self) -> bool:
        """Whether generated stylesheets are cached on disk."""
        return self.perform_caching

    @property
    def page_cache(self) -> bool:
        """Whether startup should pre-generate the public stylesheet tree."""
        return self.perform_caching and not is_heroku()

    @property
    def cache_dir(self) -> Path:
        """Root of the internal cache tree."""
        return self.project_root / "tmp" / self.cache_name

    @property
    def public_dir(self) -> Path:
        """Root of the web-servable tree."""
        return self.project_root / "public"

    @property
    def plugin_root(self) -> Path:
        """Directory under which plugin-owned sources live."""
        return self.project_root / self.plugin_source_prefix

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> LessMoreConfig:
        """Load configuration from a lessmore.yaml file.

        project_root defaults to the directory holding the file. Keyword
        overrides that are not None take precedence over file values.

        Args:
            path: Path to the YAML file.
            **overrides: Field values that win over the file.

        Returns:
            Validated LessMoreConfig.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid.

        Example:
            >>> config = LessMoreConfig.from_yaml("lessmore.yaml", environment="production")
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError("Configuration file not found", file_path=str(path))

        try:
            with path.open("r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML",
                file_path=str(path),
                internal_details=str(e),
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Expected a mapping at top level", file_path=str(path))

        data.setdefault("project_root", str(path.parent))
        data.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field_path = ".".join(str(part) for part in first["loc"])
            raise ConfigurationError(
                f"Invalid configuration: {first['msg']}",
                file_path=str(path),
                field_path=field_path or None,
                internal_details=str(e),
            ) from e
