"""lessmore-core: LESS stylesheet compilation with an mtime-based disk cache.

This package provides:
- LessMore: Facade for registering sources and generating stylesheets
- LessMoreConfig: Per-environment settings
- SourceResolver: Key/source/output path mapping
- CacheManager: Reuse-or-recompile decision
- BatchDriver: Whole-tree parse and clean
"""

from __future__ import annotations

__version__ = "0.1.0"

from lessmore_core.batch import BatchDriver, BatchFailure, BatchResult
from lessmore_core.bootstrap import default_source_roots, initialize
from lessmore_core.cache import CacheManager
from lessmore_core.compiler import HEADER, LessCompiler, postprocess
from lessmore_core.config import (
    ENVIRONMENT_DEFAULTS,
    ENVIRONMENT_VAR,
    LessMoreConfig,
    get_environment,
    is_heroku,
)
from lessmore_core.engine import LessMore
from lessmore_core.errors import (
    ConfigurationError,
    LessMoreError,
    PersistenceError,
    SourceNotFoundError,
)
from lessmore_core.resolver import SourceResolver
from lessmore_core.sources import ArtifactKey, ResolvedSource, SourceKind

__all__ = [
    "__version__",
    # Facade
    "LessMore",
    "initialize",
    "default_source_roots",
    # Configuration
    "LessMoreConfig",
    "ENVIRONMENT_DEFAULTS",
    "ENVIRONMENT_VAR",
    "get_environment",
    "is_heroku",
    # Components
    "SourceResolver",
    "CacheManager",
    "BatchDriver",
    "BatchResult",
    "BatchFailure",
    "LessCompiler",
    "postprocess",
    "HEADER",
    # Models
    "ArtifactKey",
    "ResolvedSource",
    "SourceKind",
    # Errors
    "LessMoreError",
    "SourceNotFoundError",
    "PersistenceError",
    "ConfigurationError",
]
