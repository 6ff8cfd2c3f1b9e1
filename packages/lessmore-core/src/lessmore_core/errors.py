"""Custom exception hierarchy for lessmore-core.

This module defines the exception classes used throughout lessmore:
- LessMoreError: Base exception for all lessmore errors
- SourceNotFoundError: Raised when an artifact key matches no source file
- PersistenceError: Raised when the cache tree cannot be written
- ConfigurationError: Raised when configuration or dependencies are unusable

Compiler faults are deliberately absent: whatever the stylesheet compiler
raises is propagated to the caller untranslated.

User-facing messages are safe to display. Technical details are logged
internally via structlog.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class LessMoreError(Exception):
    """Base exception for lessmore.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never exposed to the user.

    Example:
        >>> raise LessMoreError(
        ...     "Stylesheet generation failed",
        ...     internal_details="mkdir /app/tmp/less-cache: permission denied"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize LessMoreError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "lessmore_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class SourceNotFoundError(LessMoreError):
    """Raised when no registered source root holds a file for a key.

    Attributes:
        key: The requested key segments.
        searched_roots: Source roots that were searched, in order.

    Example:
        >>> raise SourceNotFoundError(("admin", "screen"), [Path("app/stylesheets")])
        # User sees: "Stylesheet 'admin/screen' not found in any source path"
    """

    def __init__(
        self,
        key: Sequence[str],
        searched_roots: Sequence[Path] = (),
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize SourceNotFoundError.

        Args:
            key: The requested key segments.
            searched_roots: Source roots that were searched.
            internal_details: Technical details for internal logging only.
        """
        self.key = tuple(key)
        self.searched_roots = list(searched_roots)
        user_message = f"Stylesheet '{'/'.join(self.key)}' not found in any source path"
        super().__init__(user_message, internal_details=internal_details)


class PersistenceError(LessMoreError):
    """Raised when a generated stylesheet cannot be written to disk.

    Generation itself succeeded, so the generated text travels with the
    error and callers may still serve it.

    Attributes:
        path: Destination path that could not be written.
        css: The generated stylesheet text.
    """

    def __init__(
        self,
        path: Path,
        css: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize PersistenceError.

        Args:
            path: Destination path that could not be written.
            css: The generated stylesheet text.
            internal_details: Technical details for internal logging only.
        """
        self.path = path
        self.css = css
        super().__init__(
            f"Could not write generated stylesheet to {path}",
            internal_details=internal_details,
        )


class ConfigurationError(LessMoreError):
    """Raised when configuration loading fails or a dependency is missing.

    Use this exception when:
    - lessmore.yaml cannot be parsed or fails validation
    - The LESS compiler package is not installed

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid setting",
        ...     file_path="lessmore.yaml",
        ...     field_path="compression",
        ... )
        # User sees: "Invalid setting (in lessmore.yaml, field 'compression')"
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path
