"""CLI error handling for lessmore-cli.

This module wraps lessmore-core exceptions into user-friendly
messages with appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from lessmore_cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

# Exit codes following sysexits.h convention
EXIT_USER_ERROR = 1  # User error (missing stylesheet, compile failure, bad config)
EXIT_SYSTEM_ERROR = 2  # System error (permissions, write failure, missing dependency)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Args:
        err: Pydantic ValidationError instance.

    Returns:
        Formatted error message with field paths and issues.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - environment: String should have at least 1 character"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}")

    return "\n".join(lines)


def handle_lessmore_error(err: Exception) -> NoReturn:
    """Translate a lessmore-core exception into a CLIError.

    Args:
        err: Exception raised by lessmore-core.

    Raises:
        CLIError: Always. The exit code depends on the error type.
    """
    from lessmore_core.errors import (
        ConfigurationError,
        LessMoreError,
        PersistenceError,
        SourceNotFoundError,
    )

    if isinstance(err, SourceNotFoundError):
        raise CLIError(err.user_message) from err
    if isinstance(err, PersistenceError):
        raise CLIError(err.user_message, exit_code=EXIT_SYSTEM_ERROR) from err
    if isinstance(err, ConfigurationError):
        # Without a config file the problem is the installation, not the user input
        exit_code = EXIT_USER_ERROR if err.file_path else EXIT_SYSTEM_ERROR
        raise CLIError(err.user_message, exit_code=exit_code) from err
    if isinstance(err, LessMoreError):
        raise CLIError(err.user_message) from err
    if isinstance(err, PermissionError):
        handle_permission_error(str(err.filename or ""), "write")
    raise CLIError(f"Compilation failed: {err}") from err


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Handle permission errors.

    Args:
        path: Path that caused the permission error.
        operation: Operation that failed (read, write, etc.).

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_SYSTEM_ERROR,
    )
