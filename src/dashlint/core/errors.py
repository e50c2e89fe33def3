"""
Unified error handling for dashlint CLI commands.

Rule violations are never raised; they are reported as results. The
exceptions here cover the I/O edges around the lint core: malformed
``.lint`` configuration files and unreadable dashboards.

Exit Codes:
- 0: Success
- 1: Lint failed (a result at or above the failing severity)
- 10: Configuration error
- 11: Dashboard load error
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    LINT_FAILED = 1
    CONFIG_ERROR = 10
    LOAD_ERROR = 11
    UNKNOWN_ERROR = 127


class DashlintError(Exception):
    """Base exception for dashlint errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DashlintError):
    """Raised when a lint configuration file cannot be decoded."""

    exit_code = ExitCode.CONFIG_ERROR


class DashboardLoadError(DashlintError):
    """Raised when a dashboard file cannot be read or decoded."""

    exit_code = ExitCode.LOAD_ERROR


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Turn exceptions escaping a CLI command into an exit code.

    Errors are logged with the command name (the function name without its
    ``_command`` suffix) and a one-line message is printed to stderr.

    Usage:
        @main_with_error_handling()
        def lint_command(paths: list[str]) -> int:
            ...

    Exit codes:
        - DashlintError subclasses: the error's exit_code
        - KeyboardInterrupt: 130 (SIGINT)
        - Other exceptions: 127
    """

    def decorator(func: F) -> F:
        command = func.__name__.removesuffix("_command")

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            log = logger.bind(command=command)
            try:
                return func(*args, **kwargs)
            except DashlintError as e:
                if log_errors:
                    log.error(
                        "command_failed",
                        error_type=type(e).__name__,
                        error=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                print(f"dashlint {command}: {format_error_message(e)}", file=sys.stderr)
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    log.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    log.exception("command_crashed", error_type=type(e).__name__)
                print(f"dashlint {command}: internal error: {e}", file=sys.stderr)
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: DashlintError) -> str:
    """Render ``message (key=value, ...)`` for the terminal."""
    if not error.details:
        return error.message
    detail_str = ", ".join(f"{key}={value}" for key, value in sorted(error.details.items()))
    return f"{error.message} ({detail_str})"
