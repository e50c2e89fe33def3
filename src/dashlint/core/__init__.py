"""Core modules for dashlint - centralized definitions and utilities."""

from dashlint.core.errors import (
    ConfigurationError,
    DashboardLoadError,
    DashlintError,
    ExitCode,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "DashlintError",
    "ConfigurationError",
    "DashboardLoadError",
    "main_with_error_handling",
    "format_error_message",
]
