"""
dashlint configuration.

Provides:
- Pydantic-based settings (environment variables, .env files)
- Per-directory lint configuration files (rule exclusions and warnings)
"""

from dashlint.config.loader import (
    get_lint_config_path,
    load_lint_configuration,
    load_lint_configuration_file,
    save_lint_configuration,
)
from dashlint.config.settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Lint configuration files
    "get_lint_config_path",
    "load_lint_configuration",
    "load_lint_configuration_file",
    "save_lint_configuration",
]
