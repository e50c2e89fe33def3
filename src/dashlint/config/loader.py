"""
Lint configuration file loading.

Each directory of dashboards may carry a ``.lint`` YAML file (the name is
configurable via ``DASHLINT_CONFIG_FILENAME``) declaring rule exclusions
and warnings:

    exclusions:
      panel-units-rule:
      panel-job-instance-rule:
        reason: Aggregated across all jobs
        entries:
          - dashboard: Overview
            panel: Requests
            targetIdx: 0
    warnings:
      template-instance-rule:
        reason: Single-instance service

A missing file is not an error and yields an empty configuration.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from dashlint.config.settings import get_settings
from dashlint.core.errors import ConfigurationError
from dashlint.lint.configuration import ConfigurationFile

logger = structlog.get_logger()


def get_lint_config_path(path: str | Path) -> Path:
    """
    Resolve the lint configuration path for a directory or dashboard file.

    Args:
        path: Directory holding dashboards, or a dashboard file within it

    Returns:
        Path of the lint configuration file (which may not exist)
    """
    path = Path(path)
    directory = path if path.is_dir() else path.parent
    return directory / get_settings().config_filename


def load_lint_configuration(path: str | Path) -> ConfigurationFile:
    """
    Load the lint configuration that applies to ``path``.

    Args:
        path: Directory or dashboard file; the configuration file is looked
              up in that directory

    Returns:
        ConfigurationFile, empty if no configuration file exists

    Raises:
        ConfigurationError: If the file exists but cannot be decoded
    """
    return load_lint_configuration_file(get_lint_config_path(path))


def load_lint_configuration_file(config_path: str | Path) -> ConfigurationFile:
    """Load an explicit lint configuration file; a missing file yields an empty one."""
    config_path = Path(config_path)
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug("lint_configuration_missing", path=str(config_path))
        return ConfigurationFile()
    except OSError as e:
        raise ConfigurationError(
            f"could not read lint configuration {config_path}: {e}",
            {"path": str(config_path)},
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"could not unmarshal lint configuration {config_path}: {e}",
            {"path": str(config_path)},
        )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"could not unmarshal lint configuration {config_path}: expected a mapping",
            {"path": str(config_path)},
        )

    try:
        config = ConfigurationFile.from_dict(data)
    except ValueError as e:
        raise ConfigurationError(
            f"could not unmarshal lint configuration {config_path}: {e}",
            {"path": str(config_path)},
        )

    logger.debug(
        "lint_configuration_loaded",
        path=str(config_path),
        exclusions=len(config.exclusions),
        warnings=len(config.warnings),
    )
    return config


def save_lint_configuration(config: ConfigurationFile, path: str | Path) -> Path:
    """
    Write a lint configuration next to dashboards.

    Args:
        config: Configuration to save
        path: Directory to write into, or an explicit file path

    Returns:
        Path that was written
    """
    path = Path(path)
    target_path = path / get_settings().config_filename if path.is_dir() else path
    target_path.parent.mkdir(parents=True, exist_ok=True)

    with open(target_path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info("saved_lint_configuration", path=str(target_path))
    return target_path
