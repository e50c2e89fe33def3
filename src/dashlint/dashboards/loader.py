"""
Dashboard file loading.

Reads Grafana dashboard JSON files from disk into the read-only models the
lint rules consume.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import structlog

from dashlint.core.errors import DashboardLoadError
from dashlint.dashboards.models import Dashboard

logger = structlog.get_logger()


def load_dashboard(path: str | Path) -> Dashboard:
    """
    Load a single dashboard JSON file.

    Args:
        path: Path to the dashboard JSON file

    Returns:
        Dashboard model

    Raises:
        DashboardLoadError: If the file cannot be read or is not a JSON object
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise DashboardLoadError(f"could not read dashboard {path}: {e}", {"path": str(path)})
    except json.JSONDecodeError as e:
        raise DashboardLoadError(f"could not decode dashboard {path}: {e}", {"path": str(path)})

    if not isinstance(data, dict):
        raise DashboardLoadError(
            f"could not decode dashboard {path}: expected a JSON object", {"path": str(path)}
        )

    dashboard = Dashboard.from_dict(data)
    logger.debug(
        "dashboard_loaded",
        path=str(path),
        title=dashboard.title,
        panels=len(dashboard.panels),
        templates=len(dashboard.templates),
    )
    return dashboard


def discover_dashboard_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand directories into the ``*.json`` files they contain.

    Files are returned in argument order; directory contents are sorted.
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.glob("*.json") if p.is_file()))
        else:
            files.append(path)
    return files
