"""Grafana dashboard models and loading."""

from dashlint.dashboards.loader import discover_dashboard_files, load_dashboard
from dashlint.dashboards.models import (
    Dashboard,
    Panel,
    Target,
    Template,
    datasource_ref,
)

__all__ = [
    "Dashboard",
    "Panel",
    "Target",
    "Template",
    "datasource_ref",
    "load_dashboard",
    "discover_dashboard_files",
]
