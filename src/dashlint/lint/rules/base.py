"""Base classes for lint rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dashlint.dashboards.models import Dashboard, Panel, Target
from dashlint.lint.results import Result

DATASOURCE_VARIABLES = ("$datasource", "${datasource}")
PROMETHEUS_QUERY = "prometheus"


class Rule(ABC):
    """A named lint check.

    ``name`` keys exclusions and warnings in lint configuration files, so it
    must never change once released. ``description`` heads the rule's
    section in reports.

    Concrete rules inherit one or more of DashboardRule, PanelRule and
    TargetRule. Every entry point returns exactly one Result and never
    raises: input the rule does not understand is reported as passing.
    """

    name: str = "base"
    description: str = "Base rule"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class DashboardRule(Rule):
    """Rule evaluated once per dashboard."""

    @abstractmethod
    def lint_dashboard(self, dashboard: Dashboard) -> Result:
        """Lint a whole dashboard."""


class PanelRule(Rule):
    """Rule evaluated once per panel."""

    @abstractmethod
    def lint_panel(self, dashboard: Dashboard, panel: Panel) -> Result:
        """Lint a single panel of a dashboard."""


class TargetRule(Rule):
    """Rule evaluated once per panel target."""

    @abstractmethod
    def lint_target(self, dashboard: Dashboard, panel: Panel, target: Target) -> Result:
        """Lint a single query target of a panel."""


def is_prometheus_dashboard(dashboard: Dashboard) -> bool:
    """Whether the dashboard selects its datasource from Prometheus instances."""
    return any(
        template.query == PROMETHEUS_QUERY
        for template in dashboard.get_templates_by_type("datasource")
    )


def uses_datasource_variable(ref: str | None) -> bool:
    return ref in DATASOURCE_VARIABLES
