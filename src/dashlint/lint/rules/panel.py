"""Rules checking dashboard panels and the queries they run."""

from __future__ import annotations

from typing import Optional

import structlog

from dashlint.dashboards.models import Dashboard, Panel, datasource_ref
from dashlint.lint.promql import MatchType, PromQLParseError, check_matcher, parse_expr, vector_selectors
from dashlint.lint.results import Result
from dashlint.lint.rules.base import PanelRule, uses_datasource_variable

logger = structlog.get_logger()

MIXED_DATASOURCE = "-- Mixed --"

# Panel types that run datasource queries
QUERY_PANEL_TYPES = frozenset(
    {"graph", "timeseries", "singlestat", "stat", "gauge", "bargauge", "table", "heatmap", "barchart", "piechart"}
)

UNIT_PANEL_TYPES = frozenset({"timeseries", "graph", "stat", "singlestat", "gauge", "bargauge"})

# (label, template variable) pairs every selector must match with =~
REQUIRED_MATCHERS = (("job", "$job"), ("instance", "$instance"))


class PanelJobInstanceRule(PanelRule):
    """
    Require every selector in a panel's queries to filter on the job and
    instance template variables.

    Queries that do not parse as PromQL are not ours to judge and pass.
    """

    name = "panel-job-instance-rule"
    description = "Checks that every PromQL query has an instance and job matcher."

    def lint_panel(self, dashboard: Dashboard, panel: Panel) -> Result:
        for target in panel.targets:
            message = self._check_query(target.expr)
            if message is not None:
                return Result.error(
                    f"Dashboard '{dashboard.title}', panel '{panel.title}' "
                    f"invalid PromQL query '{target.expr}': {message}"
                )
        return Result.ok()

    def _check_query(self, query: str) -> Optional[str]:
        try:
            expr = parse_expr(query)
        except PromQLParseError as e:
            logger.debug("query_not_applicable", rule=self.name, query=query, error=str(e))
            return None

        for selector in vector_selectors(expr):
            for label, value in REQUIRED_MATCHERS:
                message = check_matcher(selector, label, MatchType.REGEX, value)
                if message is not None:
                    return message
        return None


class PanelDatasourceRule(PanelRule):
    """Require query panels to pick their datasource from the template variable."""

    name = "panel-datasource-rule"
    description = "Checks that each panel uses the templated datasource."

    def lint_panel(self, dashboard: Dashboard, panel: Panel) -> Result:
        if panel.type not in QUERY_PANEL_TYPES or not panel.targets:
            return Result.ok()

        ref = datasource_ref(panel.datasource)
        if ref is None or ref == MIXED_DATASOURCE:
            refs = [datasource_ref(target.datasource) for target in panel.targets]
        else:
            refs = [ref]

        for ref in refs:
            if not uses_datasource_variable(ref):
                return Result.error(
                    f"Dashboard '{dashboard.title}', panel '{panel.title}' does not use "
                    f"templated datasource, uses '{ref or ''}'"
                )
        return Result.ok()


class PanelTitleDescriptionRule(PanelRule):
    name = "panel-title-description-rule"
    description = "Checks that each panel has a title and description."

    def lint_panel(self, dashboard: Dashboard, panel: Panel) -> Result:
        if not panel.title.strip() or not panel.description.strip():
            return Result.error(
                f"Dashboard '{dashboard.title}', panel with id '{panel.id}' has missing title or description"
            )
        return Result.ok()


class PanelUnitsRule(PanelRule):
    name = "panel-units-rule"
    description = "Checks that each panel declares the unit of its values."

    def lint_panel(self, dashboard: Dashboard, panel: Panel) -> Result:
        if panel.type in UNIT_PANEL_TYPES and not panel.unit:
            return Result.error(
                f"Dashboard '{dashboard.title}', panel '{panel.title}' has no units defined"
            )
        return Result.ok()
