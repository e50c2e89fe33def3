"""Rules checking individual panel targets."""

from __future__ import annotations

from dashlint.dashboards.models import Dashboard, Panel, Target
from dashlint.lint.promql import PromQLParseError, expand_interval_macros, parse_expr
from dashlint.lint.results import Result
from dashlint.lint.rules.base import PROMETHEUS_QUERY, TargetRule, is_prometheus_dashboard


class TargetPromQLRule(TargetRule):
    """Require every query of a Prometheus dashboard to be valid PromQL.

    Grafana interval macros are expanded first; any other template variable
    outside a string literal is reported, as Prometheus would reject it.
    """

    name = "target-promql-rule"
    description = "Checks that each target uses a valid PromQL query."

    def lint_target(self, dashboard: Dashboard, panel: Panel, target: Target) -> Result:
        if not is_prometheus_dashboard(dashboard) or not target.expr.strip():
            return Result.ok()

        # Targets can override the panel datasource with a non-Prometheus one
        if isinstance(target.datasource, dict):
            ds_type = target.datasource.get("type")
            if ds_type and ds_type != PROMETHEUS_QUERY:
                return Result.ok()

        try:
            parse_expr(expand_interval_macros(target.expr))
        except PromQLParseError as e:
            return Result.error(
                f"Dashboard '{dashboard.title}', panel '{panel.title}', target idx "
                f"'{target.idx}' invalid PromQL query '{target.expr}': {e}"
            )
        return Result.ok()
