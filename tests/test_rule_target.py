"""Tests for lint/rules/target.py."""

import pytest
from dashlint.dashboards.models import Dashboard, Panel, Target
from dashlint.lint.results import Result, Severity
from dashlint.lint.rules import TargetPromQLRule


@pytest.fixture
def dashboard(prometheus_datasource_template):
    return Dashboard(title="dashboard", templates=[prometheus_datasource_template])


def lint(dashboard, expr, datasource=None, idx=0):
    target = Target(expr=expr, idx=idx, datasource=datasource)
    panel = Panel(title="panel", targets=[target])
    return TargetPromQLRule().lint_target(dashboard, panel, target)


class TestTargetPromQLRule:
    """Tests for target-promql-rule."""

    @pytest.mark.parametrize(
        "expr",
        [
            'sum(rate(foo{job=~"$job"}[5m]))',
            'sum(rate(foo{job=~"$job"}[$__rate_interval]))',
            "increase(foo[${__range}]) / $__range_s",
            "up",
            'max_over_time(rate(foo{job=~"$job",instance=~"$instance"}[5m])[1h:5m])',
            "max_over_time(rate(foo[$__rate_interval])[1h:])",
        ],
    )
    def test_valid(self, dashboard, expr):
        assert lint(dashboard, expr) == Result.ok()

    def test_invalid(self, dashboard):
        result = lint(dashboard, "sum(rate(foo[5m])", idx=2)

        assert result.severity == Severity.ERROR
        assert result.message.startswith(
            "Dashboard 'dashboard', panel 'panel', target idx '2' invalid PromQL query "
            "'sum(rate(foo[5m])': expected ')'"
        )

    def test_unknown_function(self, dashboard):
        result = lint(dashboard, "foo(bar)")
        assert "unknown function with name 'foo'" in result.message

    def test_deeply_nested_query_is_reported(self, dashboard):
        result = lint(dashboard, "(" * 400 + "foo" + ")" * 400)

        assert result.severity == Severity.ERROR
        assert "nested too deeply" in result.message

    def test_bare_template_variable(self, dashboard):
        assert not lint(dashboard, "rate(foo[$interval])").passed

    def test_empty_expr_passes(self, dashboard):
        assert lint(dashboard, "  ").passed

    def test_non_prometheus_dashboard_passes(self):
        assert lint(Dashboard(title="dashboard"), "not promql (").passed

    def test_non_prometheus_target_passes(self, dashboard):
        result = lint(dashboard, '{app="foo"} |= "error"', datasource={"type": "loki", "uid": "logs"})
        assert result.passed

    def test_prometheus_target_is_checked(self, dashboard):
        result = lint(dashboard, "sum(", datasource={"type": "prometheus", "uid": "$datasource"})
        assert not result.passed
