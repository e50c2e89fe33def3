"""Tests for lint/linter.py.

Tests for rule scoping, result contexts and the built-in rule set.
"""

import pytest
from dashlint.dashboards.models import Dashboard, Panel, Target
from dashlint.lint.configuration import ConfigurationFile
from dashlint.lint.linter import Linter
from dashlint.lint.results import Result, ResultSet, Severity
from dashlint.lint.rules import DashboardRule, PanelRule, TargetRule, builtin_rules


class RecordingRule(DashboardRule, PanelRule, TargetRule):
    """Rule implementing every scope that records its invocations."""

    name = "recording-rule"
    description = "Records calls"

    def __init__(self):
        self.calls = []

    def lint_dashboard(self, dashboard):
        self.calls.append(("dashboard", dashboard.title))
        return Result.ok()

    def lint_panel(self, dashboard, panel):
        self.calls.append(("panel", panel.title))
        return Result.ok()

    def lint_target(self, dashboard, panel, target):
        self.calls.append(("target", panel.title, target.idx))
        return Result.error(f"target {target.idx}")


class FailingDashboardRule(DashboardRule):
    name = "failing-dashboard-rule"
    description = "Always fails"

    def lint_dashboard(self, dashboard):
        return Result.error(f"Dashboard '{dashboard.title}' is bad")


@pytest.fixture
def dashboard():
    return Dashboard(
        title="dash",
        panels=[
            Panel(title="p1", targets=[Target(expr="a", idx=0), Target(expr="b", idx=1)]),
            Panel(title="p2"),
        ],
    )


class TestLinter:
    """Tests for Linter."""

    def test_scopes_are_evaluated_in_order(self, dashboard):
        rule = RecordingRule()

        Linter([rule]).lint([dashboard])

        assert rule.calls == [
            ("dashboard", "dash"),
            ("panel", "p1"),
            ("target", "p1", 0),
            ("target", "p1", 1),
            ("panel", "p2"),
        ]

    def test_contexts_carry_scope(self, dashboard):
        result_set = Linter([RecordingRule()]).lint([dashboard])

        targets = [ctx for ctx in result_set.results if ctx.target is not None]
        assert [(ctx.panel.title, ctx.target.idx) for ctx in targets] == [("p1", 0), ("p1", 1)]
        assert all(ctx.dashboard is dashboard for ctx in result_set.results)
        assert all(ctx.rule.name == "recording-rule" for ctx in result_set.results)

        dashboard_scoped = result_set.results[0]
        assert dashboard_scoped.panel is None
        assert dashboard_scoped.target is None

    def test_one_result_per_evaluation(self, dashboard):
        result_set = Linter([RecordingRule(), FailingDashboardRule()]).lint([dashboard, dashboard])

        # recording: 1 dashboard + 2 panels + 2 targets; failing: 1 dashboard
        assert len(result_set) == 12

    def test_lint_dashboard_appends(self, dashboard):
        result_set = ResultSet()
        linter = Linter([FailingDashboardRule()])

        linter.lint_dashboard(dashboard, result_set)
        linter.lint_dashboard(Dashboard(title="other"), result_set)

        assert [ctx.result.message for ctx in result_set.results] == [
            "Dashboard 'dash' is bad",
            "Dashboard 'other' is bad",
        ]

    def test_lint_applies_configuration(self, dashboard):
        config = ConfigurationFile().exclude("failing-dashboard-rule", dashboard="dash")

        result_set = Linter([FailingDashboardRule()]).lint(
            [dashboard, Dashboard(title="other")], config
        )

        severities = [ctx.result.severity for ctx in result_set.results]
        assert severities == [Severity.EXCLUDE, Severity.ERROR]

    def test_duplicate_rule_name(self):
        linter = Linter([FailingDashboardRule()])

        with pytest.raises(ValueError, match="duplicate rule name"):
            linter.add_rule(FailingDashboardRule())

    def test_get_rule(self):
        linter = Linter.default()

        assert linter.get_rule("panel-units-rule") is not None
        assert linter.get_rule("no-such-rule") is None

    def test_empty_linter(self, dashboard):
        assert len(Linter().lint([dashboard])) == 0


class TestBuiltinRules:
    """Tests for the built-in rule set."""

    def test_names(self):
        assert [rule.name for rule in builtin_rules()] == [
            "template-datasource-rule",
            "template-job-rule",
            "template-instance-rule",
            "panel-datasource-rule",
            "panel-title-description-rule",
            "panel-units-rule",
            "panel-job-instance-rule",
            "target-promql-rule",
        ]

    def test_every_rule_has_description(self):
        for rule in builtin_rules():
            assert rule.description

    def test_conforming_dashboard_passes(self, conforming_dashboard):
        result_set = Linter.default().lint([conforming_dashboard])

        failures = [ctx.result.message for ctx in result_set.results if not ctx.result.passed]
        assert failures == []
        assert result_set.maximum_severity() == Severity.SUCCESS

    def test_nonconforming_dashboard(self, conforming_dashboard):
        conforming_dashboard.panels.append(
            Panel(title="Memory", type="timeseries", id=2, datasource="Prometheus",
                  targets=[Target(expr="node_memory_MemFree_bytes")])
        )

        by_rule = Linter.default().lint([conforming_dashboard]).by_rule()

        failing = {
            name for name, contexts in by_rule.items()
            if any(ctx.result.severity == Severity.ERROR for ctx in contexts)
        }
        assert failing == {
            "panel-datasource-rule",
            "panel-title-description-rule",
            "panel-units-rule",
            "panel-job-instance-rule",
        }
