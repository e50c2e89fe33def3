"""Tests for lint/results.py.

Tests for severities, result contexts and the result set.
"""

import pytest
from dashlint.dashboards.models import Dashboard
from dashlint.lint.configuration import ConfigurationFile
from dashlint.lint.results import (
    Result,
    ResultContext,
    ResultSet,
    Severity,
    maximum_severity,
)
from dashlint.lint.rules.base import DashboardRule


class StubRule(DashboardRule):
    """Rule with a configurable name for building contexts."""

    description = "Stub Rule"

    def __init__(self, name: str):
        self.name = name

    def lint_dashboard(self, dashboard):
        return Result.ok()


def make_context(rule="rule1", dashboard=None, severity=Severity.ERROR, message="foo"):
    return ResultContext(
        result=Result(severity=severity, message=message),
        rule=StubRule(rule),
        dashboard=Dashboard(title=dashboard) if dashboard is not None else None,
    )


class TestSeverity:
    """Tests for the Severity scale."""

    def test_ordering(self):
        assert Severity.SUCCESS < Severity.EXCLUDE < Severity.WARNING < Severity.ERROR

    def test_symbols(self):
        assert Severity.SUCCESS.symbol == "✔️"
        assert Severity.EXCLUDE.symbol == "➖"
        assert Severity.WARNING.symbol == "⚠️"
        assert Severity.ERROR.symbol == "❌"
        assert Severity.QUIET.symbol == ""


class TestMaximumSeverity:
    """Tests for maximum_severity folding."""

    def test_empty_is_success(self):
        assert maximum_severity([]) == Severity.SUCCESS

    @pytest.mark.parametrize(
        "severities,expected",
        [
            ([Severity.SUCCESS], Severity.SUCCESS),
            ([Severity.EXCLUDE, Severity.SUCCESS], Severity.EXCLUDE),
            ([Severity.WARNING, Severity.EXCLUDE], Severity.WARNING),
            ([Severity.SUCCESS, Severity.ERROR, Severity.WARNING], Severity.ERROR),
        ],
    )
    def test_returns_greatest(self, severities, expected):
        assert maximum_severity(severities) == expected

    def test_quiet_is_ignored(self):
        assert maximum_severity([Severity.WARNING, Severity.QUIET]) == Severity.WARNING
        assert maximum_severity([Severity.QUIET]) == Severity.SUCCESS


class TestResult:
    """Tests for Result and ResultContext."""

    def test_ok(self):
        result = Result.ok()
        assert result == Result(severity=Severity.SUCCESS, message="OK")
        assert result.passed

    def test_error(self):
        result = Result.error("broken")
        assert result.severity == Severity.ERROR
        assert result.message == "broken"
        assert not result.passed

    def test_result_is_immutable(self):
        result = Result.ok()
        with pytest.raises(AttributeError):
            result.severity = Severity.ERROR

    def test_format_line(self):
        ctx = make_context(severity=Severity.ERROR, message="bad panel")
        assert ctx.format_line() == "[❌] bad panel"

    def test_format_line_quiet(self):
        ctx = make_context(severity=Severity.QUIET)
        assert ctx.format_line() is None

    def test_rule_name_and_dashboard_title(self):
        ctx = make_context(rule="rule9", dashboard="dash")
        assert ctx.rule_name == "rule9"
        assert ctx.dashboard_title == "dash"

    def test_missing_scope(self):
        ctx = ResultContext(result=Result.ok())
        assert ctx.rule_name == ""
        assert ctx.dashboard_title == ""


class TestResultSet:
    """Tests for ResultSet."""

    def test_maximum_severity_empty(self):
        assert ResultSet().maximum_severity() == Severity.SUCCESS

    def test_maximum_severity(self):
        rs = ResultSet()
        rs.add_result(make_context(severity=Severity.SUCCESS))
        rs.add_result(make_context(severity=Severity.WARNING))
        rs.add_result(make_context(severity=Severity.ERROR))

        assert rs.maximum_severity() == Severity.ERROR
        assert len(rs) == 3

    def test_by_rule(self):
        rs = ResultSet()
        rs.add_result(make_context(rule="rule1", severity=Severity.SUCCESS))
        rs.add_result(make_context(rule="rule2", severity=Severity.SUCCESS))

        by_rule = rs.by_rule()

        assert list(by_rule) == ["rule1", "rule2"]
        assert len(by_rule["rule1"]) == 1
        assert len(by_rule["rule2"]) == 1

    def test_by_rule_sorted_stably_by_dashboard_title(self):
        rs = ResultSet()
        rs.add_result(make_context(rule="rule1", dashboard="b", message="b-first"))
        rs.add_result(make_context(rule="rule1", dashboard="a", message="a-first"))
        rs.add_result(make_context(rule="rule1", dashboard="b", message="b-second"))
        rs.add_result(make_context(rule="rule1", dashboard="a", message="a-second"))

        messages = [ctx.result.message for ctx in rs.by_rule()["rule1"]]

        assert messages == ["a-first", "a-second", "b-first", "b-second"]

    def test_by_rule_independent_of_insertion_order(self):
        contexts = [
            make_context(rule="rule1", dashboard="c"),
            make_context(rule="rule1", dashboard="a"),
            make_context(rule="rule1", dashboard="b"),
        ]
        forward, backward = ResultSet(), ResultSet()
        for ctx in contexts:
            forward.add_result(ctx)
        for ctx in reversed(contexts):
            backward.add_result(ctx)

        titles = lambda rs: [ctx.dashboard_title for ctx in rs.by_rule()["rule1"]]  # noqa: E731
        assert titles(forward) == titles(backward) == ["a", "b", "c"]

    def test_honors_configuration_given_before_results(self):
        config = ConfigurationFile().exclude("rule1")

        rs = ResultSet()
        rs.configure(config)
        rs.add_result(make_context(rule="rule1"))

        assert rs.maximum_severity() == Severity.EXCLUDE
        assert rs.by_rule()["rule1"][0].result.severity == Severity.EXCLUDE

    def test_honors_configuration_given_after_results(self):
        config = ConfigurationFile().exclude("rule1")

        rs = ResultSet()
        rs.add_result(make_context(rule="rule1"))
        rs.configure(config)

        assert rs.maximum_severity() == Severity.EXCLUDE
        assert rs.by_rule()["rule1"][0].result.severity == Severity.EXCLUDE

    def test_configuration_commutes_with_insertion(self):
        config = (
            ConfigurationFile()
            .exclude("rule1", dashboard="dash1")
            .warn("rule2")
        )
        contexts = [
            make_context(rule="rule1", dashboard="dash1"),
            make_context(rule="rule1", dashboard="dash2"),
            make_context(rule="rule2", dashboard="dash1"),
        ]

        before = ResultSet(config)
        for ctx in contexts:
            before.add_result(ctx)

        after = ResultSet()
        for ctx in contexts:
            after.add_result(ctx)
        after.configure(config)

        assert [c.result for c in before.results] == [c.result for c in after.results]

    def test_excluded_passing_result_counts_as_excluded(self):
        rs = ResultSet(ConfigurationFile().exclude("rule1"))
        rs.add_result(make_context(rule="rule1", severity=Severity.SUCCESS, message="OK"))

        assert rs.maximum_severity() == Severity.EXCLUDE
        assert rs.counts()[Severity.EXCLUDE] == 1

    def test_configure_twice_is_idempotent(self):
        config = ConfigurationFile().exclude("rule1")
        rs = ResultSet()
        rs.add_result(make_context(rule="rule1", message="foo"))

        rs.configure(config)
        rs.configure(config)

        assert rs.results[0].result.message == "foo (Excluded)"

    def test_counts(self):
        rs = ResultSet()
        rs.add_result(make_context(severity=Severity.ERROR))
        rs.add_result(make_context(severity=Severity.ERROR))
        rs.add_result(make_context(severity=Severity.SUCCESS))

        counts = rs.counts()

        assert counts[Severity.ERROR] == 2
        assert counts[Severity.SUCCESS] == 1
        assert counts[Severity.WARNING] == 0

    def test_merge_applies_own_configuration(self):
        worker = ResultSet()
        worker.add_result(make_context(rule="rule1"))
        worker.add_result(make_context(rule="rule2"))

        merged = ResultSet(ConfigurationFile().warn("rule2"))
        merged.merge(worker)

        severities = [ctx.result.severity for ctx in merged.results]
        assert severities == [Severity.ERROR, Severity.WARNING]
