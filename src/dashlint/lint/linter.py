"""
Rule registry and lint driver.

Example:
    linter = Linter.default()
    results = linter.lint([load_dashboard("node-exporter.json")])
    results.configure(load_lint_configuration("."))
    for rule_name, contexts in results.by_rule().items():
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import structlog

from dashlint.dashboards.models import Dashboard
from dashlint.lint.results import ResultContext, ResultSet, Severity
from dashlint.lint.rules import DashboardRule, PanelRule, Rule, TargetRule, builtin_rules

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from dashlint.lint.configuration import ConfigurationFile

logger = structlog.get_logger()


class Linter:
    """Runs an ordered list of rules over dashboards."""

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self.rules: list[Rule] = []
        for rule in rules or []:
            self.add_rule(rule)

    def add_rule(self, rule: Rule) -> "Linter":
        """Add a rule to the chain. Rule names must be unique."""
        if self.get_rule(rule.name) is not None:
            raise ValueError(f"duplicate rule name '{rule.name}'")
        self.rules.append(rule)
        return self

    def get_rule(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    @classmethod
    def default(cls) -> "Linter":
        """Create a linter with every built-in rule."""
        return cls(builtin_rules())

    def lint_dashboard(self, dashboard: Dashboard, result_set: ResultSet) -> None:
        """Evaluate every rule against one dashboard, appending to ``result_set``.

        Dashboard rules run once, panel rules once per panel and target
        rules once per target, in position order.
        """
        log = logger.bind(dashboard=dashboard.title)
        for rule in self.rules:
            if isinstance(rule, DashboardRule):
                self._add(
                    result_set,
                    ResultContext(
                        result=rule.lint_dashboard(dashboard),
                        rule=rule,
                        dashboard=dashboard,
                    ),
                    log,
                )

            for panel in dashboard.panels:
                if isinstance(rule, PanelRule):
                    self._add(
                        result_set,
                        ResultContext(
                            result=rule.lint_panel(dashboard, panel),
                            rule=rule,
                            dashboard=dashboard,
                            panel=panel,
                        ),
                        log,
                    )

                if isinstance(rule, TargetRule):
                    for target in panel.targets:
                        self._add(
                            result_set,
                            ResultContext(
                                result=rule.lint_target(dashboard, panel, target),
                                rule=rule,
                                dashboard=dashboard,
                                panel=panel,
                                target=target,
                            ),
                            log,
                        )

    def lint(
        self,
        dashboards: Iterable[Dashboard],
        config: Optional["ConfigurationFile"] = None,
    ) -> ResultSet:
        """Lint dashboards into a new result set, configured if ``config`` is given."""
        result_set = ResultSet(config)
        count = 0
        for dashboard in dashboards:
            self.lint_dashboard(dashboard, result_set)
            count += 1
        logger.debug(
            "lint_completed",
            dashboards=count,
            results=len(result_set),
            maximum_severity=result_set.maximum_severity().name,
        )
        return result_set

    @staticmethod
    def _add(result_set: ResultSet, ctx: ResultContext, log: structlog.stdlib.BoundLogger) -> None:
        if ctx.result.severity >= Severity.ERROR:
            log.debug("rule_violation", rule=ctx.rule_name, message=ctx.result.message)
        result_set.add_result(ctx)
