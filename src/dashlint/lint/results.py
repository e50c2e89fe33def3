"""
Lint results: severities, verdicts and the result set.

A rule evaluation yields a ``Result``; the linter wraps it in a
``ResultContext`` naming the rule and the dashboard/panel/target it was
evaluated against, and appends it to a ``ResultSet``. The set applies the
lint configuration and answers aggregate queries (maximum severity,
grouping by rule).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from dashlint.dashboards.models import Dashboard, Panel, Target
    from dashlint.lint.configuration import ConfigurationFile
    from dashlint.lint.rules.base import Rule


class Severity(IntEnum):
    """Ordered severity scale.

    QUIET only suppresses output. It is never produced by a rule and is
    ignored when computing the maximum severity of a result set.
    """

    SUCCESS = 0
    EXCLUDE = 1
    WARNING = 2
    ERROR = 3
    QUIET = 4

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    Severity.SUCCESS: "✔️",
    Severity.EXCLUDE: "➖",
    Severity.WARNING: "⚠️",
    Severity.ERROR: "❌",
    Severity.QUIET: "",
}

OK_MESSAGE = "OK"


@dataclass(frozen=True)
class Result:
    """A single rule verdict."""

    severity: Severity
    message: str

    @classmethod
    def ok(cls) -> "Result":
        return cls(severity=Severity.SUCCESS, message=OK_MESSAGE)

    @classmethod
    def error(cls, message: str) -> "Result":
        return cls(severity=Severity.ERROR, message=message)

    @property
    def passed(self) -> bool:
        return self.severity == Severity.SUCCESS


@dataclass(frozen=True)
class ResultContext:
    """A Result plus the rule and scope it was produced against.

    The dashboard/panel/target references are borrowed from the lint pass.
    A dashboard-scoped result has no panel and no target.
    """

    result: Result
    rule: Optional["Rule"] = None
    dashboard: Optional["Dashboard"] = None
    panel: Optional["Panel"] = None
    target: Optional["Target"] = None

    @property
    def rule_name(self) -> str:
        return self.rule.name if self.rule is not None else ""

    @property
    def dashboard_title(self) -> str:
        return self.dashboard.title if self.dashboard is not None else ""

    def format_line(self) -> Optional[str]:
        """Render the per-result report line, or None when silenced."""
        severity = self.result.severity
        if severity == Severity.QUIET:
            return None
        return f"[{severity.symbol}] {self.result.message}"


def maximum_severity(severities: Iterable[Severity]) -> Severity:
    """Fold severities to the worst reported one; SUCCESS when empty."""
    worst = Severity.SUCCESS
    for severity in severities:
        if severity == Severity.QUIET:
            continue
        if severity > worst:
            worst = severity
    return worst


class ResultSet:
    """
    Accumulates the results of a lint run.

    Contexts are kept exactly as the rules produced them; the attached
    configuration is applied on top, so it does not matter whether
    ``configure`` is called before or after results are added, or more
    than once.

    Example:
        results = ResultSet()
        results.add_result(ResultContext(result=Result.ok(), rule=rule, dashboard=d))
        results.configure(load_lint_configuration("dashboards/"))
        if results.maximum_severity() >= Severity.ERROR:
            ...
    """

    def __init__(self, config: Optional["ConfigurationFile"] = None):
        self._raw: list[ResultContext] = []
        self._results: list[ResultContext] = []
        self.config: Optional["ConfigurationFile"] = None
        if config is not None:
            self.configure(config)

    def __len__(self) -> int:
        return len(self._results)

    @property
    def results(self) -> list[ResultContext]:
        """Configured results in insertion order."""
        return list(self._results)

    def configure(self, config: "ConfigurationFile") -> None:
        """Attach a configuration and apply it to every result already present."""
        self.config = config
        self._results = [config.apply(ctx) for ctx in self._raw]

    def add_result(self, ctx: ResultContext) -> None:
        """Add a result, applying the current configuration if set."""
        self._raw.append(ctx)
        if self.config is not None:
            ctx = self.config.apply(ctx)
        self._results.append(ctx)

    def merge(self, other: "ResultSet") -> None:
        """Append another set's results, e.g. one collected by a separate worker."""
        for ctx in other._raw:
            self.add_result(ctx)

    def maximum_severity(self) -> Severity:
        return maximum_severity(ctx.result.severity for ctx in self._results)

    def by_rule(self) -> dict[str, list[ResultContext]]:
        """Group results by rule name, each group stable-sorted by dashboard title.

        Rules appear in the order their first result was added.
        """
        grouped: dict[str, list[ResultContext]] = {}
        for ctx in self._results:
            grouped.setdefault(ctx.rule_name, []).append(ctx)
        for name, contexts in grouped.items():
            grouped[name] = sorted(contexts, key=lambda ctx: ctx.dashboard_title)
        return grouped

    def counts(self) -> dict[Severity, int]:
        """Number of results per severity."""
        counts = {severity: 0 for severity in Severity}
        for ctx in self._results:
            counts[ctx.result.severity] += 1
        return counts
