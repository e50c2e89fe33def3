"""
Terminal reporting of lint results.
"""

from typing import Sequence

from dashlint.cli.ux import console, error, plain, success, warning
from dashlint.lint.results import ResultContext, ResultSet, Severity, maximum_severity


def print_result(ctx: ResultContext) -> bool:
    """Print one result line. Returns False when the result is silenced."""
    line = ctx.format_line()
    if line is None:
        return False
    plain(line)
    return True


def report_by_rule(result_set: ResultSet, verbose: bool = False) -> None:
    """
    Print results grouped by rule, each group headed by the rule description.

    Args:
        result_set: Configured results of a lint run
        verbose: Also print passing results
    """
    for contexts in result_set.by_rule().values():
        visible = [
            ctx for ctx in contexts if verbose or ctx.result.severity != Severity.SUCCESS
        ]
        visible = [ctx for ctx in visible if ctx.format_line() is not None]
        if not visible:
            continue

        rule = visible[0].rule
        console.print(f"[highlight]{rule.description if rule else ''}[/highlight]")
        for ctx in visible:
            print_result(ctx)


def print_summary(result_sets: Sequence[ResultSet], strict: bool = False) -> None:
    """Print the overall verdict with counts per severity across result sets."""
    counts = {severity: 0 for severity in Severity}
    for result_set in result_sets:
        for severity, count in result_set.counts().items():
            counts[severity] += count
    detail = (
        f"{counts[Severity.ERROR]} errors, {counts[Severity.WARNING]} warnings, "
        f"{counts[Severity.EXCLUDE]} excluded"
    )
    worst = maximum_severity(rs.maximum_severity() for rs in result_sets)
    if worst >= Severity.ERROR or (strict and worst >= Severity.WARNING):
        error(f"Lint failed: {detail}")
    elif worst == Severity.WARNING:
        warning(f"Lint passed with warnings: {detail}")
    else:
        success(f"Lint passed: {detail}")
