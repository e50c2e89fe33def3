"""
CLI command for linting Grafana dashboards.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from dashlint.cli.report import print_summary, report_by_rule
from dashlint.cli.ux import console, header
from dashlint.config.loader import load_lint_configuration, load_lint_configuration_file
from dashlint.core.errors import (
    ConfigurationError,
    DashboardLoadError,
    ExitCode,
    main_with_error_handling,
)
from dashlint.dashboards.loader import discover_dashboard_files, load_dashboard
from dashlint.lint.linter import Linter
from dashlint.lint.results import ResultSet, Severity, maximum_severity
from dashlint.logging import bind_context


def exit_code_for(severity: Severity, strict: bool = False) -> ExitCode:
    """Exit status derived from the maximum severity of a lint run."""
    threshold = Severity.WARNING if strict else Severity.ERROR
    if severity != Severity.QUIET and severity >= threshold:
        return ExitCode.LINT_FAILED
    return ExitCode.SUCCESS


def _group_by_directory(files: Sequence[Path]) -> dict[Path, list[Path]]:
    groups: dict[Path, list[Path]] = {}
    for file in files:
        groups.setdefault(file.parent, []).append(file)
    return groups


@main_with_error_handling()
def lint_command(
    paths: Sequence[str],
    strict: bool = False,
    verbose: bool = False,
    config: Optional[str] = None,
    linter: Optional[Linter] = None,
) -> int:
    """
    Lint dashboards and print a report grouped by rule.

    Each directory's dashboards are checked against the lint configuration
    file of that directory, unless an explicit configuration is given.

    Args:
        paths: Dashboard JSON files or directories containing them
        strict: Fail on warnings as well as errors
        verbose: Also print passing results
        config: Optional explicit lint configuration file
        linter: Linter to use (defaults to all built-in rules)

    Returns:
        Exit code (0 for success, 1 for lint failures)
    """
    files = discover_dashboard_files(paths)
    if not files:
        joined = ", ".join(str(p) for p in paths)
        raise DashboardLoadError("no dashboard files found", {"paths": joined})

    linter = linter or Linter.default()
    explicit_config = None
    if config:
        if not Path(config).is_file():
            raise ConfigurationError(f"lint configuration {config} not found", {"path": config})
        explicit_config = load_lint_configuration_file(config)

    result_sets: list[ResultSet] = []
    for directory, group in _group_by_directory(files).items():
        if explicit_config is not None:
            lint_config = explicit_config
        else:
            lint_config = load_lint_configuration(directory)
        dashboards = [load_dashboard(path) for path in group]
        result_set = linter.lint(dashboards, lint_config)
        result_sets.append(result_set)

        if len(files) > len(group):
            header(str(directory))
        report_by_rule(result_set, verbose=verbose)

        bind_context(directory=str(directory)).info(
            "directory_linted",
            dashboards=len(dashboards),
            maximum_severity=result_set.maximum_severity().name,
        )

    console.print()
    print_summary(result_sets, strict=strict)
    worst = maximum_severity(rs.maximum_severity() for rs in result_sets)
    return exit_code_for(worst, strict)
