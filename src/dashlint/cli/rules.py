"""
CLI command for listing the available lint rules.
"""

from rich.table import Table

from dashlint.cli.ux import console
from dashlint.lint.linter import Linter
from dashlint.lint.rules import DashboardRule, PanelRule, Rule, TargetRule


def rule_scopes(rule: Rule) -> str:
    scopes = []
    if isinstance(rule, DashboardRule):
        scopes.append("dashboard")
    if isinstance(rule, PanelRule):
        scopes.append("panel")
    if isinstance(rule, TargetRule):
        scopes.append("target")
    return ", ".join(scopes)


def list_rules_command() -> int:
    """List built-in rules with the names used in lint configuration files."""
    table = Table(title="Lint rules")
    table.add_column("Name", style="info", no_wrap=True)
    table.add_column("Scope")
    table.add_column("Description")

    for rule in Linter.default().rules:
        table.add_row(rule.name, rule_scopes(rule), rule.description)

    console.print(table)
    return 0
