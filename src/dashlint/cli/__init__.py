"""
CLI commands for dashlint.
"""

from dashlint.cli.lint import lint_command
from dashlint.cli.rules import list_rules_command

__all__ = [
    "lint_command",
    "list_rules_command",
]
