"""Built-in lint rules."""

from dashlint.lint.rules.base import (
    DashboardRule,
    PanelRule,
    Rule,
    TargetRule,
    is_prometheus_dashboard,
)
from dashlint.lint.rules.panel import (
    PanelDatasourceRule,
    PanelJobInstanceRule,
    PanelTitleDescriptionRule,
    PanelUnitsRule,
)
from dashlint.lint.rules.target import TargetPromQLRule
from dashlint.lint.rules.template import (
    TemplateDatasourceRule,
    TemplateInstanceRule,
    TemplateJobRule,
    TemplateLabelRule,
)


def builtin_rules() -> list[Rule]:
    """Fresh instances of every built-in rule, in reporting order."""
    return [
        TemplateDatasourceRule(),
        TemplateJobRule(),
        TemplateInstanceRule(),
        PanelDatasourceRule(),
        PanelTitleDescriptionRule(),
        PanelUnitsRule(),
        PanelJobInstanceRule(),
        TargetPromQLRule(),
    ]


__all__ = [
    "Rule",
    "DashboardRule",
    "PanelRule",
    "TargetRule",
    "is_prometheus_dashboard",
    "TemplateLabelRule",
    "TemplateJobRule",
    "TemplateInstanceRule",
    "TemplateDatasourceRule",
    "PanelJobInstanceRule",
    "PanelDatasourceRule",
    "PanelTitleDescriptionRule",
    "PanelUnitsRule",
    "TargetPromQLRule",
    "builtin_rules",
]
