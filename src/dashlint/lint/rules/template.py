"""Rules checking dashboard template variables."""

from __future__ import annotations

from typing import Optional

from dashlint.dashboards.models import Dashboard
from dashlint.lint.results import Result
from dashlint.lint.rules.base import (
    DashboardRule,
    is_prometheus_dashboard,
    uses_datasource_variable,
)

DATASOURCE_TEMPLATE_NAME = "datasource"
DATASOURCE_TEMPLATE_LABEL = "Data Source"
DATASOURCE_QUERIES = ("prometheus", "loki")


class TemplateLabelRule(DashboardRule):
    """Require a query template variable for a Prometheus label.

    Only applies to Prometheus dashboards. The checks run in a fixed order
    and the first failure is reported.
    """

    label: str = ""

    def lint_dashboard(self, dashboard: Dashboard) -> Result:
        if not is_prometheus_dashboard(dashboard):
            return Result.ok()

        message = self.check_template(dashboard)
        if message is not None:
            return Result.error(f"Dashboard '{dashboard.title}' {message}")
        return Result.ok()

    def check_template(self, dashboard: Dashboard) -> Optional[str]:
        label = self.label
        template = dashboard.get_template(label)
        if template is None:
            return f"is missing the {label} template"
        if not uses_datasource_variable(template.datasource_ref):
            return f"{label} template should use datasource '$datasource'"
        if template.type != "query":
            return f"{label} template should be a Prometheus query"
        if template.label != label:
            return f"{label} template should be a labelled '{label}'"
        return None


class TemplateJobRule(TemplateLabelRule):
    name = "template-job-rule"
    description = "Checks that the dashboard has a templated job."
    label = "job"


class TemplateInstanceRule(TemplateLabelRule):
    name = "template-instance-rule"
    description = "Checks that the dashboard has a templated instance."
    label = "instance"


class TemplateDatasourceRule(DashboardRule):
    """Require a single, conventionally named datasource template variable."""

    name = "template-datasource-rule"
    description = "Checks that the dashboard has a templated datasource."

    def lint_dashboard(self, dashboard: Dashboard) -> Result:
        # Dashboards without queries have nothing to point at a datasource
        if not any(panel.targets for panel in dashboard.panels):
            return Result.ok()

        templates = dashboard.get_templates_by_type("datasource")
        if not templates:
            return Result.error(f"Dashboard '{dashboard.title}' does not have a templated datasource")

        template = templates[0]
        if template.name != DATASOURCE_TEMPLATE_NAME:
            return Result.error(
                f"Dashboard '{dashboard.title}' templated datasource variable named "
                f"'{template.name}', should be named '{DATASOURCE_TEMPLATE_NAME}'"
            )
        if template.label != DATASOURCE_TEMPLATE_LABEL:
            return Result.error(
                f"Dashboard '{dashboard.title}' templated datasource variable labeled "
                f"'{template.label}', should be labeled '{DATASOURCE_TEMPLATE_LABEL}'"
            )
        if template.query not in DATASOURCE_QUERIES:
            return Result.error(
                f"Dashboard '{dashboard.title}' templated datasource variable query is "
                f"'{template.query}', should be one of {_quoted(DATASOURCE_QUERIES)}"
            )
        return Result.ok()


def _quoted(values: tuple[str, ...]) -> str:
    return ", ".join(f"'{value}'" for value in values)
