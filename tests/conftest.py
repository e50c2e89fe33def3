"""Root test configuration."""

import logging

import pytest
import structlog
from dashlint.dashboards.models import Dashboard, Panel, Target, Template


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def prometheus_datasource_template():
    """Datasource template identifying a Prometheus dashboard."""
    return Template(name="datasource", type="datasource", label="Data Source", query="prometheus")


@pytest.fixture
def job_template():
    return Template(
        name="job",
        type="query",
        label="job",
        datasource="$datasource",
        multi=True,
        all_value=".+",
        query="label_values(up, job)",
    )


@pytest.fixture
def instance_template():
    return Template(
        name="instance",
        type="query",
        label="instance",
        datasource="$datasource",
        multi=True,
        all_value=".+",
        query='label_values(up{job=~"$job"}, instance)',
    )


@pytest.fixture
def conforming_dashboard(prometheus_datasource_template, job_template, instance_template):
    """A dashboard that passes every built-in rule."""
    return Dashboard(
        title="Node Exporter",
        templates=[prometheus_datasource_template, job_template, instance_template],
        panels=[
            Panel(
                title="CPU",
                type="timeseries",
                id=1,
                description="CPU usage per mode",
                datasource="$datasource",
                unit="percentunit",
                targets=[
                    Target(
                        expr='sum by (mode) (rate(node_cpu_seconds_total{job=~"$job",instance=~"$instance"}[$__rate_interval]))',
                        idx=0,
                    ),
                ],
            ),
        ],
    )
