"""Tests for dashboards/models.py.

Tests for building dashboard models from Grafana JSON.
"""

from dashlint.dashboards.models import (
    Dashboard,
    Panel,
    Target,
    Template,
    datasource_ref,
)


class TestDatasourceRef:
    """Tests for datasource_ref."""

    def test_string(self):
        assert datasource_ref("$datasource") == "$datasource"

    def test_object_uses_uid(self):
        assert datasource_ref({"type": "prometheus", "uid": "${datasource}"}) == "${datasource}"

    def test_object_without_uid(self):
        assert datasource_ref({"type": "prometheus"}) is None

    def test_none(self):
        assert datasource_ref(None) is None


class TestTarget:
    """Tests for Target."""

    def test_from_dict(self):
        """Test position and fields are taken from the JSON."""
        target = Target.from_dict({"expr": "up", "refId": "B", "datasource": "$datasource"}, 3)

        assert target == Target(expr="up", idx=3, ref_id="B", datasource="$datasource")

    def test_from_dict_without_expr(self):
        target = Target.from_dict({"refId": "A", "rawSql": "select 1"}, 0)
        assert target.expr == ""


class TestPanel:
    """Tests for Panel."""

    def test_from_dict(self):
        """Test targets are indexed by position."""
        panel = Panel.from_dict(
            {
                "id": 4,
                "title": "Requests",
                "type": "timeseries",
                "description": "Requests per second",
                "datasource": {"type": "prometheus", "uid": "$datasource"},
                "fieldConfig": {"defaults": {"unit": "reqps"}},
                "targets": [{"expr": "a"}, {"expr": "b"}],
            }
        )

        assert panel.id == 4
        assert panel.title == "Requests"
        assert panel.unit == "reqps"
        assert [(t.expr, t.idx) for t in panel.targets] == [("a", 0), ("b", 1)]

    def test_legacy_format_unit(self):
        assert Panel.from_dict({"type": "singlestat", "format": "bytes"}).unit == "bytes"

    def test_legacy_yaxes_unit(self):
        panel = Panel.from_dict({"type": "graph", "yaxes": [{"format": "s"}, {"format": "short"}]})
        assert panel.unit == "s"

    def test_missing_fields(self):
        panel = Panel.from_dict({})

        assert panel.title == ""
        assert panel.description == ""
        assert panel.targets == []
        assert panel.unit == ""


class TestTemplate:
    """Tests for Template."""

    def test_from_dict(self):
        template = Template.from_dict(
            {
                "name": "job",
                "type": "query",
                "label": "job",
                "datasource": {"uid": "$datasource"},
                "multi": True,
                "allValue": ".+",
                "query": "label_values(up, job)",
            }
        )

        assert template.name == "job"
        assert template.datasource_ref == "$datasource"
        assert template.multi is True
        assert template.all_value == ".+"
        assert template.query == "label_values(up, job)"

    def test_query_object(self):
        """Test newer Grafana query objects are reduced to their text."""
        template = Template.from_dict(
            {"name": "job", "query": {"query": "label_values(job)", "refId": "A"}}
        )
        assert template.query == "label_values(job)"


class TestDashboard:
    """Tests for Dashboard."""

    def test_from_dict(self):
        dashboard = Dashboard.from_dict(
            {
                "uid": "abc",
                "title": "Node",
                "templating": {"list": [{"name": "datasource", "type": "datasource"}]},
                "panels": [{"title": "CPU", "type": "timeseries"}],
            }
        )

        assert dashboard.uid == "abc"
        assert dashboard.title == "Node"
        assert [t.name for t in dashboard.templates] == ["datasource"]
        assert [p.title for p in dashboard.panels] == ["CPU"]

    def test_api_payload_is_unwrapped(self):
        dashboard = Dashboard.from_dict({"meta": {}, "dashboard": {"title": "Node"}})
        assert dashboard.title == "Node"

    def test_row_panels_are_flattened(self):
        dashboard = Dashboard.from_dict(
            {
                "panels": [
                    {"title": "Top", "type": "stat"},
                    {"title": "Row", "type": "row", "panels": [{"title": "Hidden", "type": "graph"}]},
                    {"title": "Bottom", "type": "graph"},
                ]
            }
        )

        assert [p.title for p in dashboard.panels] == ["Top", "Hidden", "Bottom"]

    def test_legacy_rows(self):
        dashboard = Dashboard.from_dict(
            {"rows": [{"panels": [{"title": "A"}]}, {"panels": [{"title": "B"}]}]}
        )
        assert [p.title for p in dashboard.panels] == ["A", "B"]

    def test_get_template(self, conforming_dashboard):
        assert conforming_dashboard.get_template("job").name == "job"
        assert conforming_dashboard.get_template("cluster") is None

    def test_get_templates_by_type(self, conforming_dashboard):
        names = [t.name for t in conforming_dashboard.get_templates_by_type("query")]
        assert names == ["job", "instance"]
