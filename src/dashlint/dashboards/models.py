"""Grafana dashboard data models.

Read-only views over Grafana dashboard JSON, holding just the fields the
lint rules inspect. Instances are built once by the loader and are not
modified during a lint pass.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DatasourceRef = Union[str, Dict[str, Any], None]


def datasource_ref(datasource: DatasourceRef) -> Optional[str]:
    """Return the string form of a datasource reference.

    Grafana stores datasources either as a plain name/variable (older
    schema) or as ``{"type": ..., "uid": ...}``. The uid is what carries the
    ``$datasource`` variable in the newer form.
    """
    if datasource is None:
        return None
    if isinstance(datasource, dict):
        uid = datasource.get("uid")
        return str(uid) if uid is not None else None
    return str(datasource)


@dataclass
class Target:
    """Query target of a panel, addressed by its position within the panel."""

    expr: str = ""
    idx: int = 0
    ref_id: str = ""
    datasource: DatasourceRef = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], idx: int) -> "Target":
        return cls(
            expr=data.get("expr") or "",
            idx=idx,
            ref_id=data.get("refId") or "",
            datasource=data.get("datasource"),
        )


@dataclass
class Panel:
    """Grafana dashboard panel."""

    title: str = ""
    type: str = ""
    targets: List[Target] = field(default_factory=list)
    id: Optional[int] = None
    description: str = ""
    datasource: DatasourceRef = None
    unit: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Panel":
        targets = [
            Target.from_dict(target, idx) for idx, target in enumerate(data.get("targets") or [])
        ]

        # Units live in fieldConfig for current panels, in format/yaxes for legacy ones
        defaults = (data.get("fieldConfig") or {}).get("defaults") or {}
        unit = defaults.get("unit") or data.get("format") or ""
        if not unit:
            yaxes = data.get("yaxes") or []
            if yaxes and isinstance(yaxes[0], dict):
                unit = yaxes[0].get("format") or ""

        return cls(
            title=data.get("title") or "",
            type=data.get("type") or "",
            targets=targets,
            id=data.get("id"),
            description=data.get("description") or "",
            datasource=data.get("datasource"),
            unit=unit,
        )


@dataclass
class Template:
    """Dashboard template variable."""

    name: str = ""
    type: str = ""
    label: str = ""
    datasource: DatasourceRef = None
    multi: bool = False
    all_value: str = ""
    query: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Template":
        query = data.get("query")
        if isinstance(query, dict):
            query = query.get("query", "")

        return cls(
            name=data.get("name") or "",
            type=data.get("type") or "",
            label=data.get("label") or "",
            datasource=data.get("datasource"),
            multi=bool(data.get("multi", False)),
            all_value=data.get("allValue") or "",
            query=query or "",
        )

    @property
    def datasource_ref(self) -> Optional[str]:
        return datasource_ref(self.datasource)


@dataclass
class Dashboard:
    """Grafana dashboard as seen by the linter."""

    title: str = ""
    templates: List[Template] = field(default_factory=list)
    panels: List[Panel] = field(default_factory=list)
    uid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dashboard":
        """Build a dashboard from Grafana JSON.

        Accepts the bare dashboard model as well as the API payload
        (``{"dashboard": {...}}``). Row panels are flattened so that every
        visualization panel is linted exactly once.
        """
        if "dashboard" in data and isinstance(data["dashboard"], dict):
            data = data["dashboard"]

        templating = data.get("templating") or {}
        templates = [Template.from_dict(t) for t in templating.get("list") or []]

        panels: List[Panel] = []
        for raw in data.get("panels") or []:
            panels.extend(_flatten_panel(raw))

        # Schema versions before 16 keep panels inside rows
        for row in data.get("rows") or []:
            for raw in row.get("panels") or []:
                panels.extend(_flatten_panel(raw))

        return cls(
            title=data.get("title") or "",
            templates=templates,
            panels=panels,
            uid=data.get("uid"),
        )

    def get_template(self, name: str) -> Optional[Template]:
        """Return the first template variable with the given name."""
        for template in self.templates:
            if template.name == name:
                return template
        return None

    def get_templates_by_type(self, template_type: str) -> List[Template]:
        return [t for t in self.templates if t.type == template_type]


def _flatten_panel(raw: Dict[str, Any]) -> List[Panel]:
    if raw.get("type") == "row":
        # Collapsed rows carry their children inline
        return [Panel.from_dict(child) for child in raw.get("panels") or []]
    return [Panel.from_dict(raw)]
