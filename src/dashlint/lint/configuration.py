"""
Lint configuration: rule exclusions and warnings.

A configuration file holds two maps keyed by rule name. A rule present in
``exclusions`` has its results re-labelled as excluded; a rule present in
``warnings`` has them re-labelled as warnings. This applies to passing
results as well as violations. Each rule maps to a list of entries
narrowing the match by dashboard title, panel title and target index. A
rule mapped to no entries matches every result of that rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from dashlint.lint.results import ResultContext, Severity

EXCLUDED_SUFFIX = " (Excluded)"


@dataclass
class ConfigurationEntry:
    """
    One exclusion or warning match.

    Every field that is set must equal the corresponding attribute of the
    result. A field is only compared when the result carries that scope, so
    a panel-qualified entry still matches a dashboard-scoped result of the
    same dashboard. ``reason`` is never evaluated; it documents why the
    exception exists. ``target_idx`` of 0 is a real index, distinct from None.
    """

    reason: str = ""
    dashboard: Optional[str] = None
    panel: Optional[str] = None
    target_idx: Optional[int] = None

    def matches(self, ctx: ResultContext) -> bool:
        if self.dashboard and ctx.dashboard is not None:
            if self.dashboard != ctx.dashboard.title:
                return False

        if self.panel and ctx.panel is not None:
            if self.panel != ctx.panel.title:
                return False

        if self.target_idx is not None and ctx.target is not None:
            if self.target_idx != ctx.target.idx:
                return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.reason:
            result["reason"] = self.reason
        if self.dashboard:
            result["dashboard"] = self.dashboard
        if self.panel:
            result["panel"] = self.panel
        if self.target_idx is not None:
            result["targetIdx"] = self.target_idx
        return result


@dataclass
class ConfigurationRuleEntries:
    """Entries configured for one rule."""

    reason: str = ""
    entries: List[ConfigurationEntry] = field(default_factory=list)

    def add_entry(self, entry: ConfigurationEntry) -> None:
        self.entries.append(entry)

    def matches(self, ctx: ResultContext) -> bool:
        if not self.entries:
            return True
        return any(entry.matches(ctx) for entry in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.reason:
            result["reason"] = self.reason
        if self.entries:
            result["entries"] = [entry.to_dict() for entry in self.entries]
        return result


def _matches(rules: Dict[str, Optional[ConfigurationRuleEntries]], ctx: ResultContext) -> bool:
    if ctx.rule_name not in rules:
        return False
    entries = rules[ctx.rule_name]
    # A rule listed with no body matches unconditionally
    return entries is None or entries.matches(ctx)


@dataclass
class ConfigurationFile:
    """Exclusions and warnings keyed by rule name."""

    exclusions: Dict[str, Optional[ConfigurationRuleEntries]] = field(default_factory=dict)
    warnings: Dict[str, Optional[ConfigurationRuleEntries]] = field(default_factory=dict)

    def apply(self, ctx: ResultContext) -> ResultContext:
        """
        Return the context with exclusions and warnings applied.

        The exclusion pass runs first and the warning pass second, so a
        result matching both ends up as a warning. Both passes apply to
        every result of the rule, passing ones included; only silenced
        results are returned unchanged. The input context is never modified.
        """
        if ctx.result.severity == Severity.QUIET:
            return ctx

        result = ctx.result
        if _matches(self.exclusions, ctx):
            result = replace(
                result,
                severity=Severity.EXCLUDE,
                message=result.message + EXCLUDED_SUFFIX,
            )

        if _matches(self.warnings, ctx):
            result = replace(result, severity=Severity.WARNING)

        if result is ctx.result:
            return ctx
        return replace(ctx, result=result)

    def exclude(
        self,
        rule: str,
        dashboard: Optional[str] = None,
        panel: Optional[str] = None,
        target_idx: Optional[int] = None,
        reason: str = "",
    ) -> "ConfigurationFile":
        """Add an exclusion; with no scope fields the whole rule is excluded."""
        _add(self.exclusions, rule, dashboard, panel, target_idx, reason)
        return self

    def warn(
        self,
        rule: str,
        dashboard: Optional[str] = None,
        panel: Optional[str] = None,
        target_idx: Optional[int] = None,
        reason: str = "",
    ) -> "ConfigurationFile":
        """Add a warning; with no scope fields the whole rule is downgraded."""
        _add(self.warnings, rule, dashboard, panel, target_idx, reason)
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigurationFile":
        """Build from decoded YAML.

        Raises:
            ValueError: If a section, rule body or entry has the wrong shape
        """
        return cls(
            exclusions=_parse_section(data.get("exclusions"), "exclusions"),
            warnings=_parse_section(data.get("warnings"), "warnings"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exclusions": {
                name: entries.to_dict() if entries is not None else None
                for name, entries in self.exclusions.items()
            },
            "warnings": {
                name: entries.to_dict() if entries is not None else None
                for name, entries in self.warnings.items()
            },
        }


def _add(
    section: Dict[str, Optional[ConfigurationRuleEntries]],
    rule: str,
    dashboard: Optional[str],
    panel: Optional[str],
    target_idx: Optional[int],
    reason: str,
) -> None:
    entries = section.get(rule)
    if entries is None:
        entries = ConfigurationRuleEntries()
        section[rule] = entries
    if dashboard or panel or target_idx is not None:
        entries.add_entry(
            ConfigurationEntry(
                reason=reason,
                dashboard=dashboard,
                panel=panel,
                target_idx=target_idx,
            )
        )
    elif reason and not entries.reason:
        entries.reason = reason


def _parse_section(raw: Any, section: str) -> Dict[str, Optional[ConfigurationRuleEntries]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{section}' must be a mapping of rule name to entries")

    parsed: Dict[str, Optional[ConfigurationRuleEntries]] = {}
    for rule, body in raw.items():
        if body is None:
            parsed[str(rule)] = None
            continue
        if not isinstance(body, dict):
            raise ValueError(f"{section}.{rule} must be a mapping")
        raw_entries = body.get("entries") or []
        if not isinstance(raw_entries, list):
            raise ValueError(f"{section}.{rule}.entries must be a list")
        parsed[str(rule)] = ConfigurationRuleEntries(
            reason=body.get("reason") or "",
            entries=[
                _parse_entry(entry, f"{section}.{rule}.entries[{i}]")
                for i, entry in enumerate(raw_entries)
            ],
        )
    return parsed


def _parse_entry(raw: Any, where: str) -> ConfigurationEntry:
    if not isinstance(raw, dict):
        raise ValueError(f"{where} must be a mapping")
    return ConfigurationEntry(
        reason=raw.get("reason") or "",
        dashboard=_optional_str(raw.get("dashboard")),
        panel=_optional_str(raw.get("panel")),
        target_idx=_parse_target_idx(raw.get("targetIdx"), where),
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _parse_target_idx(value: Any, where: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{where}.targetIdx must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"{where}.targetIdx must be an integer, got {value!r}")
