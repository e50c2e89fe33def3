"""Dashboard linting: rules, configuration and results."""

from dashlint.lint.configuration import (
    ConfigurationEntry,
    ConfigurationFile,
    ConfigurationRuleEntries,
)
from dashlint.lint.linter import Linter
from dashlint.lint.promql import (
    LabelMatcher,
    MatchType,
    PromQLParseError,
    VectorSelector,
    check_matcher,
    parse_expr,
    vector_selectors,
)
from dashlint.lint.results import (
    Result,
    ResultContext,
    ResultSet,
    Severity,
    maximum_severity,
)

__all__ = [
    # Results
    "Severity",
    "Result",
    "ResultContext",
    "ResultSet",
    "maximum_severity",
    # Configuration
    "ConfigurationFile",
    "ConfigurationRuleEntries",
    "ConfigurationEntry",
    # PromQL
    "PromQLParseError",
    "MatchType",
    "LabelMatcher",
    "VectorSelector",
    "parse_expr",
    "vector_selectors",
    "check_matcher",
    # Linter
    "Linter",
]
