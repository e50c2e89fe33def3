"""
PromQL parsing for selector validation.

Parses a PromQL expression into a small abstract syntax tree and walks it
to enumerate every vector selector together with its label matchers. This
is not a query engine: expressions are never evaluated, and semantics are
only checked as far as the parser needs to reject malformed input.

Usage:
    from dashlint.lint.promql import PromQLParseError, parse_expr, vector_selectors

    try:
        expr = parse_expr('sum(rate(http_requests_total{job=~"$job"}[5m]))')
    except PromQLParseError:
        ...  # not PromQL we understand
    for selector in vector_selectors(expr):
        matcher = selector.get_matcher("job")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class PromQLParseError(ValueError):
    """Raised when an expression is not valid PromQL."""

    def __init__(self, message: str, pos: int):
        super().__init__(f"{message} at position {pos}")
        self.message = message
        self.pos = pos


class MatchType(Enum):
    """Label matcher operators."""

    EQUAL = "="
    NOT_EQUAL = "!="
    REGEX = "=~"
    NOT_REGEX = "!~"


@dataclass
class LabelMatcher:
    """``label op "value"`` inside a selector."""

    name: str
    op: MatchType
    value: str

    def matches_empty(self) -> bool:
        """Whether the matcher selects series lacking the label."""
        if self.op == MatchType.EQUAL:
            return self.value == ""
        if self.op == MatchType.NOT_EQUAL:
            return self.value != ""
        try:
            matched = re.fullmatch(self.value, "") is not None
        except re.error:
            return False
        return matched if self.op == MatchType.REGEX else not matched


# === AST ===


@dataclass
class Node:
    """Base class for AST nodes."""

    def children(self) -> list["Node"]:
        return []


@dataclass
class NumberLiteral(Node):
    value: float


@dataclass
class StringLiteral(Node):
    value: str


@dataclass
class VectorSelector(Node):
    name: Optional[str] = None
    matchers: list[LabelMatcher] = field(default_factory=list)
    offset: Optional[str] = None
    at: Optional[str] = None

    def get_matcher(self, label: str) -> Optional[LabelMatcher]:
        """Return the first matcher on ``label``, or None."""
        for matcher in self.matchers:
            if matcher.name == label:
                return matcher
        return None

    def has_matcher(self, label: str) -> bool:
        return self.get_matcher(label) is not None


@dataclass
class MatrixSelector(Node):
    vector: VectorSelector
    range: str

    def children(self) -> list[Node]:
        return [self.vector]


@dataclass
class SubqueryExpr(Node):
    expr: Node
    range: str
    step: Optional[str] = None
    offset: Optional[str] = None
    at: Optional[str] = None

    def children(self) -> list[Node]:
        return [self.expr]


@dataclass
class Call(Node):
    func: str
    args: list[Node] = field(default_factory=list)

    def children(self) -> list[Node]:
        return list(self.args)


@dataclass
class AggregateExpr(Node):
    op: str
    expr: Node
    param: Optional[Node] = None
    grouping: list[str] = field(default_factory=list)
    without: bool = False

    def children(self) -> list[Node]:
        if self.param is not None:
            return [self.param, self.expr]
        return [self.expr]


@dataclass
class BinaryExpr(Node):
    op: str
    lhs: Node
    rhs: Node
    return_bool: bool = False
    matching: Optional[str] = None  # "on" or "ignoring"
    matching_labels: list[str] = field(default_factory=list)
    group: Optional[str] = None  # "group_left" or "group_right"
    include_labels: list[str] = field(default_factory=list)

    def children(self) -> list[Node]:
        return [self.lhs, self.rhs]


@dataclass
class UnaryExpr(Node):
    op: str
    expr: Node

    def children(self) -> list[Node]:
        return [self.expr]


@dataclass
class ParenExpr(Node):
    expr: Node

    def children(self) -> list[Node]:
        return [self.expr]


# === Language tables ===

FUNCTIONS = frozenset(
    {
        "abs", "absent", "absent_over_time", "acos", "acosh", "asin", "asinh", "atan",
        "atanh", "avg_over_time", "ceil", "changes", "clamp", "clamp_max", "clamp_min",
        "cos", "cosh", "count_over_time", "day_of_month", "day_of_week", "day_of_year",
        "days_in_month", "deg", "delta", "deriv", "double_exponential_smoothing", "exp",
        "floor", "histogram_avg", "histogram_count", "histogram_fraction",
        "histogram_quantile", "histogram_stddev", "histogram_stdvar", "histogram_sum",
        "holt_winters", "hour", "idelta", "increase", "info", "irate", "label_join",
        "label_replace", "last_over_time", "ln", "log10", "log2", "mad_over_time",
        "max_over_time", "min_over_time", "minute", "month", "pi", "predict_linear",
        "present_over_time", "quantile_over_time", "rad", "rate", "resets", "round",
        "scalar", "sgn", "sin", "sinh", "sort", "sort_by_label", "sort_by_label_desc",
        "sort_desc", "sqrt", "stddev_over_time", "stdvar_over_time", "sum_over_time",
        "tan", "tanh", "time", "timestamp", "vector", "year",
    }
)  # fmt: skip

AGGREGATORS = frozenset(
    {
        "sum", "avg", "count", "min", "max", "group", "stddev", "stdvar", "topk",
        "bottomk", "count_values", "quantile", "limitk", "limit_ratio",
    }
)  # fmt: skip

PARAM_AGGREGATORS = frozenset({"topk", "bottomk", "count_values", "quantile", "limitk", "limit_ratio"})

KEYWORDS = frozenset(
    {"and", "or", "unless", "atan2", "by", "without", "on", "ignoring", "group_left",
     "group_right", "bool", "offset"}
)  # fmt: skip

BINARY_PRECEDENCE = {
    "or": 1,
    "and": 2,
    "unless": 2,
    "==": 3,
    "!=": 3,
    "<=": 3,
    "<": 3,
    ">=": 3,
    ">": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
    "%": 5,
    "atan2": 5,
    "^": 6,
}

COMPARISON_OPS = frozenset({"==", "!=", "<=", "<", ">=", ">"})
SET_OPS = frozenset({"and", "or", "unless"})

# Deeper expressions are rejected before they exhaust the interpreter stack
MAX_NESTING_DEPTH = 100

# === Lexer ===

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+|\#[^\n]*)
    |(?P<duration>(?:\d+(?:ms|[smhdwy]))+)(?![\w.])
    |(?P<number>0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'|`[^`]*`)
    |(?P<ident>[a-zA-Z_][a-zA-Z0-9_:]*)
    |(?P<op>=~|!~|==|!=|>=|<=|[-+*/%^=<>(){}\[\],@:])
    """,
    re.VERBOSE,
)

_ESCAPE_RE = re.compile(r"\\(?:([abfnrtv\\\"'])|x([0-9a-fA-F]{2})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8})|([0-7]{3})|(.))")

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


@dataclass
class Token:
    kind: str  # number, duration, string, ident, op, eof
    value: str
    pos: int


def _unquote(raw: str, pos: int) -> str:
    if raw[0] == "`":
        return raw[1:-1]

    def replace(match: re.Match) -> str:
        simple, hex2, hex4, hex8, octal, invalid = match.groups()
        if invalid is not None:
            raise PromQLParseError(f"unknown escape sequence '\\{invalid}'", pos)
        if simple is not None:
            return _SIMPLE_ESCAPES[simple]
        if octal is not None:
            return chr(int(octal, 8))
        return chr(int(hex2 or hex4 or hex8, 16))

    return _ESCAPE_RE.sub(replace, raw[1:-1])


def tokenize(text: str) -> list[Token]:
    """Split an expression into tokens."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise PromQLParseError(f"unexpected character {text[pos]!r}", pos)
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "string":
            value = _unquote(value, pos)
        if kind != "ws":
            tokens.append(Token(kind=kind, value=value, pos=pos))
        pos = match.end()
    tokens.append(Token(kind="eof", value="", pos=len(text)))
    return tokens


# === Parser ===


class Parser:
    """Recursive-descent PromQL parser."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.current
        if token.kind != "eof":
            self.index += 1
        return token

    def error(self, message: str, token: Token | None = None) -> PromQLParseError:
        token = token or self.current
        return PromQLParseError(message, token.pos)

    def at_op(self, *values: str) -> bool:
        return self.current.kind == "op" and self.current.value in values

    def at_keyword(self, *values: str) -> bool:
        return self.current.kind == "ident" and self.current.value.lower() in values

    def expect_op(self, value: str) -> Token:
        if not self.at_op(value):
            raise self.error(f"expected '{value}', got {self._describe(self.current)}")
        return self.advance()

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind == "eof":
            return "end of input"
        return f"'{token.value}'"

    def parse(self) -> Node:
        if self.current.kind == "eof":
            raise self.error("no expression found in input")
        expr = self.parse_expr(0)
        if self.current.kind != "eof":
            raise self.error(f"unexpected {self._describe(self.current)}")
        return expr

    def _binary_op(self) -> Optional[str]:
        token = self.current
        if token.kind == "op" and token.value in BINARY_PRECEDENCE:
            return token.value
        if token.kind == "ident" and token.value.lower() in ("and", "or", "unless", "atan2"):
            return token.value.lower()
        return None

    def parse_expr(self, min_prec: int) -> Node:
        self.depth += 1
        try:
            if self.depth > MAX_NESTING_DEPTH:
                raise self.error("expression nested too deeply")
            return self._parse_binary(min_prec)
        finally:
            self.depth -= 1

    def _parse_binary(self, min_prec: int) -> Node:
        lhs = self.parse_unary()
        while True:
            op = self._binary_op()
            if op is None or BINARY_PRECEDENCE[op] < min_prec:
                return lhs
            self.advance()
            node = BinaryExpr(op=op, lhs=lhs, rhs=lhs)

            if self.at_keyword("bool"):
                if op not in COMPARISON_OPS:
                    raise self.error("bool modifier can only be used on comparison operators")
                self.advance()
                node.return_bool = True

            if self.at_keyword("on", "ignoring"):
                node.matching = self.advance().value.lower()
                node.matching_labels = self.parse_label_list()
                if self.at_keyword("group_left", "group_right"):
                    if op in SET_OPS:
                        raise self.error(f"no grouping allowed for '{op}' operation")
                    node.group = self.advance().value.lower()
                    if self.at_op("("):
                        node.include_labels = self.parse_label_list()

            prec = BINARY_PRECEDENCE[op]
            next_prec = prec if op == "^" else prec + 1
            node.rhs = self.parse_expr(next_prec)
            lhs = node

    def parse_unary(self) -> Node:
        if self.at_op("+", "-"):
            op = self.advance().value
            # Unary operators bind looser than ^ but tighter than the rest
            return UnaryExpr(op=op, expr=self.parse_expr(BINARY_PRECEDENCE["^"]))
        return self.parse_postfix(self.parse_primary())

    def parse_primary(self) -> Node:
        token = self.current

        if token.kind == "number":
            self.advance()
            return NumberLiteral(value=_parse_number(token.value))

        if token.kind == "duration":
            raise self.error(f"unexpected duration '{token.value}'")

        if token.kind == "string":
            self.advance()
            return StringLiteral(value=token.value)

        if self.at_op("("):
            self.advance()
            expr = self.parse_expr(0)
            self.expect_op(")")
            return ParenExpr(expr=expr)

        if self.at_op("{"):
            return self.parse_vector_selector(None)

        if token.kind == "ident":
            lowered = token.value.lower()
            nxt = self.peek()
            if lowered in AGGREGATORS and (
                (nxt.kind == "op" and nxt.value == "(")
                or (nxt.kind == "ident" and nxt.value.lower() in ("by", "without"))
            ):
                return self.parse_aggregate()
            if nxt.kind == "op" and nxt.value == "(":
                return self.parse_call()
            if lowered in ("inf", "nan"):
                self.advance()
                return NumberLiteral(value=float(lowered))
            if lowered in KEYWORDS:
                raise self.error(f"unexpected keyword '{token.value}'")
            self.advance()
            return self.parse_vector_selector(token.value)

        raise self.error(f"unexpected {self._describe(token)}")

    def parse_call(self) -> Node:
        name_token = self.advance()
        if name_token.value not in FUNCTIONS:
            raise self.error(f"unknown function with name '{name_token.value}'", name_token)
        self.expect_op("(")
        args: list[Node] = []
        if not self.at_op(")"):
            args.append(self.parse_expr(0))
            while self.at_op(","):
                self.advance()
                args.append(self.parse_expr(0))
        self.expect_op(")")
        return Call(func=name_token.value, args=args)

    def parse_aggregate(self) -> Node:
        op = self.advance().value.lower()
        grouping: list[str] = []
        without = False
        has_grouping = False

        if self.at_keyword("by", "without"):
            without = self.advance().value.lower() == "without"
            grouping = self.parse_label_list()
            has_grouping = True

        self.expect_op("(")
        param: Optional[Node] = None
        if op in PARAM_AGGREGATORS:
            param = self.parse_expr(0)
            self.expect_op(",")
        expr = self.parse_expr(0)
        self.expect_op(")")

        if self.at_keyword("by", "without"):
            if has_grouping:
                raise self.error("aggregation already has a grouping clause")
            without = self.advance().value.lower() == "without"
            grouping = self.parse_label_list()

        return AggregateExpr(op=op, expr=expr, param=param, grouping=grouping, without=without)

    def parse_label_list(self) -> list[str]:
        self.expect_op("(")
        labels: list[str] = []
        while not self.at_op(")"):
            if self.current.kind not in ("ident", "string"):
                raise self.error(f"unexpected {self._describe(self.current)} in grouping opts")
            labels.append(self.advance().value)
            if self.at_op(","):
                self.advance()
            elif not self.at_op(")"):
                raise self.error(f"unexpected {self._describe(self.current)} in grouping opts")
        self.expect_op(")")
        return labels

    def parse_vector_selector(self, name: Optional[str]) -> Node:
        start = self.current
        selector = VectorSelector(name=name)
        if self.at_op("{"):
            self.advance()
            while not self.at_op("}"):
                selector.matchers.append(self.parse_label_matcher())
                if self.at_op(","):
                    self.advance()
                elif not self.at_op("}"):
                    raise self.error(
                        f"unexpected {self._describe(self.current)} in label matching"
                    )
            self.expect_op("}")

        if name is None and all(m.matches_empty() for m in selector.matchers):
            raise self.error("vector selector must contain at least one non-empty matcher", start)
        return selector

    def parse_label_matcher(self) -> LabelMatcher:
        name_token = self.current
        if name_token.kind != "ident":
            raise self.error(f"unexpected {self._describe(name_token)} in label matching")
        self.advance()
        op_token = self.current
        if not self.at_op("=", "!=", "=~", "!~"):
            raise self.error(f"unexpected {self._describe(op_token)} in label matching")
        self.advance()
        value_token = self.current
        if value_token.kind != "string":
            raise self.error(f"unexpected {self._describe(value_token)} in label matching")
        self.advance()
        return LabelMatcher(name=name_token.value, op=MatchType(op_token.value), value=value_token.value)

    def parse_duration(self) -> str:
        token = self.current
        if token.kind not in ("duration", "number"):
            raise self.error(f"unexpected {self._describe(token)}, expected duration")
        self.advance()
        return token.value

    def parse_postfix(self, expr: Node) -> Node:
        while True:
            if self.at_op("["):
                expr = self.parse_range(expr)
            elif self.at_keyword("offset"):
                self.advance()
                sign = ""
                if self.at_op("-"):
                    sign = self.advance().value
                _set_modifier(self, expr, "offset", sign + self.parse_duration())
            elif self.at_op("@"):
                self.advance()
                _set_modifier(self, expr, "at", self.parse_at())
            else:
                return expr

    def parse_range(self, expr: Node) -> Node:
        self.expect_op("[")
        range_ = self.parse_duration()
        if self.at_op(":"):
            self.advance()
            step = None
            if not self.at_op("]"):
                step = self.parse_duration()
            self.expect_op("]")
            return SubqueryExpr(expr=expr, range=range_, step=step)
        self.expect_op("]")
        if not isinstance(expr, VectorSelector):
            raise self.error("ranges only allowed for vector selectors")
        return MatrixSelector(vector=expr, range=range_)

    def parse_at(self) -> str:
        token = self.current
        if token.kind == "number":
            self.advance()
            return token.value
        if token.kind == "ident" and token.value in ("start", "end"):
            self.advance()
            self.expect_op("(")
            self.expect_op(")")
            return f"{token.value}()"
        raise self.error(f"unexpected {self._describe(token)} in @ modifier")


def _set_modifier(parser: Parser, expr: Node, attr: str, value: str) -> None:
    target: Node = expr.vector if isinstance(expr, MatrixSelector) else expr
    if not isinstance(target, (VectorSelector, SubqueryExpr)):
        raise parser.error(f"{attr} modifier must follow a selector or subquery")
    if getattr(target, attr) is not None:
        raise parser.error(f"{attr} may not be set multiple times")
    setattr(target, attr, value)


def _parse_number(value: str) -> float:
    if value[:2].lower() == "0x":
        return float(int(value, 16))
    return float(value)


def parse_expr(text: str) -> Node:
    """Parse a PromQL expression.

    Raises:
        PromQLParseError: If the expression is not valid PromQL
    """
    return Parser(text).parse()


def walk(node: Node) -> Iterator[Node]:
    """Yield every node depth-first, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def vector_selectors(node: Node) -> list[VectorSelector]:
    """All vector selectors in traversal order."""
    return [n for n in walk(node) if isinstance(n, VectorSelector)]


def check_matcher(
    selector: VectorSelector,
    label: str,
    match_type: MatchType,
    value: str,
) -> Optional[str]:
    """Verify a selector matches ``label`` with the given operator and value.

    Returns:
        None when the matcher is as expected, otherwise the violation text
    """
    matcher = selector.get_matcher(label)
    if matcher is None:
        return f"{label} selector not found"
    if matcher.op != match_type:
        return f"{label} selector is {matcher.op.value}, not {match_type.value}"
    if matcher.value != value:
        return f"{label} selector is {matcher.value}, not {value}"
    return None


# Grafana substitutes these before the query reaches Prometheus
_INTERVAL_MACRO_RE = re.compile(
    r"\$(?:__(rate_interval|interval_ms|interval|range_ms|range_s|range)\b"
    r"|\{__(rate_interval|interval_ms|interval|range_ms|range_s|range)\})"
)

_MACRO_PLACEHOLDERS = {
    "rate_interval": "5m",
    "interval": "5m",
    "range": "5m",
    "interval_ms": "300000",
    "range_ms": "300000",
    "range_s": "300",
}


def expand_interval_macros(text: str) -> str:
    """Replace Grafana interval macros with placeholder values."""

    def replace(match: re.Match) -> str:
        return _MACRO_PLACEHOLDERS[match.group(1) or match.group(2)]

    return _INTERVAL_MACRO_RE.sub(replace, text)
