"""FilterSyntax — parenthesized ``(column:operator:literal)`` expressions.

Grammar (keywords are case-insensitive, whitespace between tokens is
ignored)::

    expression := term (OR term)*
    term       := factor (AND factor)*
    factor     := clause | "(" expression ")"
    clause     := "(" column ":" operator ":" literal ")"
    operator   := "=" | "!=" | "<" | ">" | "<=" | ">=" | "like"
    literal    := quoted string | number

Quoted literals may not contain an unescaped ``(``, ``)`` or ``:``. The
escapes are ``\\(``, ``\\)``, ``\\:``, ``\\\\``, ``\\'`` and a doubled quote.

The output is a specification dict: ``{"op", "attr", "val"}`` leaves and
``{"op": "and" | "or", "conditions": [...]}`` nodes. Nothing from the input
is ever turned into SQL text; literals end up as bound parameters.
"""

from __future__ import annotations

import re
from typing import Any, NoReturn

from .exceptions import FilterParseError
from .operators import FilterOperator

_COLUMN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?")
_NUMBER_RE = re.compile(r"[+-]?\d+(?:\.\d+)?(?![A-Za-z0-9_.])")
_KEYWORD_RE = re.compile(r"(and|or)\b", re.IGNORECASE)
_LIKE_RE = re.compile(r"like\b", re.IGNORECASE)

# Longest symbols first so "<=" wins over "<".
_SYMBOL_OPERATORS: tuple[FilterOperator, ...] = (
    FilterOperator.LE,
    FilterOperator.GE,
    FilterOperator.NE,
    FilterOperator.EQ,
    FilterOperator.LT,
    FilterOperator.GT,
)

_FORBIDDEN_IN_LITERAL = "():"


class FilterSyntax:
    """Parser for filter expressions.

    Args:
        max_length: Longest accepted expression.
        max_depth: Deepest accepted group nesting.
    """

    def __init__(self, *, max_length: int = 2000, max_depth: int = 16) -> None:
        self.max_length = max_length
        self.max_depth = max_depth

    def parse_filter(self, raw: str | None) -> dict[str, Any]:
        """Parse ``raw`` into a specification dict (``{}`` for blank input)."""
        if raw is None:
            return {}
        if not isinstance(raw, str):
            raise FilterParseError("Filter expression must be a string")
        if not raw.strip():
            return {}
        if len(raw) > self.max_length:
            raise FilterParseError(
                f"Filter expression longer than {self.max_length} characters"
            )
        return _Parser(raw, self.max_depth).parse()


class _Parser:
    def __init__(self, text: str, max_depth: int) -> None:
        self.text = text
        self.pos = 0
        self.max_depth = max_depth
        self.depth = 0

    # -- entry ------------------------------------------------------------

    def parse(self) -> dict[str, Any]:
        node = self._expression()
        self._skip_ws()
        if self.pos != len(self.text):
            self._fail("Unexpected input")
        return node

    # -- grammar ----------------------------------------------------------

    def _expression(self) -> dict[str, Any]:
        terms = [self._term()]
        while self._keyword() == FilterOperator.OR:
            terms.append(self._term())
        return _combine(FilterOperator.OR, terms)

    def _term(self) -> dict[str, Any]:
        factors = [self._factor()]
        while self._keyword(only=FilterOperator.AND) == FilterOperator.AND:
            factors.append(self._factor())
        return _combine(FilterOperator.AND, factors)

    def _factor(self) -> dict[str, Any]:
        self._skip_ws()
        self._expect("(")
        self._skip_ws()
        if self._peek() == "(":
            self.depth += 1
            if self.depth > self.max_depth:
                self._fail("Filter expression nested too deeply")
            node = self._expression()
            self._skip_ws()
            self._expect(")")
            self.depth -= 1
            return node
        return self._clause()

    def _clause(self) -> dict[str, Any]:
        column = self._column()
        self._skip_ws()
        self._expect(":")
        self._skip_ws()
        op = self._operator()
        self._skip_ws()
        self._expect(":")
        self._skip_ws()
        value = self._literal()
        self._skip_ws()
        self._expect(")")
        return {"op": op.value, "attr": column, "val": value}

    # -- tokens -----------------------------------------------------------

    def _column(self) -> str:
        m = _COLUMN_RE.match(self.text, self.pos)
        if not m:
            self._fail("Expected column name")
        self.pos = m.end()
        return m.group(0)

    def _operator(self) -> FilterOperator:
        for op in _SYMBOL_OPERATORS:
            if self.text.startswith(op.value, self.pos):
                self.pos += len(op.value)
                return op
        m = _LIKE_RE.match(self.text, self.pos)
        if m:
            self.pos = m.end()
            return FilterOperator.LIKE
        self._fail("Unsupported operator")

    def _literal(self) -> Any:
        if self._peek() == "'":
            return self._quoted()
        m = _NUMBER_RE.match(self.text, self.pos)
        if not m:
            self._fail("Expected quoted string or number")
        self.pos = m.end()
        number = m.group(0)
        return float(number) if "." in number else int(number)

    def _quoted(self) -> str:
        start = self.pos
        i = self.pos + 1
        out: list[str] = []
        text = self.text
        while True:
            if i >= len(text):
                self.pos = start
                self._fail("Unterminated string literal")
            c = text[i]
            if c == "\\":
                if i + 1 >= len(text):
                    self.pos = i
                    self._fail("Dangling escape")
                out.append(text[i + 1])
                i += 2
            elif c == "'":
                if i + 1 < len(text) and text[i + 1] == "'":
                    out.append("'")
                    i += 2
                    continue
                i += 1
                break
            elif c in _FORBIDDEN_IN_LITERAL:
                self.pos = i
                self._fail(f"Unescaped {c!r} in literal")
            else:
                out.append(c)
                i += 1
        self.pos = i
        return "".join(out)

    def _keyword(self, only: FilterOperator | None = None) -> FilterOperator | None:
        """Consume ``and``/``or`` if present; stop quietly at ``)`` or end."""
        self._skip_ws()
        if self.pos >= len(self.text) or self._peek() == ")":
            return None
        m = _KEYWORD_RE.match(self.text, self.pos)
        if not m:
            self._fail("Expected 'and' or 'or'")
        op = FilterOperator(m.group(1).lower())
        if only is not None and op != only:
            return None
        self.pos = m.end()
        return op

    # -- helpers ----------------------------------------------------------

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            self._fail(f"Expected {char!r}")
        self.pos += 1

    def _fail(self, reason: str) -> NoReturn:
        raise FilterParseError(
            {"sqlfilters": [f"{reason} at position {self.pos} in {self.text!r}"]}
        )


def _combine(op: FilterOperator, nodes: list[dict[str, Any]]) -> dict[str, Any]:
    if len(nodes) == 1:
        return nodes[0]
    return {"op": op.value, "conditions": nodes}


__all__: list[str] = ["FilterSyntax"]
