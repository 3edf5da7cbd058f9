"""PaginationParser: limit/page from listing params."""

from __future__ import annotations

from typing import Any, NamedTuple, TypeVar

from .exceptions import FilterParseError

T = TypeVar("T")

# Largest value a SQL LIMIT or OFFSET can bind (signed 64-bit).
MAX_SQL_INT = 2**63 - 1


class PageRequest(NamedTuple):
    """Normalised pagination. ``limit == 0`` means unbounded."""

    limit: int
    page: int

    @property
    def offset(self) -> int:
        return self.limit * self.page

    @property
    def fetch_size(self) -> int | None:
        """Rows to fetch: one extra to detect a following page."""
        return self.limit + 1 if self.limit else None

    def trim(self, rows: list[T]) -> tuple[list[T], bool]:
        """Return at most ``limit`` rows and whether more rows exist."""
        if not self.limit:
            return rows, False
        return rows[: self.limit], len(rows) > self.limit


class PaginationParser:
    """Parse limit and page; negative pages are coerced to 0."""

    def parse(self, limit: Any = 0, page: Any = 0) -> PageRequest:
        limit_value = self._int(limit, "limit")
        if limit_value < 0:
            raise FilterParseError({"limit": ["limit must be a non-negative integer"]})
        page_value = max(0, self._int(page, "page"))
        request = PageRequest(limit=limit_value, page=page_value)
        if (request.fetch_size or 0) > MAX_SQL_INT:
            raise FilterParseError({"limit": ["limit is too large"]})
        if request.offset > MAX_SQL_INT:
            raise FilterParseError({"page": ["page is out of range"]})
        return request

    def _int(self, v: Any, name: str) -> int:
        if v is None or v == "":
            return 0
        if isinstance(v, bool):
            raise FilterParseError({name: [f"{name} must be an integer"]})
        try:
            return int(v)
        except (TypeError, ValueError):
            raise FilterParseError({name: [f"{name} must be an integer"]}) from None


__all__: list[str] = ["MAX_SQL_INT", "PageRequest", "PaginationParser"]
