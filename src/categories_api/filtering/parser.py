"""ListingParser — listing params -> specification dict + QueryOptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from .exceptions import FieldNotAllowedError
from .pagination import PageRequest, PaginationParser
from .syntax import FilterSyntax

if TYPE_CHECKING:
    from .whitelist import FieldWhitelist

_SORT_ORDERS = ("ASC", "DESC")


class QueryOptions(NamedTuple):
    """Validated sort and pagination."""

    sort_field: str
    sort_order: str
    page: PageRequest


class ListingParser:
    """Validate every listing parameter before a query is built."""

    def __init__(
        self,
        syntax: FilterSyntax | None = None,
        pagination: PaginationParser | None = None,
    ) -> None:
        self._syntax = syntax or FilterSyntax()
        self._pagination = pagination or PaginationParser()

    def parse(
        self,
        whitelist: FieldWhitelist,
        *,
        sort_field: str,
        sort_order: str,
        limit: Any = 0,
        page: Any = 0,
        filter_expression: str | None = None,
    ) -> tuple[dict[str, Any] | None, QueryOptions]:
        """Return (specification dict or None, query options)."""
        spec = self.parse_filter(filter_expression, whitelist)
        options = QueryOptions(
            sort_field=whitelist.allow_sort(sort_field),
            sort_order=self._parse_order(sort_order),
            page=self._pagination.parse(limit, page),
        )
        return spec, options

    def parse_filter(
        self, raw: str | None, whitelist: FieldWhitelist
    ) -> dict[str, Any] | None:
        spec_dict = self._syntax.parse_filter(raw)
        if not spec_dict:
            return None
        return self._resolve_fields(spec_dict, whitelist)

    def _resolve_fields(
        self, data: dict[str, Any], whitelist: FieldWhitelist
    ) -> dict[str, Any]:
        if "attr" in data:
            column = whitelist.allow_filter(data["attr"], data["op"])
            return {**data, "attr": column}
        return {
            "op": data["op"],
            "conditions": [
                self._resolve_fields(c, whitelist) for c in data["conditions"]
            ],
        }

    def _parse_order(self, raw: str | None) -> str:
        order = (raw or "ASC").strip().upper()
        if order not in _SORT_ORDERS:
            raise FieldNotAllowedError(
                {"sortorder": [f"Sort order must be ASC or DESC, got {raw!r}"]}
            )
        return order


__all__: list[str] = ["ListingParser", "QueryOptions"]
