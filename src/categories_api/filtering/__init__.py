"""Listing parameter parsing — filter, sort, pagination."""

from __future__ import annotations

from .exceptions import FieldNotAllowedError, FilterParseError
from .operators import FilterOperator
from .pagination import PageRequest, PaginationParser
from .parser import ListingParser, QueryOptions
from .syntax import FilterSyntax
from .whitelist import (
    ITEM_LIST_WHITELIST,
    LIST_WHITELIST,
    FieldWhitelist,
    category_whitelist,
)

__all__ = [
    "FieldNotAllowedError",
    "FieldWhitelist",
    "FilterOperator",
    "FilterParseError",
    "FilterSyntax",
    "ITEM_LIST_WHITELIST",
    "LIST_WHITELIST",
    "ListingParser",
    "PageRequest",
    "PaginationParser",
    "QueryOptions",
    "category_whitelist",
]
