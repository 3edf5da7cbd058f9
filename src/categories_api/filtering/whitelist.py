"""FieldWhitelist — per-listing filterable and sortable fields."""

from __future__ import annotations

from collections.abc import Mapping

from .exceptions import FieldNotAllowedError
from .operators import COMPARISON_OPERATORS, FilterOperator


class FieldWhitelist:
    """Allowed fields and operators for one listing shape.

    Field names may be given bare (``label``) or with the listing's table
    alias (``t.label``). ``aliases`` maps legacy names onto columns.
    """

    def __init__(
        self,
        *,
        filterable_fields: Mapping[str, set[FilterOperator]] | None = None,
        sortable_fields: set[str] | None = None,
        aliases: Mapping[str, str] | None = None,
        table_alias: str | None = None,
    ) -> None:
        self.filterable_fields = dict(filterable_fields or {})
        self.sortable_fields = sortable_fields or set()
        self.aliases = dict(aliases or {})
        self.table_alias = table_alias

    def resolve(self, field: str) -> str:
        """Strip the table alias and apply legacy aliases."""
        name = field
        if "." in name:
            prefix, _, name = name.partition(".")
            if prefix != self.table_alias:
                raise FieldNotAllowedError(
                    {"field": [f"Unknown table alias {prefix!r} in {field!r}"]}
                )
        return self.aliases.get(name, name)

    def allow_filter(self, field: str, op: str) -> str:
        """Return the column for ``field`` or raise FieldNotAllowedError."""
        column = self.resolve(field)
        if column not in self.filterable_fields:
            raise FieldNotAllowedError({"field": [f"Field {field!r} is not filterable"]})
        try:
            operator = FilterOperator(op)
        except ValueError:
            operator = None
        if operator not in self.filterable_fields[column]:
            raise FieldNotAllowedError(
                {"op": [f"Operator {op!r} not allowed for field {field!r}"]}
            )
        return column

    def allow_sort(self, field: str) -> str:
        column = self.resolve(field)
        if column not in self.sortable_fields:
            raise FieldNotAllowedError({"sortfield": [f"Field {field!r} is not sortable"]})
        return column


_LEGACY_ALIASES = {"rowid": "id", "fk_parent": "parent_id"}
_ALL_OPS = set(COMPARISON_OPERATORS)
_CATEGORY_COLUMNS = (
    "id",
    "label",
    "type",
    "entity",
    "description",
    "color",
    "visible",
    "parent_id",
    "ref_ext",
    "created_at",
    "updated_at",
)


def category_whitelist(table_alias: str) -> FieldWhitelist:
    """Whitelist for category listings queried under ``table_alias``."""
    return FieldWhitelist(
        filterable_fields={c: set(_ALL_OPS) for c in _CATEGORY_COLUMNS},
        sortable_fields=set(_CATEGORY_COLUMNS),
        aliases=_LEGACY_ALIASES,
        table_alias=table_alias,
    )


# Plain listing uses "t", the item listing "s".
LIST_WHITELIST = category_whitelist("t")
ITEM_LIST_WHITELIST = category_whitelist("s")


__all__: list[str] = [
    "FieldWhitelist",
    "ITEM_LIST_WHITELIST",
    "LIST_WHITELIST",
    "category_whitelist",
]
