"""Configuration for the categories API."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CategoriesConfig:
    """Categories API configuration.

    Attributes:
        default_sort_field: Sort field used when the caller passes none.
        default_sort_order: Sort order used when the caller passes none.
        max_unbounded_rows: Row cap applied when ``limit`` is 0.
            ``None`` leaves the store default in place.
        internal_fields: Extra field names stripped by the sanitizer.
        strict_delete_errors: Raise ``PersistenceError`` instead of
            ``UnauthorizedError`` when the store refuses a delete.
        database_url: SQLAlchemy async URL used by ``create_engine_from_config``.
    """

    default_sort_field: str = "id"
    default_sort_order: str = "ASC"
    max_unbounded_rows: int | None = None
    internal_fields: frozenset[str] = field(default_factory=frozenset)
    strict_delete_errors: bool = False
    database_url: str = "sqlite+aiosqlite:///categories.db"


__all__: list[str] = ["CategoriesConfig"]
