"""Strip internal fields before a record leaves the API."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .category import Category

DEFAULT_INTERNAL_FIELDS: frozenset[str] = frozenset(
    {
        "import_key",
        "db",
        "error",
        "errors",
        "fields",
        "oldcopy",
        "context",
        "linked_objects_ids",
    }
)


class RecordSanitizer:
    """Builds the outbound copy of a record without internal fields."""

    def __init__(self, internal_fields: Iterable[str] = ()) -> None:
        self.internal_fields = DEFAULT_INTERNAL_FIELDS | frozenset(internal_fields)

    def clean(self, record: Category | Mapping[str, Any]) -> dict[str, Any]:
        """Return a new dict; ``record`` itself is never modified."""
        if isinstance(record, Category):
            data = record.model_dump(mode="json")
        else:
            data = dict(record)
        return {k: v for k, v in data.items() if k not in self.internal_fields}
