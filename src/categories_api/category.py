"""Category record."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .types import CategoryType

MANDATORY_FIELDS: tuple[str, ...] = ("label", "type")

# Set by the store only; ignored when supplied by a caller.
STORE_MANAGED_FIELDS: frozenset[str] = frozenset(
    {"id", "created_by", "created_at", "updated_by", "updated_at"}
)

# Aliases accepted on input for columns whose public name differs.
FIELD_ALIASES: dict[str, str] = {"fk_parent": "parent_id", "rowid": "id"}


class Category(BaseModel):
    """A taxonomy node.

    Unknown attributes are kept as extra fields and persisted verbatim.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    id: int | None = None
    label: str
    type: CategoryType
    entity: int = 1
    description: str | None = None
    color: str | None = None
    visible: int = 0
    parent_id: int | None = None
    ref_ext: str | None = None
    import_key: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_by: str | None = None
    updated_at: datetime | None = None

    @field_validator("label")
    @classmethod
    def _label_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("label must not be empty")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> CategoryType:
        return CategoryType.parse(v)

    @field_serializer("type")
    def _serialize_type(self, v: CategoryType) -> str:
        return v.value

    @property
    def extra_attributes(self) -> dict[str, Any]:
        """Free-form attributes outside the declared columns."""
        return dict(self.model_extra or {})

    @classmethod
    def from_fields(cls, fields: dict[str, Any]) -> Category:
        return cls.model_validate(normalise_fields(fields))

    def assign(self, fields: dict[str, Any]) -> None:
        """Overwrite every supplied field except the store-managed ones."""
        for name, value in normalise_fields(fields).items():
            if name in STORE_MANAGED_FIELDS:
                continue
            setattr(self, name, value)


def normalise_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {FIELD_ALIASES.get(k, k): v for k, v in fields.items()}


__all__: list[str] = [
    "Category",
    "FIELD_ALIASES",
    "MANDATORY_FIELDS",
    "STORE_MANAGED_FIELDS",
    "normalise_fields",
]
