"""Mapping between ``Category`` records and ``CategoryModel`` rows."""

from __future__ import annotations

from typing import Any

from pydantic_core import to_jsonable_python

from ..category import Category
from ..types import CategoryType
from .models import CategoryModel

_COLUMNS: tuple[str, ...] = tuple(
    c.key for c in CategoryModel.__table__.columns if c.key not in ("attributes",)
)


class CategoryMapper:
    """Columns map one to one; extra attributes live in the JSON column."""

    def to_model(self, category: Category, model: CategoryModel | None = None) -> CategoryModel:
        """Copy ``category`` onto ``model`` (a new row when ``None``)."""
        target = model if model is not None else CategoryModel()
        for name in _COLUMNS:
            if name == "id" and category.id is None:
                continue
            value = getattr(category, name)
            if name == "type":
                value = category.type.ordinal
            setattr(target, name, value)
        extra = category.extra_attributes
        target.attributes = to_jsonable_python(extra) if extra else None
        return target

    def from_model(self, model: CategoryModel) -> Category:
        data: dict[str, Any] = dict(model.attributes or {})
        for name in _COLUMNS:
            data[name] = getattr(model, name)
        data["type"] = CategoryType.from_index(model.type)
        return Category.model_validate(data)


__all__: list[str] = ["CategoryMapper"]
