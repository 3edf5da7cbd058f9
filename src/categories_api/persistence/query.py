"""Bounded SELECT statements for category listings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, asc, desc, select

from ..config import CategoriesConfig
from ..types import LINK_TARGETS, type_index
from .compiler import build_sqla_filter
from .models import CategoryModel, link_columns

if TYPE_CHECKING:
    from ..actor import Actor
    from ..filtering.parser import QueryOptions
    from ..types import CategoryType
    from .operators import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)


def _coerce_type(value: Any) -> Any:
    if isinstance(value, str):
        return type_index(value)
    return value


class CategoryQueryBuilder:
    """
    Compose listing queries from already validated parameters.

    Every statement selects category ids only, is scoped to the actor's
    authorized entities, and orders by a whitelisted column.
    """

    def __init__(
        self,
        config: CategoriesConfig | None = None,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._config = config or CategoriesConfig()
        self._registry = registry
        self._coercers = {"type": _coerce_type}

    def build_list(
        self,
        actor: Actor,
        options: QueryOptions,
        *,
        category_type: str | None = None,
        spec: dict[str, Any] | None = None,
    ) -> Select[Any]:
        stmt = select(CategoryModel.id).where(
            CategoryModel.entity.in_(sorted(actor.entities))
        )
        if category_type:
            stmt = stmt.where(CategoryModel.type == type_index(category_type))
        if spec:
            stmt = stmt.where(
                build_sqla_filter(
                    CategoryModel,
                    spec,
                    registry=self._registry,
                    coercers=self._coercers,
                )
            )
        return self._finish(stmt, options)

    def build_item_list(
        self,
        actor: Actor,
        options: QueryOptions,
        *,
        category_type: CategoryType,
        item_id: int,
    ) -> Select[Any]:
        if category_type not in LINK_TARGETS:
            raise ValueError(f"No link table for category type {category_type!r}")
        category_col, item_col = link_columns(category_type)
        stmt = (
            select(CategoryModel.id)
            .join(category_col.table, CategoryModel.id == category_col)
            .where(CategoryModel.entity.in_(sorted(actor.entities)))
            .where(CategoryModel.type == category_type.ordinal)
            .where(item_col == item_id)
        )
        return self._finish(stmt, options)

    def _finish(self, stmt: Select[Any], options: QueryOptions) -> Select[Any]:
        column = getattr(CategoryModel, options.sort_field)
        direction = desc if options.sort_order == "DESC" else asc
        order = [direction(column)]
        if options.sort_field != "id":
            order.append(asc(CategoryModel.id))
        stmt = stmt.order_by(*order)

        page = options.page
        if page.fetch_size is not None:
            stmt = stmt.limit(page.fetch_size).offset(page.offset)
        elif self._config.max_unbounded_rows is not None:
            stmt = stmt.limit(self._config.max_unbounded_rows)
        logger.debug(
            "Built category listing: sort=%s %s limit=%s page=%s",
            options.sort_field,
            options.sort_order,
            page.limit,
            page.page,
        )
        return stmt


__all__: list[str] = ["CategoryQueryBuilder"]
