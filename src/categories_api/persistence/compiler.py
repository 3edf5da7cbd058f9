"""
Compile a filter specification dict (AST) into a SQLAlchemy expression.

The ``build_sqla_filter`` function walks the tree and delegates leaf nodes
to the operator registry. Leaf ``attr`` values must already be resolved
against a whitelist; the compiler only looks them up on the model.

Coercers
--------
``coercers`` maps a column name to a callable applied to the literal before
it is bound, e.g. turning a type label into its enumeration index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, and_, or_
from sqlalchemy.orm import InstrumentedAttribute

from ..filtering.operators import FilterOperator
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .operators import SQLAlchemyOperatorRegistry


def build_sqla_filter(
    model: type[Any],
    data: dict[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
    coercers: Mapping[str, Callable[[Any], Any]] | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy filter expression from a specification dict.

    Args:
        model: The SQLAlchemy model class.
        data: Specification dict produced by ``FilterSyntax``.
        registry: Optional custom operator registry.  Falls back to
            ``DEFAULT_SQLA_REGISTRY``.
        coercers: Optional per-column literal converters.

    Returns:
        SQLAlchemy Boolean expression.
    """
    reg = registry or DEFAULT_SQLA_REGISTRY
    return _compile_node(model, data, reg, coercers or {})


def _compile_node(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
    coercers: Mapping[str, Callable[[Any], Any]],
) -> ColumnElement[bool]:
    op_str = str(data.get("op", "")).lower()

    if op_str == FilterOperator.AND:
        return and_(
            *[_compile_node(model, c, registry, coercers) for c in data["conditions"]]
        )
    if op_str == FilterOperator.OR:
        return or_(
            *[_compile_node(model, c, registry, coercers) for c in data["conditions"]]
        )

    attr: str | None = data.get("attr")
    if not attr:
        raise ValueError(f"Filter node missing 'attr': {data}")

    column = getattr(model, attr, None)
    if not isinstance(column, InstrumentedAttribute):
        raise AttributeError(f"Model {model.__name__} has no column {attr}")

    val = data.get("val")
    coerce = coercers.get(attr)
    if coerce is not None:
        val = coerce(val)
    return registry.apply(FilterOperator(op_str), column, val)


__all__: list[str] = ["build_sqla_filter"]
