"""
SQLAlchemy operator compilation strategy.

Each filter operator is an isolated ``SQLAlchemyOperator`` registered in a
``SQLAlchemyOperatorRegistry``. Values are always passed to SQLAlchemy as
Python objects, so they end up as bound parameters.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

from ..filtering.operators import FilterOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a filter operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A SQLAlchemy column or instrumented attribute.
            value: The literal from the filter expression.
        """
        ...


class SQLAlchemyOperatorRegistry:
    """Registry of ``SQLAlchemyOperator`` instances keyed by operator."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: FilterOperator) -> SQLAlchemyOperator | None:
        return self._operators.get(name)

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def apply(self, name: FilterOperator, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for SQLAlchemy: {name}")
        return op.apply(column, value)


class _BinaryOperator(SQLAlchemyOperator):
    operator: FilterOperator
    func: Any

    @property
    def name(self) -> FilterOperator:
        return self.operator

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", type(self).func(column, value))


class EqualOperator(_BinaryOperator):
    operator = FilterOperator.EQ
    func = op_module.eq


class NotEqualOperator(_BinaryOperator):
    operator = FilterOperator.NE
    func = op_module.ne


class GreaterThanOperator(_BinaryOperator):
    operator = FilterOperator.GT
    func = op_module.gt


class LessThanOperator(_BinaryOperator):
    operator = FilterOperator.LT
    func = op_module.lt


class GreaterEqualOperator(_BinaryOperator):
    operator = FilterOperator.GE
    func = op_module.ge


class LessEqualOperator(_BinaryOperator):
    operator = FilterOperator.LE
    func = op_module.le


class LikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(str(value)))


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with every operator of the filter grammar."""
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        LikeOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_sqla_registry",
]
