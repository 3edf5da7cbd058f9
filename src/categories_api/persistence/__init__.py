"""SQLAlchemy persistence for categories."""

from __future__ import annotations

from .compiler import build_sqla_filter
from .mapper import CategoryMapper
from .models import LINK_TABLES, Base, CategoryModel, create_schema, link_columns
from .operators import (
    DEFAULT_SQLA_REGISTRY,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_sqla_registry,
)
from .query import CategoryQueryBuilder
from .store import (
    CategoryStore,
    SQLAlchemyCategoryStore,
    create_engine_from_config,
    create_session_factory,
)

__all__ = [
    "Base",
    "CategoryMapper",
    "CategoryModel",
    "CategoryQueryBuilder",
    "CategoryStore",
    "DEFAULT_SQLA_REGISTRY",
    "LINK_TABLES",
    "SQLAlchemyCategoryStore",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_sqla_registry",
    "build_sqla_filter",
    "create_engine_from_config",
    "create_schema",
    "create_session_factory",
    "link_columns",
]
