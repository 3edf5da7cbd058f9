"""
Category store: the persistence collaborator of ``CategoryResource``.

``CategoryStore`` is the port; ``SQLAlchemyCategoryStore`` implements it on
an ``async_sessionmaker``. Each call opens its own session and transaction.
Store errors are never retried.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from ..exceptions import PersistenceError
from .mapper import CategoryMapper
from .models import LINK_TABLES, CategoryModel, link_columns

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from ..actor import Actor
    from ..category import Category
    from ..config import CategoriesConfig
    from ..types import CategoryType

logger = logging.getLogger(__name__)


@runtime_checkable
class CategoryStore(Protocol):
    """Persistence operations used by the resource handler."""

    async def fetch(self, category_id: int) -> Category | None: ...

    async def select_ids(self, stmt: Select[Any]) -> list[int]: ...

    async def create(self, category: Category, actor: Actor) -> int: ...

    async def update(self, category: Category, actor: Actor) -> bool: ...

    async def delete(self, category: Category, actor: Actor) -> bool: ...


class SQLAlchemyCategoryStore:
    """
    ``CategoryStore`` backed by SQLAlchemy async sessions.

    ``create`` rejects a label already used by a category of the same type,
    entity and parent. ``delete`` removes the category's link rows and
    re-parents its children onto its own parent.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        mapper: CategoryMapper | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._mapper = mapper or CategoryMapper()

    # -- reads --------------------------------------------------------------

    async def fetch(self, category_id: int) -> Category | None:
        try:
            async with self._session_factory() as session:
                model = await session.get(CategoryModel, category_id)
                return self._mapper.from_model(model) if model is not None else None
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch category %s", category_id)
            raise PersistenceError(f"Error when fetch category : {e}") from e

    async def select_ids(self, stmt: Select[Any]) -> list[int]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.exception("Category listing query failed")
            raise PersistenceError(f"Error when retrieve category list : {e}") from e

    # -- writes -------------------------------------------------------------

    async def create(self, category: Category, actor: Actor) -> int:
        try:
            async with self._session_factory() as session, session.begin():
                if await self._label_taken(session, category):
                    raise PersistenceError(
                        f"Error when create category : label {category.label!r} "
                        "already exists"
                    )
                model = self._mapper.to_model(category)
                model.created_by = actor.login
                model.created_at = _now()
                session.add(model)
                await session.flush()
                new_id = model.id
        except SQLAlchemyError as e:
            logger.exception("Failed to create category %r", category.label)
            raise PersistenceError(f"Error when create category : {e}") from e
        category.id = new_id
        logger.info("Category %s created by %s", new_id, actor.login)
        return new_id

    async def update(self, category: Category, actor: Actor) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                model = await session.get(CategoryModel, category.id)
                if model is None:
                    return False
                if await self._label_taken(session, category):
                    logger.warning(
                        "Refused update of category %s: label %r already exists",
                        category.id,
                        category.label,
                    )
                    return False
                self._mapper.to_model(category, model)
                model.updated_by = actor.login
                model.updated_at = _now()
        except SQLAlchemyError:
            logger.exception("Failed to update category %s", category.id)
            return False
        logger.info("Category %s updated by %s", category.id, actor.login)
        return True

    async def delete(self, category: Category, actor: Actor) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                model = await session.get(CategoryModel, category.id)
                if model is None:
                    return False
                for table in LINK_TABLES.values():
                    await session.execute(
                        delete(table).where(table.c.categoryId == category.id)
                    )
                await session.execute(
                    update(CategoryModel)
                    .where(CategoryModel.parent_id == category.id)
                    .values(parent_id=model.parent_id)
                )
                await session.delete(model)
        except SQLAlchemyError:
            logger.exception("Failed to delete category %s", category.id)
            return False
        logger.info("Category %s deleted by %s", category.id, actor.login)
        return True

    # -- item links ---------------------------------------------------------

    async def add_link(
        self, category_id: int, category_type: CategoryType, item_id: int
    ) -> None:
        """Link ``item_id`` (of the type's item kind) to the category."""
        category_col, item_col = link_columns(category_type)
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    insert(category_col.table).values(
                        {category_col.name: category_id, item_col.name: item_id}
                    )
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error when link category : {e}") from e

    async def remove_link(
        self, category_id: int, category_type: CategoryType, item_id: int
    ) -> None:
        category_col, item_col = link_columns(category_type)
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    delete(category_col.table)
                    .where(category_col == category_id)
                    .where(item_col == item_id)
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Error when unlink category : {e}") from e

    # -- helpers ------------------------------------------------------------

    @staticmethod
    async def _label_taken(session: AsyncSession, category: Category) -> bool:
        stmt = select(CategoryModel.id).where(
            CategoryModel.label == category.label,
            CategoryModel.type == category.type.ordinal,
            CategoryModel.entity == category.entity,
        )
        if category.parent_id is None:
            stmt = stmt.where(CategoryModel.parent_id.is_(None))
        else:
            stmt = stmt.where(CategoryModel.parent_id == category.parent_id)
        if category.id is not None:
            stmt = stmt.where(CategoryModel.id != category.id)
        result = await session.execute(stmt.limit(1))
        return result.first() is not None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_engine_from_config(config: CategoriesConfig) -> AsyncEngine:
    return create_async_engine(config.database_url)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


__all__: list[str] = [
    "CategoryStore",
    "SQLAlchemyCategoryStore",
    "create_engine_from_config",
    "create_session_factory",
]
