"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from categories_api import Actor, Category, CategoryResource
from categories_api.persistence import (
    SQLAlchemyCategoryStore,
    create_schema,
    create_session_factory,
)

ALL_PERMISSIONS = frozenset(
    ["category:read", "category:create", "category:update", "category:delete"]
)


class InMemoryCategoryStore:
    """Dict-backed store recording every call, for handler-level tests."""

    def __init__(self, *, update_result: bool = True, delete_result: bool = True):
        self.records: dict[int, Category] = {}
        self.queries: list[Any] = []
        self.calls: list[str] = []
        self.update_result = update_result
        self.delete_result = delete_result

    def add(self, category: Category) -> Category:
        if category.id is None:
            category.id = max(self.records, default=0) + 1
        self.records[category.id] = category
        return category

    async def fetch(self, category_id: int) -> Category | None:
        self.calls.append("fetch")
        record = self.records.get(category_id)
        return record.model_copy(deep=True) if record is not None else None

    async def select_ids(self, stmt: Any) -> list[int]:
        self.calls.append("select_ids")
        self.queries.append(stmt)
        return sorted(self.records)

    async def create(self, category: Category, actor: Actor) -> int:
        self.calls.append("create")
        category.created_by = actor.login
        self.add(category)
        assert category.id is not None
        return category.id

    async def update(self, category: Category, actor: Actor) -> bool:
        self.calls.append("update")
        if self.update_result:
            assert category.id is not None
            self.records[category.id] = category
        return self.update_result

    async def delete(self, category: Category, actor: Actor) -> bool:
        self.calls.append("delete")
        if self.delete_result:
            assert category.id is not None
            self.records.pop(category.id, None)
        return self.delete_result


@pytest.fixture
def actor() -> Actor:
    """Actor holding every category permission in entity 1."""
    return Actor(
        user_id="user-1",
        login="jdoe",
        permissions=ALL_PERMISSIONS,
        entity=1,
    )


@pytest.fixture
def reader() -> Actor:
    """Actor that may only read."""
    return Actor(
        user_id="user-2",
        login="reader",
        permissions=frozenset(["category:read"]),
        entity=1,
    )


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> SQLAlchemyCategoryStore:
    return SQLAlchemyCategoryStore(create_session_factory(engine))


@pytest.fixture
def resource(store: SQLAlchemyCategoryStore) -> CategoryResource:
    return CategoryResource(store)


@pytest.fixture
def memory_store() -> InMemoryCategoryStore:
    return InMemoryCategoryStore()
