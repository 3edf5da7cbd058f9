"""SQLAlchemy models for categories and their item-linking tables."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..types import LINK_TARGETS, CategoryType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


class Base(DeclarativeBase):
    pass


class CategoryModel(Base):
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity: Mapped[int] = mapped_column(Integer, default=1, index=True)
    label: Mapped[str] = mapped_column(String(180))
    type: Mapped[int] = mapped_column(Integer, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(8), nullable=True)
    visible: Mapped[int] = mapped_column(Integer, default=0)
    parent_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ref_ext: Mapped[str | None] = mapped_column(String(255), nullable=True)
    import_key: Mapped[str | None] = mapped_column(String(14), nullable=True)
    attributes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


def _link_table(name: str, item_column: str) -> Table:
    return Table(
        name,
        Base.metadata,
        Column(
            "categoryId",
            Integer,
            ForeignKey("category.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column(item_column, Integer, primary_key=True),
    )


LINK_TABLES: dict[str, Table] = {
    target.table: _link_table(target.table, target.column)
    for target in dict.fromkeys(LINK_TARGETS.values())
}


def link_columns(category_type: CategoryType) -> tuple[Column[Any], Column[Any]]:
    """Return ``(category column, item column)`` of the type's link table."""
    target = LINK_TARGETS[category_type]
    table = LINK_TABLES[target.table]
    return table.c.categoryId, table.c[target.column]


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table. Intended for tests and local setups."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__: list[str] = [
    "Base",
    "CategoryModel",
    "LINK_TABLES",
    "create_schema",
    "link_columns",
]
