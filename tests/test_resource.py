"""Tests for CategoryResource against the SQLite store and an in-memory stub."""

from __future__ import annotations

from typing import Any

import pytest

from categories_api import (
    DELETED_ACK,
    Actor,
    CategoriesConfig,
    Category,
    CategoryNotFoundError,
    CategoryResource,
    CategoryType,
    InvalidArgumentError,
    MissingFieldError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
)
from categories_api.persistence import SQLAlchemyCategoryStore


def _without_update_stamp(record: Any) -> dict[str, Any]:
    assert isinstance(record, dict)
    return {k: v for k, v in record.items() if k != "updated_at"}


# ---------------------------------------------------------------------------
# Lifecycle on the SQLite store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_category_lifecycle(resource: CategoryResource, actor: Actor) -> None:
    new_id = await resource.create(actor, {"label": "VIP", "type": "customer"})

    record = await resource.get(actor, new_id)
    assert record["id"] == new_id
    assert record["label"] == "VIP"
    assert record["type"] == "customer"
    assert record["entity"] == 1
    assert "import_key" not in record

    listed = await resource.list(actor, category_type="customer")
    assert [r["id"] for r in listed] == [new_id]

    assert await resource.delete(actor, new_id) == DELETED_ACK
    with pytest.raises(CategoryNotFoundError, match="category not found"):
        await resource.get(actor, new_id)


@pytest.mark.asyncio
async def test_create_returns_supplied_fields(
    resource: CategoryResource, actor: Actor
) -> None:
    fields = {
        "label": "Fruits",
        "type": "product",
        "description": "Fresh produce",
        "color": "00ff00",
        "visible": 1,
        "origin": "import",
    }
    new_id = await resource.create(actor, fields)
    record = await resource.get(actor, new_id)
    for name, value in fields.items():
        assert record[name] == value
    assert record["created_by"] == "jdoe"


@pytest.mark.asyncio
async def test_create_ignores_supplied_id(
    resource: CategoryResource, actor: Actor
) -> None:
    new_id = await resource.create(actor, {"id": 500, "label": "A", "type": "member"})
    assert new_id != 500


@pytest.mark.asyncio
async def test_create_duplicate_label_is_persistence_error(
    resource: CategoryResource, actor: Actor
) -> None:
    await resource.create(actor, {"label": "VIP", "type": "customer"})
    with pytest.raises(PersistenceError):
        await resource.create(actor, {"label": "VIP", "type": "customer"})


@pytest.mark.asyncio
async def test_list_by_type_returns_only_that_type(
    resource: CategoryResource, actor: Actor
) -> None:
    for label, category_type in [
        ("A", "customer"),
        ("B", "supplier"),
        ("C", "customer"),
        ("D", "product"),
    ]:
        await resource.create(actor, {"label": label, "type": category_type})

    customers = await resource.list(actor, category_type="customer")
    assert [r["label"] for r in customers] == ["A", "C"]
    assert {r["type"] for r in customers} == {"customer"}

    with pytest.raises(NotFoundError):
        await resource.list(actor, category_type="widget")


@pytest.mark.asyncio
async def test_pagination(resource: CategoryResource, actor: Actor) -> None:
    for i in range(5):
        await resource.create(actor, {"label": f"c{i}", "type": "product"})

    async def labels(**kwargs: Any) -> list[str]:
        rows = await resource.list(actor, sort_field="t.label", **kwargs)
        return [r["label"] for r in rows]

    assert await labels(limit=2, page=0) == ["c0", "c1"]
    assert await labels(limit=2, page=1) == ["c2", "c3"]
    assert await labels(limit=2, page=2) == ["c4"]
    assert await labels(limit=2, page=-3) == ["c0", "c1"]
    assert await labels(limit=0) == ["c0", "c1", "c2", "c3", "c4"]
    assert await labels(sort_order="DESC", limit=1) == ["c4"]
    with pytest.raises(NotFoundError, match="No category found"):
        await labels(limit=2, page=3)
    with pytest.raises(InvalidArgumentError):
        await labels(limit=-1)
    with pytest.raises(InvalidArgumentError):
        await labels(limit=10, page=10**18)


@pytest.mark.asyncio
async def test_unbounded_cap(store: SQLAlchemyCategoryStore, actor: Actor) -> None:
    resource = CategoryResource(store, config=CategoriesConfig(max_unbounded_rows=2))
    for i in range(4):
        await resource.create(actor, {"label": f"c{i}", "type": "product"})
    assert len(await resource.list(actor)) == 2


@pytest.mark.asyncio
async def test_filter_expression(resource: CategoryResource, actor: Actor) -> None:
    for label in ["VIP Gold", "VIP Silver", "Regular"]:
        await resource.create(actor, {"label": label, "type": "customer"})

    vip = await resource.list(actor, filter_expression="(t.label:like:'VIP%')")
    assert [r["label"] for r in vip] == ["VIP Gold", "VIP Silver"]

    either = await resource.list(
        actor,
        filter_expression="(t.label:=:'Regular') or (t.label:=:'VIP Gold')",
    )
    assert {r["label"] for r in either} == {"Regular", "VIP Gold"}

    by_type = await resource.list(actor, filter_expression="(t.type:=:'customer')")
    assert len(by_type) == 3


@pytest.mark.asyncio
async def test_injection_payload_is_just_a_value(
    resource: CategoryResource, actor: Actor
) -> None:
    await resource.create(actor, {"label": "VIP", "type": "customer"})
    with pytest.raises(NotFoundError):
        await resource.list(
            actor, filter_expression="(t.label:=:'x'' OR ''1''=''1')"
        )


@pytest.mark.asyncio
async def test_update_is_idempotent(resource: CategoryResource, actor: Actor) -> None:
    new_id = await resource.create(actor, {"label": "VIP", "type": "customer"})
    fields = {"label": "Gold", "color": "ffd700", "fk_parent": None}

    first = await resource.update(actor, new_id, fields)
    second = await resource.update(actor, new_id, fields)

    assert first is not False
    assert first["label"] == "Gold"
    assert first["updated_by"] == "jdoe"
    assert _without_update_stamp(first) == _without_update_stamp(second)


@pytest.mark.asyncio
async def test_update_refused_by_store_returns_false(
    resource: CategoryResource, actor: Actor
) -> None:
    await resource.create(actor, {"label": "VIP", "type": "customer"})
    other_id = await resource.create(actor, {"label": "Regular", "type": "customer"})

    assert await resource.update(actor, other_id, {"label": "VIP"}) is False


@pytest.mark.asyncio
async def test_update_rejects_invalid_type(
    resource: CategoryResource, actor: Actor
) -> None:
    new_id = await resource.create(actor, {"label": "VIP", "type": "customer"})
    with pytest.raises(InvalidArgumentError) as exc_info:
        await resource.update(actor, new_id, {"type": "widget"})
    assert "type" in exc_info.value.errors


@pytest.mark.asyncio
async def test_missing_ids_raise_not_found(
    resource: CategoryResource, actor: Actor
) -> None:
    with pytest.raises(NotFoundError):
        await resource.get(actor, 404)
    with pytest.raises(NotFoundError):
        await resource.update(actor, 404, {"label": "x"})
    with pytest.raises(NotFoundError):
        await resource.delete(actor, 404)


@pytest.mark.asyncio
async def test_list_for_item(
    resource: CategoryResource, store: SQLAlchemyCategoryStore, actor: Actor
) -> None:
    customer_id = await resource.create(actor, {"label": "VIP", "type": "customer"})
    supplier_id = await resource.create(actor, {"label": "Bulk", "type": "supplier"})
    await resource.create(actor, {"label": "Unlinked", "type": "customer"})
    await store.add_link(customer_id, CategoryType.CUSTOMER, 42)
    await store.add_link(supplier_id, CategoryType.SUPPLIER, 42)

    customers = await resource.list_for_item(
        actor, item_id=42, category_type="customer", sort_field="s.label"
    )
    assert [r["id"] for r in customers] == [customer_id]

    suppliers = await resource.list_for_item(
        actor, item_id=42, category_type="supplier"
    )
    assert [r["id"] for r in suppliers] == [supplier_id]

    with pytest.raises(NotFoundError):
        await resource.list_for_item(actor, item_id=43, category_type="customer")
    with pytest.raises(InvalidArgumentError):
        await resource.list_for_item(actor, item_id=42, category_type="widget")
    with pytest.raises(InvalidArgumentError):
        await resource.list_for_item(actor, item_id=42, sort_field="t.label")


@pytest.mark.asyncio
async def test_entity_scoping(resource: CategoryResource, actor: Actor) -> None:
    wide = actor.model_copy(update={"entities": frozenset([1, 2])})
    foreign_id = await resource.create(
        wide, {"label": "Elsewhere", "type": "product", "entity": 2}
    )
    own_id = await resource.create(actor, {"label": "Here", "type": "product"})

    listed = await resource.list(actor)
    assert [r["id"] for r in listed] == [own_id]

    with pytest.raises(UnauthorizedError) as exc_info:
        await resource.get(actor, foreign_id)
    assert exc_info.value.message == "Access not allowed for login jdoe"

    assert (await resource.get(wide, foreign_id))["label"] == "Elsewhere"


@pytest.mark.asyncio
async def test_create_outside_entity_scope_is_refused(
    resource: CategoryResource, actor: Actor
) -> None:
    with pytest.raises(UnauthorizedError, match="Access not allowed for login jdoe"):
        await resource.create(
            actor, {"label": "Elsewhere", "type": "product", "entity": 99}
        )

    wide = actor.model_copy(update={"entities": frozenset([1, 99])})
    with pytest.raises(NotFoundError):
        await resource.list(wide)


@pytest.mark.asyncio
async def test_update_cannot_move_record_out_of_scope(
    resource: CategoryResource, actor: Actor
) -> None:
    new_id = await resource.create(actor, {"label": "VIP", "type": "customer"})

    with pytest.raises(UnauthorizedError, match="Access not allowed for login jdoe"):
        await resource.update(actor, new_id, {"entity": 99, "label": "Moved"})

    record = await resource.get(actor, new_id)
    assert record["entity"] == 1
    assert record["label"] == "VIP"


@pytest.mark.asyncio
async def test_store_managed_fields_are_ignored(
    resource: CategoryResource, actor: Actor
) -> None:
    new_id = await resource.create(
        actor,
        {
            "label": "VIP",
            "type": "customer",
            "rowid": 500,
            "created_by": "mallory",
            "updated_by": "mallory",
        },
    )
    created = await resource.get(actor, new_id)
    assert new_id != 500
    assert created["created_by"] == "jdoe"
    assert created["updated_by"] is None

    updated = await resource.update(
        actor,
        new_id,
        {
            "color": "ff0000",
            "created_by": "mallory",
            "created_at": "2000-01-01T00:00:00",
            "updated_by": "mallory",
        },
    )
    assert updated is not False
    assert updated["color"] == "ff0000"
    assert updated["created_by"] == "jdoe"
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_by"] == "jdoe"


# ---------------------------------------------------------------------------
# Ordering of checks, against the in-memory stub
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_fields_checked_in_order(
    memory_store: Any, actor: Actor
) -> None:
    resource = CategoryResource(memory_store)
    with pytest.raises(MissingFieldError) as exc_info:
        await resource.create(actor, {})
    assert exc_info.value.message == "label field missing"

    with pytest.raises(MissingFieldError) as exc_info:
        await resource.create(actor, {"label": "VIP", "type": ""})
    assert exc_info.value.message == "type field missing"

    with pytest.raises(InvalidArgumentError) as invalid:
        await resource.create(actor, {"label": "VIP", "type": "widget"})
    assert "type" in invalid.value.errors
    assert memory_store.calls == []


@pytest.mark.asyncio
async def test_permissions_checked_before_any_io(
    memory_store: Any, reader: Actor
) -> None:
    memory_store.add(Category(label="VIP", type="customer"))
    resource = CategoryResource(memory_store)

    with pytest.raises(UnauthorizedError):
        await resource.create(reader, {"label": "X", "type": "product"})
    with pytest.raises(UnauthorizedError):
        await resource.update(reader, 1, {"label": "X"})
    with pytest.raises(UnauthorizedError):
        await resource.delete(reader, 1)
    assert memory_store.calls == []

    no_rights = Actor(user_id="u", login="nobody")
    with pytest.raises(UnauthorizedError):
        await resource.get(no_rights, 1)
    with pytest.raises(UnauthorizedError):
        await resource.list(no_rights)
    assert memory_store.calls == []


@pytest.mark.asyncio
async def test_bad_listing_parameters_issue_no_query(
    memory_store: Any, actor: Actor
) -> None:
    memory_store.add(Category(label="VIP", type="customer"))
    resource = CategoryResource(memory_store)

    for kwargs in [
        {"filter_expression": "(t.label like 'VIP%')"},
        {"filter_expression": "(t.password:=:'x')"},
        {"filter_expression": "(s.label:=:'x')"},
        {"sort_field": "t.label; drop table category"},
        {"sort_order": "sideways"},
        {"limit": -5},
        {"limit": 10, "page": 10**18},
    ]:
        with pytest.raises(InvalidArgumentError):
            await resource.list(actor, **kwargs)
    assert memory_store.queries == []


@pytest.mark.asyncio
async def test_delete_refusal(memory_store: Any, actor: Actor) -> None:
    memory_store.add(Category(label="VIP", type="customer"))
    memory_store.delete_result = False

    with pytest.raises(UnauthorizedError, match="error when delete category"):
        await CategoryResource(memory_store).delete(actor, 1)

    strict = CategoryResource(
        memory_store, config=CategoriesConfig(strict_delete_errors=True)
    )
    with pytest.raises(PersistenceError, match="error when delete category"):
        await strict.delete(actor, 1)


@pytest.mark.asyncio
async def test_listing_skips_rows_gone_before_hydration(
    memory_store: Any, actor: Actor
) -> None:
    memory_store.add(Category(label="A", type="customer"))
    memory_store.add(Category(label="B", type="customer"))

    original_fetch = memory_store.fetch

    async def fetch(category_id: int) -> Category | None:
        if category_id == 1:
            return None
        return await original_fetch(category_id)

    memory_store.fetch = fetch
    rows = await CategoryResource(memory_store).list(actor)
    assert [r["label"] for r in rows] == ["B"]


@pytest.mark.asyncio
async def test_internal_fields_from_config(memory_store: Any, actor: Actor) -> None:
    memory_store.add(Category(label="VIP", type="customer", secret="s3cr3t"))
    resource = CategoryResource(
        memory_store, config=CategoriesConfig(internal_fields=frozenset(["secret"]))
    )
    record = await resource.get(actor, 1)
    assert "secret" not in record
