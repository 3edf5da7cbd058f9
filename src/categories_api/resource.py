"""
CategoryResource: the four CRUD verbs and the two listing variants.

Every operation runs the coarse permission check first. Single-record
operations then fetch the record, raise ``CategoryNotFoundError`` when it is
absent and run the record-level check before doing anything else.

Failure channels follow the established API contract: ``create`` and
``delete`` raise, ``update`` returns ``False`` when the store reports a
failure, and an empty listing raises ``NotFoundError``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import ValidationError as PydanticValidationError

from .access import AccessGuard, Verb
from .category import (
    MANDATORY_FIELDS,
    STORE_MANAGED_FIELDS,
    Category,
    normalise_fields,
)
from .config import CategoriesConfig
from .exceptions import (
    CategoryNotFoundError,
    InvalidArgumentError,
    MissingFieldError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
)
from .filtering import ITEM_LIST_WHITELIST, LIST_WHITELIST, ListingParser
from .persistence.query import CategoryQueryBuilder
from .sanitizer import RecordSanitizer
from .types import CategoryType

if TYPE_CHECKING:
    from .actor import Actor
    from .filtering.parser import QueryOptions
    from .persistence.store import CategoryStore

logger = logging.getLogger(__name__)

CategoryRecords = list[dict[str, Any]]

DELETED_ACK: dict[str, Any] = {
    "success": {"code": 200, "message": "Category deleted"},
}


class CategoryResource:
    """Orchestrates access checks, queries, persistence and sanitizing."""

    def __init__(
        self,
        store: CategoryStore,
        *,
        config: CategoriesConfig | None = None,
        guard: AccessGuard | None = None,
        sanitizer: RecordSanitizer | None = None,
        query_builder: CategoryQueryBuilder | None = None,
        parser: ListingParser | None = None,
    ) -> None:
        self._store = store
        self._config = config or CategoriesConfig()
        self._guard = guard or AccessGuard()
        self._sanitizer = sanitizer or RecordSanitizer(self._config.internal_fields)
        self._queries = query_builder or CategoryQueryBuilder(self._config)
        self._parser = parser or ListingParser()

    # -- reads --------------------------------------------------------------

    async def get(self, actor: Actor, category_id: int) -> dict[str, Any]:
        self._guard.require(actor, Verb.READ)
        record = await self._fetch_accessible(actor, category_id)
        return self._sanitizer.clean(record)

    async def list(
        self,
        actor: Actor,
        *,
        sort_field: str | None = None,
        sort_order: str | None = None,
        limit: Any = 0,
        page: Any = 0,
        category_type: str | None = None,
        filter_expression: str | None = None,
    ) -> CategoryRecords:
        """List categories visible to ``actor``.

        Raises:
            InvalidArgumentError: Unsafe filter, unknown sort field or order,
                negative limit. Raised before any query runs.
            NotFoundError: Nothing matched.
        """
        self._guard.require(actor, Verb.READ)
        spec, options = self._parser.parse(
            LIST_WHITELIST,
            sort_field=sort_field or self._config.default_sort_field,
            sort_order=sort_order or self._config.default_sort_order,
            limit=limit,
            page=page,
            filter_expression=filter_expression,
        )
        stmt = self._queries.build_list(
            actor, options, category_type=category_type, spec=spec
        )
        return await self._run_listing(stmt, options)

    async def list_for_item(
        self,
        actor: Actor,
        *,
        item_id: int,
        category_type: str = "customer",
        sort_field: str | None = None,
        sort_order: str | None = None,
        limit: Any = 0,
        page: Any = 0,
    ) -> CategoryRecords:
        """List categories of ``category_type`` linked to ``item_id``."""
        self._guard.require(actor, Verb.READ)
        try:
            resolved = CategoryType.parse(category_type)
        except ValueError:
            raise InvalidArgumentError(
                {"type": [f"Unknown category type {category_type!r}"]}
            ) from None
        _, options = self._parser.parse(
            ITEM_LIST_WHITELIST,
            sort_field=sort_field or self._config.default_sort_field,
            sort_order=sort_order or self._config.default_sort_order,
            limit=limit,
            page=page,
        )
        stmt = self._queries.build_item_list(
            actor, options, category_type=resolved, item_id=item_id
        )
        return await self._run_listing(stmt, options)

    # -- writes -------------------------------------------------------------

    async def create(self, actor: Actor, fields: dict[str, Any] | None) -> int:
        """Create a category and return its id.

        The new record must fall inside the actor's entity scope.
        """
        self._guard.require(actor, Verb.CREATE)
        data = normalise_fields(fields or {})
        for name in MANDATORY_FIELDS:
            if data.get(name) in (None, ""):
                raise MissingFieldError(name)
        for name in STORE_MANAGED_FIELDS:
            data.pop(name, None)
        data.setdefault("entity", actor.entity)
        try:
            record = Category.from_fields(data)
        except PydanticValidationError as e:
            raise _invalid(e) from e
        self._guard.check_record(actor, record)
        return await self._store.create(record, actor)

    async def update(
        self, actor: Actor, category_id: int, fields: dict[str, Any] | None
    ) -> dict[str, Any] | Literal[False]:
        """Overwrite supplied fields; ``False`` when the store refuses.

        The record is checked again after the fields are applied, so an
        update cannot move it out of the actor's reach.
        """
        self._guard.require(actor, Verb.UPDATE)
        record = await self._fetch_accessible(actor, category_id)
        try:
            record.assign(fields or {})
        except PydanticValidationError as e:
            raise _invalid(e) from e
        self._guard.check_record(actor, record)
        if not await self._store.update(record, actor):
            return False
        return await self.get(actor, category_id)

    async def delete(self, actor: Actor, category_id: int) -> dict[str, Any]:
        self._guard.require(actor, Verb.DELETE)
        record = await self._fetch_accessible(actor, category_id)
        if not await self._store.delete(record, actor):
            if self._config.strict_delete_errors:
                raise PersistenceError("error when delete category")
            raise UnauthorizedError("error when delete category")
        return {"success": dict(DELETED_ACK["success"])}

    # -- helpers ------------------------------------------------------------

    async def _fetch_accessible(self, actor: Actor, category_id: int) -> Category:
        record = await self._store.fetch(category_id)
        if record is None:
            raise CategoryNotFoundError(category_id)
        self._guard.check_record(actor, record)
        return record

    async def _run_listing(
        self, stmt: Any, options: QueryOptions
    ) -> CategoryRecords:
        ids, has_more = options.page.trim(await self._store.select_ids(stmt))
        records: CategoryRecords = []
        for category_id in ids:
            record = await self._store.fetch(category_id)
            if record is not None:
                records.append(self._sanitizer.clean(record))
        logger.debug(
            "Category listing returned %d records (has_more=%s)", len(records), has_more
        )
        if not records:
            raise NotFoundError("No category found")
        return records


def _invalid(exc: PydanticValidationError) -> InvalidArgumentError:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return InvalidArgumentError(errors)


__all__: list[str] = ["CategoryResource", "DELETED_ACK"]
