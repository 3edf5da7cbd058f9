"""REST routes for categories.

Query parameter names keep the established wire format: ``sortfield``,
``sortorder``, ``limit``, ``page``, ``type`` and ``sqlfilters``.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI

from ...actor import Actor
from ...resource import CategoryResource
from .dependencies import get_actor, get_resource
from .errors import install_exception_handlers


def build_categories_router(prefix: str = "/categories") -> APIRouter:
    """Create the router for ``GET/POST/PUT/DELETE /categories``."""
    router = APIRouter(prefix=prefix, tags=["categories"])

    @router.get("")
    async def list_categories(
        sortfield: str = "t.rowid",
        sortorder: str = "ASC",
        limit: int = 0,
        page: int = 0,
        type: str = "",
        sqlfilters: str = "",
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> list[dict[str, Any]]:
        return await resource.list(
            actor,
            sort_field=sortfield,
            sort_order=sortorder,
            limit=limit,
            page=page,
            category_type=type or None,
            filter_expression=sqlfilters or None,
        )

    @router.get("/{category_id}")
    async def get_category(
        category_id: int,
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> dict[str, Any]:
        return await resource.get(actor, category_id)

    @router.post("")
    async def create_category(
        fields: dict[str, Any] = Body(...),  # noqa: B008
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> int:
        return await resource.create(actor, fields)

    @router.put("/{category_id}")
    async def update_category(
        category_id: int,
        fields: dict[str, Any] = Body(...),  # noqa: B008
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> Any:
        """Return the updated record.

        A refused update (for example a duplicate label) answers HTTP 200
        with a bare ``false`` body rather than an error status.
        """
        return await resource.update(actor, category_id, fields)

    @router.delete("/{category_id}")
    async def delete_category(
        category_id: int,
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> dict[str, Any]:
        return await resource.delete(actor, category_id)

    return router


def mount_item_categories(
    router: APIRouter, resource_path: str, category_type: str
) -> None:
    """Add ``GET /{resource_path}/{item_id}/categories`` for one item kind.

    Example:
        ```python
        router = APIRouter()
        mount_item_categories(router, "thirdparties", "customer")
        mount_item_categories(router, "contacts", "contact")
        ```
    """

    async def list_item_categories(
        item_id: int,
        sortfield: str = "s.rowid",
        sortorder: str = "ASC",
        limit: int = 0,
        page: int = 0,
        actor: Actor = Depends(get_actor),  # noqa: B008
        resource: CategoryResource = Depends(get_resource),  # noqa: B008
    ) -> list[dict[str, Any]]:
        return await resource.list_for_item(
            actor,
            item_id=item_id,
            category_type=category_type,
            sort_field=sortfield,
            sort_order=sortorder,
            limit=limit,
            page=page,
        )

    router.add_api_route(
        f"/{resource_path.strip('/')}/{{item_id}}/categories",
        list_item_categories,
        methods=["GET"],
        name=f"list_{resource_path.strip('/')}_categories",
    )


def create_app(
    resource: CategoryResource,
    *,
    item_routes: dict[str, str] | None = None,
) -> FastAPI:
    """Build a FastAPI app serving ``resource``.

    Args:
        resource: The configured ``CategoryResource``.
        item_routes: Optional ``{resource_path: category_type}`` mapping for
            the item listing routes.
    """
    app = FastAPI(title="Categories API")
    app.state.categories = resource
    install_exception_handlers(app)
    app.include_router(build_categories_router())
    if item_routes:
        items_router = APIRouter(tags=["categories"])
        for path, category_type in item_routes.items():
            mount_item_categories(items_router, path, category_type)
        app.include_router(items_router)
    return app


__all__: list[str] = [
    "build_categories_router",
    "create_app",
    "mount_item_categories",
]
