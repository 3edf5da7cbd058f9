"""FastAPI dependencies for the categories routes."""

from __future__ import annotations

from fastapi import HTTPException, Request

from ...actor import Actor
from ...context import get_current_actor
from ...resource import CategoryResource


async def get_actor() -> Actor:
    """Get current actor or raise 401.

    Raises:
        HTTPException: 401 if no actor was set upstream.
    """
    try:
        return get_current_actor()
    except LookupError as err:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


def get_resource(request: Request) -> CategoryResource:
    """Return the ``CategoryResource`` stored on ``app.state.categories``."""
    resource = getattr(request.app.state, "categories", None)
    if resource is None:
        raise RuntimeError(
            "No CategoryResource configured. Set app.state.categories at startup."
        )
    return resource


__all__: list[str] = ["get_actor", "get_resource"]
