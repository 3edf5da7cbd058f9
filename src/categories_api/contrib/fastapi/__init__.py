"""FastAPI integration: routes, dependencies and error mapping."""

from __future__ import annotations

from .dependencies import get_actor, get_resource
from .errors import (
    categories_error_handler,
    error_body,
    install_exception_handlers,
    status_for,
)
from .router import build_categories_router, create_app, mount_item_categories

__all__ = [
    "build_categories_router",
    "categories_error_handler",
    "create_app",
    "error_body",
    "get_actor",
    "get_resource",
    "install_exception_handlers",
    "mount_item_categories",
    "status_for",
]
