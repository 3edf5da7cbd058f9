"""Categories API: CRUD and filtered listings for taxonomy categories."""

from __future__ import annotations

from .access import AccessGuard, EntityScopePolicy, RecordAccessPolicy, Verb
from .actor import Actor
from .category import Category
from .config import CategoriesConfig
from .context import (
    clear_actor,
    get_current_actor,
    get_current_actor_or_none,
    reset_actor,
    set_actor,
)
from .exceptions import (
    CategoriesError,
    CategoryNotFoundError,
    InvalidArgumentError,
    MissingFieldError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
    ValidationError,
)
from .resource import DELETED_ACK, CategoryResource
from .sanitizer import RecordSanitizer
from .types import LINK_TARGETS, CategoryType, LinkTarget, type_index

__version__ = "0.1.0"

__all__ = [
    "AccessGuard",
    "Actor",
    "CategoriesConfig",
    "CategoriesError",
    "Category",
    "CategoryNotFoundError",
    "CategoryResource",
    "CategoryType",
    "DELETED_ACK",
    "EntityScopePolicy",
    "InvalidArgumentError",
    "LINK_TARGETS",
    "LinkTarget",
    "MissingFieldError",
    "NotFoundError",
    "PersistenceError",
    "RecordAccessPolicy",
    "RecordSanitizer",
    "UnauthorizedError",
    "ValidationError",
    "Verb",
    "clear_actor",
    "get_current_actor",
    "get_current_actor_or_none",
    "reset_actor",
    "set_actor",
    "type_index",
]
