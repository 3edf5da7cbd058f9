"""Access Guard: coarse permission checks and record-level checks.

The coarse check runs before any I/O. The record check runs after a fetch
and needs the record to exist.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .exceptions import UnauthorizedError

if TYPE_CHECKING:
    from .actor import Actor
    from .category import Category

logger = logging.getLogger(__name__)


class Verb(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def permission(self) -> str:
        return f"category:{self.value}"


@runtime_checkable
class RecordAccessPolicy(Protocol):
    """Decide whether an actor may touch a fetched record."""

    def allows(self, actor: Actor, record: Category) -> bool: ...


class EntityScopePolicy:
    """Allow records whose entity is in the actor's authorized entity set."""

    def allows(self, actor: Actor, record: Category) -> bool:
        return actor.can_see_entity(record.entity)


class AccessGuard:
    """Runs the two mandatory checks, in order."""

    def __init__(self, policy: RecordAccessPolicy | None = None) -> None:
        self._policy = policy or EntityScopePolicy()

    def require(self, actor: Actor, verb: Verb) -> None:
        """Raise ``UnauthorizedError`` (no detail) without the verb permission."""
        if not actor.has_permission(verb.permission):
            logger.warning(
                "Denied %s on categories for login %s", verb.value, actor.login
            )
            raise UnauthorizedError()

    def check_record(self, actor: Actor, record: Category) -> None:
        """Raise ``UnauthorizedError`` naming the login if access is denied."""
        if not self._policy.allows(actor, record):
            logger.warning(
                "Denied access to category %s for login %s", record.id, actor.login
            )
            raise UnauthorizedError(f"Access not allowed for login {actor.login}")


__all__: list[str] = [
    "AccessGuard",
    "EntityScopePolicy",
    "RecordAccessPolicy",
    "Verb",
]
