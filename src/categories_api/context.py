"""Request-scoped actor context using ContextVar.

The HTTP layer reads the actor from here; whatever authenticates the request
upstream is responsible for calling ``set_actor``.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .actor import Actor


_actor_context: ContextVar[Actor | None] = ContextVar("actor", default=None)


def get_current_actor() -> Actor:
    """Get current actor from context.

    Raises:
        LookupError: If no actor is set in the context.
    """
    actor = _actor_context.get()
    if actor is None:
        raise LookupError("No actor in context.")
    return actor


def get_current_actor_or_none() -> Actor | None:
    return _actor_context.get()


def set_actor(actor: Actor) -> Token[Actor | None]:
    """Set actor in the current async context.

    Returns:
        A Token that can be passed to ``reset_actor``.
    """
    return _actor_context.set(actor)


def reset_actor(token: Token[Actor | None]) -> None:
    _actor_context.reset(token)


def clear_actor() -> None:
    """Clear actor from context."""
    _actor_context.set(None)


__all__: list[str] = [
    "clear_actor",
    "get_current_actor",
    "get_current_actor_or_none",
    "reset_actor",
    "set_actor",
]
