"""Actor value object: the explicit caller capability.

Every resource operation receives an ``Actor`` instead of reading ambient
session state. The actor carries the caller's login, coarse permissions and
the set of entities (tenants) the caller is authorized to see.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Actor(BaseModel):
    """Immutable caller identity used for authorization and stamping.

    Attributes:
        user_id: Unique identifier for the user.
        login: Human-readable login, quoted in record-level denials.
        permissions: Permission strings (e.g. ``category:read``).
            The wildcard ``*`` grants everything.
        entity: Current entity, used as default for created records.
        entities: Authorized entity set bounding every listing.
            Always contains ``entity``.

    Example:
        ```python
        actor = Actor(
            user_id="42",
            login="jdoe",
            permissions=frozenset(["category:read", "category:create"]),
            entity=1,
            entities=frozenset([1, 2]),
        )

        if actor.has_permission("category:read"):
            ...
        ```
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    login: str
    permissions: frozenset[str] = frozenset()
    entity: int = 1
    entities: frozenset[int] = Field(default_factory=frozenset)

    @model_validator(mode="after")
    def _include_current_entity(self) -> Actor:
        if self.entity not in self.entities:
            object.__setattr__(self, "entities", self.entities | {self.entity})
        return self

    @classmethod
    def system(cls, entity: int = 1) -> Actor:
        """Actor with wildcard permission, scoped to ``entity``."""
        return cls(
            user_id="system",
            login="system",
            permissions=frozenset(["*"]),
            entity=entity,
        )

    def has_permission(self, permission: str) -> bool:
        """Check if the actor holds ``permission`` or the wildcard."""
        return permission in self.permissions or "*" in self.permissions

    def can_see_entity(self, entity: int | None) -> bool:
        return entity is not None and entity in self.entities

    def with_permissions(self, *additional: str) -> Actor:
        """Return a new Actor with additional permissions."""
        return self.model_copy(
            update={"permissions": self.permissions | frozenset(additional)}
        )


__all__: list[str] = ["Actor"]
