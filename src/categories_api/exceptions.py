"""Error taxonomy for the categories API.

Every error is terminal for the current call. The HTTP layer maps each class
to a status code (see ``categories_api.contrib.fastapi.errors``).
"""

from __future__ import annotations


class CategoriesError(Exception):
    """Root exception for the categories API."""


class UnauthorizedError(CategoriesError):
    """Raised when the caller lacks the permission or record access.

    Also raised when the store refuses a delete, unless strict delete
    errors are configured.
    """

    def __init__(self, message: str | None = None) -> None:
        self.message = message
        super().__init__(message or "Unauthorized")


class NotFoundError(CategoriesError):
    """Raised when a record is absent or a listing produced no rows."""


class CategoryNotFoundError(NotFoundError):
    """Raised when a specific category cannot be found by ID."""

    def __init__(self, category_id: object) -> None:
        self.category_id = category_id
        super().__init__("category not found")


class ValidationError(CategoriesError):
    """Raised when caller input is rejected.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Flatten the structured errors into one line."""
        parts: list[str] = []
        for field, messages in self.errors.items():
            for msg in messages:
                parts.append(msg if field == "__root__" else f"{field}: {msg}")
        return "; ".join(parts)


class InvalidArgumentError(ValidationError):
    """Raised for unsafe filter expressions and unrecognized sort fields."""


class MissingFieldError(ValidationError):
    """Raised when a mandatory create field is absent."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__({field: [f"{field} field missing"]})

    @property
    def message(self) -> str:
        return f"{self.field} field missing"


class PersistenceError(CategoriesError):
    """Raised when the store fails to execute a list, create or delete."""


__all__: list[str] = [
    "CategoriesError",
    "CategoryNotFoundError",
    "InvalidArgumentError",
    "MissingFieldError",
    "NotFoundError",
    "PersistenceError",
    "UnauthorizedError",
    "ValidationError",
]
