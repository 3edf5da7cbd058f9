"""Category types and the fixed item-linking lookup."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class CategoryType(str, Enum):
    """Closed list of category types, in enumeration-index order."""

    PRODUCT = "product"
    SUPPLIER = "supplier"
    CUSTOMER = "customer"
    MEMBER = "member"
    CONTACT = "contact"
    ACCOUNT = "account"

    @property
    def ordinal(self) -> int:
        """Integer stored in the ``type`` column."""
        return _INDEX[self]

    @classmethod
    def from_index(cls, index: int) -> CategoryType:
        try:
            return _BY_INDEX[index]
        except KeyError:
            raise ValueError(f"Unknown category type index: {index!r}") from None

    @classmethod
    def parse(cls, value: object) -> CategoryType:
        """Resolve a label, an index or a member. Raises ``ValueError``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown category type: {value!r}")
        if isinstance(value, int):
            return cls.from_index(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                return cls.from_index(int(text))
            return cls(text)
        raise ValueError(f"Unknown category type: {value!r}")


_INDEX: dict[CategoryType, int] = {t: i for i, t in enumerate(CategoryType)}
_BY_INDEX: dict[int, CategoryType] = {i: t for t, i in _INDEX.items()}

# Index used for unknown labels in the plain listing: matches no stored row.
UNKNOWN_TYPE_INDEX = -1


def type_index(label: str) -> int:
    """Enumeration index for ``label``, or ``UNKNOWN_TYPE_INDEX``."""
    try:
        return CategoryType.parse(label).ordinal
    except ValueError:
        return UNKNOWN_TYPE_INDEX


class LinkTarget(NamedTuple):
    """Linking table and item column for one category type."""

    table: str
    column: str


LINK_TARGETS: dict[CategoryType, LinkTarget] = {
    CategoryType.CUSTOMER: LinkTarget("category_company", "companyId"),
    CategoryType.SUPPLIER: LinkTarget("category_company", "companyId"),
    CategoryType.MEMBER: LinkTarget("category_member", "memberId"),
    CategoryType.CONTACT: LinkTarget("category_contact", "contactPersonId"),
    CategoryType.PRODUCT: LinkTarget("category_product", "productId"),
    CategoryType.ACCOUNT: LinkTarget("category_account", "accountId"),
}


__all__: list[str] = [
    "CategoryType",
    "LINK_TARGETS",
    "LinkTarget",
    "UNKNOWN_TYPE_INDEX",
    "type_index",
]
