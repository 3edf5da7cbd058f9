from enum import Enum


class FilterOperator(str, Enum):
    """Operators accepted in filter expressions."""

    # Comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    # String
    LIKE = "like"

    # Logical
    AND = "and"
    OR = "or"


COMPARISON_OPERATORS: frozenset[FilterOperator] = frozenset(
    {
        FilterOperator.EQ,
        FilterOperator.NE,
        FilterOperator.GT,
        FilterOperator.LT,
        FilterOperator.GE,
        FilterOperator.LE,
        FilterOperator.LIKE,
    }
)
