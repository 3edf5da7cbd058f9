"""Filtering package exceptions."""

from __future__ import annotations

from ..exceptions import InvalidArgumentError


class FilterParseError(InvalidArgumentError):
    """Raised when a filter expression falls outside the accepted grammar."""


class FieldNotAllowedError(InvalidArgumentError):
    """Raised when a field is not in the whitelist or operator is disallowed."""
