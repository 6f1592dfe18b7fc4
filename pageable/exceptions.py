"""Exceptions raised by the pagination engine.

Errors raised by the ``get_next_page`` callback are not part of this
hierarchy: they propagate to the consumer of the page/item sequence exactly
as raised.
"""

from __future__ import annotations


class PaginationError(Exception):
    """Base exception for all pagination engine errors."""


class TypeMismatchError(PaginationError, TypeError):
    """Raised when a page's response is requested as an incompatible type."""

    def __init__(self, expected: type, actual: object):
        self.expected = expected
        self.actual = type(actual)
        super().__init__(
            f"page response is {self.actual.__qualname__}, "
            f"not {expected.__qualname__}"
        )


class ContractViolationError(PaginationError):
    """Raised when an accessor or the pager itself is used outside its contract."""
