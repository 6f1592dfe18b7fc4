"""pageable: lazy offset/cursor pagination for async API clients."""

from pageable.exceptions import ContractViolationError, PaginationError, TypeMismatchError
from pageable.page import Page
from pageable.pager import Pager, cursor_pager, offset_pager
from pageable.strategies import CursorStrategy, OffsetStrategy, Strategy

__version__ = "0.1.0"

__all__ = [
    "ContractViolationError",
    "CursorStrategy",
    "OffsetStrategy",
    "Page",
    "Pager",
    "PaginationError",
    "Strategy",
    "TypeMismatchError",
    "cursor_pager",
    "offset_pager",
]
