"""Pagination strategies: accessor bundles selected at pager construction.

A strategy carries no behaviour of its own.  It is the set of functions the
pager's driving loop uses to read and advance a request and to pick apart a
response.  Accessors must be synchronous and free of I/O; ``None`` means
"field not present".
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")
ItemT = TypeVar("ItemT")

GetNextPage = Callable[[RequestT], Awaitable[ResponseT]]
GetItems = Callable[[ResponseT], Union[Sequence[ItemT], None]]


def _absent(_: object) -> None:
    return None


@dataclass(frozen=True)
class OffsetStrategy(Generic[RequestT, ResponseT, ItemT]):
    """Advance an integer offset (or page number) on the request.

    ``get_step`` only decides *how* the offset advances: when it returns a
    value the offset moves by the number of items received (1 for an empty
    or absent batch), otherwise it moves by exactly 1 per request.  The
    value itself is not used, so a step of zero behaves like any other step.

    ``has_next_page`` returning ``None`` falls back to "the batch was not
    empty" as the continuation signal.
    """

    get_offset: Callable[[RequestT], int]
    set_offset: Callable[[RequestT, int], None]
    get_items: GetItems[ResponseT, ItemT]
    get_step: Callable[[RequestT], int | None] = _absent
    has_next_page: Callable[[ResponseT], bool | None] = _absent


@dataclass(frozen=True)
class CursorStrategy(Generic[RequestT, ResponseT, ItemT]):
    """Advance an opaque string cursor on the request.

    Iteration stops once ``get_next_cursor`` returns ``None`` or ``""``.
    """

    set_cursor: Callable[[RequestT, str], None]
    get_next_cursor: Callable[[ResponseT], str | None]
    get_items: GetItems[ResponseT, ItemT]


Strategy = Union[
    OffsetStrategy[RequestT, ResponseT, ItemT],
    CursorStrategy[RequestT, ResponseT, ItemT],
]
