"""Pager: lazy, single-pass iteration over a paginated API.

A :class:`Pager` owns one *session*: a mutable request object plus a
strategy describing how to advance it.  Iterating :meth:`Pager.pages` issues
one ``get_next_page`` call per step and yields a :class:`Page` for each
response; :meth:`Pager.items` flattens those pages.

The request object is mutated in place as the session advances and is never
copied.  Reusing one request object across concurrent sessions is undefined
behaviour; give every pager its own request.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any, Generic, TypeVar

import structlog

from pageable.exceptions import ContractViolationError
from pageable.page import Page
from pageable.strategies import (
    CursorStrategy,
    GetItems,
    GetNextPage,
    OffsetStrategy,
    Strategy,
)

log = structlog.get_logger(__name__)

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")
ItemT = TypeVar("ItemT")


class Pager(Generic[RequestT, ResponseT, ItemT]):
    """Single-pass sequence of pages (or items) for one pagination session.

    *cancel* is an optional session-wide cancellation signal.  It is checked
    before every request, and a request still in flight when it is set is
    cancelled; either way ``asyncio.CancelledError`` reaches the consumer
    and no further page is produced.
    """

    def __init__(
        self,
        request: RequestT,
        get_next_page: GetNextPage[RequestT, ResponseT],
        strategy: Strategy[RequestT, ResponseT, ItemT],
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        self._request = request
        self._get_next_page = get_next_page
        self._strategy = strategy
        self._cancel = cancel
        self._consumed = False

    @property
    def request(self) -> RequestT:
        return self._request

    # ── public ─────────────────────────────────────────────────────────────

    def pages(self) -> AsyncIterator[Page[ItemT, ResponseT]]:
        """Return the lazy page sequence.  May only be called once per pager.

        Every step of the returned iterator performs at most one request and
        either yields a page or ends the iteration.
        """
        if self._consumed:
            raise ContractViolationError("pager already iterated; sessions are single-pass")
        self._consumed = True

        if isinstance(self._strategy, OffsetStrategy):
            return self._offset_pages(self._strategy)
        if isinstance(self._strategy, CursorStrategy):
            return self._cursor_pages(self._strategy)
        raise ContractViolationError(
            f"unsupported pagination strategy: {type(self._strategy).__name__}"
        )

    async def items(self) -> AsyncIterator[ItemT]:
        """Yield every item of every page, in page order."""
        async for page in self.pages():
            for item in page.items:
                yield item

    def __aiter__(self) -> AsyncIterator[ItemT]:
        return self.items()

    async def collect(self) -> list[ItemT]:
        """Drain the session into a list of items."""
        return [item async for item in self.items()]

    # ── driving loops ──────────────────────────────────────────────────────

    async def _offset_pages(
        self, strategy: OffsetStrategy[RequestT, ResponseT, ItemT]
    ) -> AsyncIterator[Page[ItemT, ResponseT]]:
        request = self._request
        offset = _require_int(strategy.get_offset(request), "get_offset")
        step = strategy.get_step(request)
        if step is not None:
            _require_int(step, "get_step")
        log.debug("pager.start", strategy="offset", offset=offset, step=step)

        page_no = 0
        while True:
            response = await self._send(request)
            items = _extract_items(strategy.get_items, response)
            count = len(items) if items is not None else 0
            flag = _require_flag(strategy.has_next_page(response))
            has_next = flag if flag is not None else count > 0

            if items is not None:
                page_no += 1
                log.debug("pager.page", strategy="offset", page=page_no, offset=offset, items=count)
                yield Page(items, response)

            if step is not None:
                offset += count or 1
            else:
                offset += 1
            strategy.set_offset(request, offset)
            written = strategy.get_offset(request)
            if written != offset:
                raise ContractViolationError(
                    f"set_offset wrote {offset} but get_offset reads {written!r}"
                )

            if not has_next:
                log.debug("pager.done", strategy="offset", pages=page_no, next_offset=offset)
                return

    async def _cursor_pages(
        self, strategy: CursorStrategy[RequestT, ResponseT, ItemT]
    ) -> AsyncIterator[Page[ItemT, ResponseT]]:
        request = self._request
        log.debug("pager.start", strategy="cursor")

        page_no = 0
        while True:
            response = await self._send(request)
            items = _extract_items(strategy.get_items, response)
            next_cursor = strategy.get_next_cursor(response)

            if items is not None:
                page_no += 1
                log.debug("pager.page", strategy="cursor", page=page_no, items=len(items))
                yield Page(items, response)

            if next_cursor is None or next_cursor == "":
                log.debug("pager.done", strategy="cursor", pages=page_no)
                return
            if not isinstance(next_cursor, str):
                raise ContractViolationError(
                    f"get_next_cursor must return str or None, got {type(next_cursor).__name__}"
                )
            strategy.set_cursor(request, next_cursor)

    # ── internal ───────────────────────────────────────────────────────────

    async def _send(self, request: RequestT) -> ResponseT:
        """Issue one request, honouring the session's cancellation signal."""
        cancel = self._cancel
        if cancel is None:
            return await self._get_next_page(request)
        if cancel.is_set():
            log.debug("pager.cancelled", in_flight=False)
            raise asyncio.CancelledError("pagination cancelled")

        fetch = asyncio.ensure_future(self._get_next_page(request))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({fetch, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            fetch.cancel()
            waiter.cancel()

        if cancel.is_set():
            if fetch.done() and not fetch.cancelled():
                # Mark a failed request's exception as retrieved; cancellation wins.
                fetch.exception()
            log.debug("pager.cancelled", in_flight=True)
            raise asyncio.CancelledError("pagination cancelled")
        return fetch.result()


def offset_pager(
    request: RequestT,
    get_next_page: GetNextPage[RequestT, ResponseT],
    *,
    get_offset: Callable[[RequestT], int],
    set_offset: Callable[[RequestT, int], None],
    get_items: GetItems[ResponseT, ItemT],
    get_step: Callable[[RequestT], int | None] | None = None,
    has_next_page: Callable[[ResponseT], bool | None] | None = None,
    cancel: asyncio.Event | None = None,
) -> Pager[RequestT, ResponseT, ItemT]:
    """Build an offset/page-number :class:`Pager`.

    Usage::

        pets = offset_pager(
            PetPageRequest(page=1),
            service.get_pets_page,
            get_offset=lambda r: r.page or 0,
            set_offset=lambda r, page: setattr(r, "page", page),
            get_items=lambda resp: resp.pets,
            has_next_page=lambda resp: resp.pagination.has_next_page,
        )
        async for pet in pets:
            ...
    """
    optional: dict[str, Any] = {}
    if get_step is not None:
        optional["get_step"] = get_step
    if has_next_page is not None:
        optional["has_next_page"] = has_next_page
    strategy = OffsetStrategy(
        get_offset=get_offset,
        set_offset=set_offset,
        get_items=get_items,
        **optional,
    )
    return Pager(request, get_next_page, strategy, cancel=cancel)


def cursor_pager(
    request: RequestT,
    get_next_page: GetNextPage[RequestT, ResponseT],
    *,
    set_cursor: Callable[[RequestT, str], None],
    get_next_cursor: Callable[[ResponseT], str | None],
    get_items: GetItems[ResponseT, ItemT],
    cancel: asyncio.Event | None = None,
) -> Pager[RequestT, ResponseT, ItemT]:
    """Build a cursor/continuation-token :class:`Pager`."""
    strategy = CursorStrategy(
        set_cursor=set_cursor,
        get_next_cursor=get_next_cursor,
        get_items=get_items,
    )
    return Pager(request, get_next_page, strategy, cancel=cancel)


def _require_int(value: object, accessor: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContractViolationError(
            f"{accessor} must return int, got {type(value).__name__}"
        )
    return value


def _require_flag(value: object) -> bool | None:
    if value is not None and not isinstance(value, bool):
        raise ContractViolationError(
            f"has_next_page must return bool or None, got {type(value).__name__}"
        )
    return value


def _extract_items(
    get_items: GetItems[ResponseT, ItemT], response: ResponseT
) -> Sequence[ItemT] | None:
    items = get_items(response)
    if items is None:
        return None
    if isinstance(items, (str, bytes, bytearray)) or not isinstance(items, Sequence):
        raise ContractViolationError(
            f"get_items must return a sequence or None, got {type(items).__name__}"
        )
    return items
