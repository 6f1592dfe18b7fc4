"""Async JSON-over-HTTP client whose ``send`` plugs into a Pager.

The pagination engine never retries.  ``ApiClient.send`` is the request
function, so transient failures are absorbed here: timeouts and the
statuses in :data:`RETRY_STATUSES` are retried with exponential backoff,
or after the server's ``Retry-After`` when it sends one.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from pageable.core.config import ClientSettings
from pageable.pager import Pager, cursor_pager, offset_pager
from pageable.transport.accessors import (
    follow_link,
    int_param,
    json_field,
    next_link,
    str_param,
)
from pageable.transport.models import ApiRequest, ApiResponse

log = structlog.get_logger(__name__)

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class RateLimitError(Exception):
    """The API still answered 429 on the last attempt."""

    def __init__(self, retry_after: float | None) -> None:
        self.retry_after = retry_after
        hint = f", retry after {retry_after:g}s" if retry_after is not None else ""
        super().__init__(f"rate limit exceeded{hint}")


class ApiClient:
    """Async client for a paginated JSON REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        headers: dict[str, str] | None = None,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ClientSettings.from_env()
        default_headers = {"Accept": "application/json"}
        token = token or self._settings.token
        if token:
            default_headers["Authorization"] = f"Bearer {token}"
        default_headers.update(headers or {})
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url if base_url is None else base_url,
            headers=default_headers,
            timeout=self._settings.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── get_next_page ──────────────────────────────────────────────────────

    async def send(self, request: ApiRequest) -> ApiResponse:
        """Perform one GET for *request* and decode its JSON body.

        Matches the ``get_next_page`` callback contract, so it can be handed
        straight to :class:`~pageable.pager.Pager`.
        """
        response = await self._get(request)
        return ApiResponse(
            status_code=response.status_code,
            data=response.json() if response.content else None,
            headers=response.headers,
            url=str(response.url),
        )

    # ── pager builders ─────────────────────────────────────────────────────

    def offset_pager(
        self,
        request: ApiRequest,
        *,
        offset_param: str = "page",
        items_path: str = "items",
        has_next_path: str | None = None,
        step_param: str | None = None,
        start: int = 0,
        cancel: asyncio.Event | None = None,
    ) -> Pager[ApiRequest, ApiResponse, Any]:
        """Page through an endpoint addressed by an integer query parameter.

        *start* is written onto *request* unless it already carries
        *offset_param*, so the first request is addressed explicitly.  With
        *step_param* set (e.g. ``"limit"``) the offset advances by the number
        of items received; otherwise *offset_param* is a page number and
        advances by one.
        """
        request.params.setdefault(offset_param, start)
        get_offset, set_offset = int_param(offset_param)
        return offset_pager(
            request,
            self.send,
            get_offset=get_offset,
            set_offset=set_offset,
            get_items=json_field(items_path),
            get_step=int_param(step_param)[0] if step_param else None,
            has_next_page=json_field(has_next_path) if has_next_path else None,
            cancel=cancel,
        )

    def cursor_pager(
        self,
        request: ApiRequest,
        *,
        cursor_param: str = "cursor",
        next_cursor_path: str = "next_cursor",
        items_path: str = "items",
        cancel: asyncio.Event | None = None,
    ) -> Pager[ApiRequest, ApiResponse, Any]:
        """Page through an endpoint that returns a continuation token in its body."""
        return cursor_pager(
            request,
            self.send,
            set_cursor=str_param(cursor_param),
            get_next_cursor=json_field(next_cursor_path),
            get_items=json_field(items_path),
            cancel=cancel,
        )

    def link_pager(
        self,
        request: ApiRequest,
        *,
        items_path: str = "",
        cancel: asyncio.Event | None = None,
    ) -> Pager[ApiRequest, ApiResponse, Any]:
        """Follow ``Link: <...>; rel="next"`` headers.

        The next URL acts as the cursor.  By default the whole JSON body is
        taken as the item list.
        """
        return cursor_pager(
            request,
            self.send,
            set_cursor=follow_link,
            get_next_cursor=next_link,
            get_items=json_field(items_path),
            cancel=cancel,
        )

    # ── internal ───────────────────────────────────────────────────────────

    async def _get(self, request: ApiRequest) -> httpx.Response:
        """GET *request*, retrying up to ``max_retries`` attempts in total.

        The last attempt's failure propagates unchanged, except that a final
        429 is raised as :class:`RateLimitError`.
        """
        attempts = self._settings.max_retries
        attempt = 1
        while True:
            try:
                response = await self._client.get(
                    request.path,
                    params=request.params or None,
                    headers=request.headers or None,
                )
            except httpx.TimeoutException:
                if attempt >= attempts:
                    raise
                reason: object = "timeout"
                delay = self._backoff(attempt)
            else:
                if response.status_code not in RETRY_STATUSES:
                    response.raise_for_status()
                    return response
                retry_after = self._retry_after(response)
                if attempt >= attempts:
                    if response.status_code == 429:
                        raise RateLimitError(retry_after)
                    response.raise_for_status()
                reason = response.status_code
                delay = retry_after if retry_after is not None else self._backoff(attempt)

            log.warning(
                "api.retry",
                path=request.path,
                reason=reason,
                attempt=attempt,
                max_retries=attempts,
                delay=delay,
            )
            await asyncio.sleep(delay)
            attempt += 1

    def _backoff(self, attempt: int) -> float:
        return self._settings.retry_base_delay * 2 ** (attempt - 1)

    def _retry_after(self, response: httpx.Response) -> float | None:
        """Seconds requested by ``Retry-After``, capped at ``max_retry_wait``.

        Only the delta-seconds form is understood; an HTTP-date falls back to
        the backoff schedule.
        """
        raw = response.headers.get("Retry-After")
        if raw is None:
            return None
        try:
            seconds = float(raw)
        except ValueError:
            return None
        return min(max(seconds, 0.0), self._settings.max_retry_wait)
