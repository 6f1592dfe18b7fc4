"""Accessor factories for building strategies over ApiRequest/ApiResponse."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from pageable.transport.models import ApiRequest, ApiResponse

_NEXT_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="?next"?')


def int_param(
    name: str, default: int | None = None
) -> tuple[Callable[[ApiRequest], int | None], Callable[[ApiRequest, int], None]]:
    """Return a ``(getter, setter)`` pair for an integer query parameter.

    The getter returns *default* when the parameter is missing.
    """

    def get(request: ApiRequest) -> int | None:
        value = request.params.get(name)
        if value is None:
            return default
        return int(value)

    def set_(request: ApiRequest, value: int) -> None:
        request.params[name] = value

    return get, set_


def str_param(name: str) -> Callable[[ApiRequest, str], None]:
    """Return a setter writing a string query parameter (e.g. a cursor)."""

    def set_(request: ApiRequest, value: str) -> None:
        request.params[name] = value

    return set_


def json_field(path: str) -> Callable[[ApiResponse], Any]:
    """Return an accessor reading a dotted *path* out of the JSON body.

    ``json_field("meta.next_cursor")`` reads ``data["meta"]["next_cursor"]``;
    an empty path returns the whole body.  Any missing segment yields
    ``None``.
    """
    keys = [key for key in path.split(".") if key]

    def get(response: ApiResponse) -> Any:
        value = response.data
        for key in keys:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
            if value is None:
                return None
        return value

    return get


def next_link(response: ApiResponse) -> str | None:
    """Extract the ``rel="next"`` URL from an RFC 8288 ``Link`` header."""
    match = _NEXT_LINK_RE.search(response.headers.get("Link", ""))
    return match.group(1) if match else None


def follow_link(request: ApiRequest, url: str) -> None:
    """Point *request* at *url*.  The next URL carries its own query string."""
    request.path = url
    request.params.clear()
