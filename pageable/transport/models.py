"""Request/response shapes used by the HTTP transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class ApiRequest:
    """A GET request description.

    Mutable on purpose: pagers advance ``params`` (or, when following
    ``Link`` headers, ``path``) in place between requests.
    """

    path: str
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiResponse:
    """Decoded JSON body plus the transport metadata pagers may need."""

    status_code: int
    data: Any
    headers: httpx.Headers
    url: str
