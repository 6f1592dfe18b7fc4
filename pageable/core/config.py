"""Environment-driven settings for the HTTP transport."""

from __future__ import annotations

import os
from dataclasses import dataclass

_ENV_BASE_URL = "PAGEABLE_BASE_URL"
_ENV_API_TOKEN = "PAGEABLE_API_TOKEN"
_ENV_TIMEOUT = "PAGEABLE_HTTP_TIMEOUT"
_ENV_MAX_RETRIES = "PAGEABLE_HTTP_MAX_RETRIES"
_ENV_RETRY_DELAY = "PAGEABLE_HTTP_RETRY_DELAY"
_ENV_MAX_RETRY_WAIT = "PAGEABLE_HTTP_MAX_RETRY_WAIT"


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ClientSettings:
    """Connection and retry settings for :class:`pageable.transport.ApiClient`."""

    base_url: str = ""
    token: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    retry_base_delay: float = 1.0  # seconds
    max_retry_wait: float = 60.0  # cap on a server-requested Retry-After

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retry_wait < 0:
            raise ValueError("max_retry_wait must not be negative")

    @classmethod
    def from_env(cls) -> ClientSettings:
        """Read settings from ``PAGEABLE_*`` environment variables.

        Reads:
            PAGEABLE_BASE_URL             API root (default: empty)
            PAGEABLE_API_TOKEN            bearer token (default: none)
            PAGEABLE_HTTP_TIMEOUT         request timeout in seconds (default: 30)
            PAGEABLE_HTTP_MAX_RETRIES     attempts per request (default: 3)
            PAGEABLE_HTTP_RETRY_DELAY     base backoff delay in seconds (default: 1)
            PAGEABLE_HTTP_MAX_RETRY_WAIT  longest honoured Retry-After (default: 60)
        """
        return cls(
            base_url=os.environ.get(_ENV_BASE_URL, ""),
            token=os.environ.get(_ENV_API_TOKEN) or None,
            timeout=_env_float(_ENV_TIMEOUT, 30.0),
            max_retries=_env_int(_ENV_MAX_RETRIES, 3),
            retry_base_delay=_env_float(_ENV_RETRY_DELAY, 1.0),
            max_retry_wait=_env_float(_ENV_MAX_RETRY_WAIT, 60.0),
        )
