"""HTTP transport: an httpx-backed ``get_next_page`` and accessor helpers."""

from pageable.transport.accessors import follow_link, int_param, json_field, next_link, str_param
from pageable.transport.client import ApiClient, RateLimitError
from pageable.transport.models import ApiRequest, ApiResponse

__all__ = [
    "ApiClient",
    "ApiRequest",
    "ApiResponse",
    "RateLimitError",
    "follow_link",
    "int_param",
    "json_field",
    "next_link",
    "str_param",
]
