"""Ambient plumbing: logging setup and environment settings."""

from pageable.core.config import ClientSettings
from pageable.core.logging import setup_logging

__all__ = [
    "ClientSettings",
    "setup_logging",
]
