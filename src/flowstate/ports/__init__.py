"""Ports - interfaces/protocols for external dependencies."""

from .kv_store import KeyValueStore
from .notification import NotificationChannel

__all__ = [
    "KeyValueStore",
    "NotificationChannel",
]
