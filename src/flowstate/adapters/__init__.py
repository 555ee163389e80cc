"""Adapters - I/O implementations of ports."""

from .json_store import JsonFileStore
from .memory_store import MemoryStore
from .banner import BannerChannel
from .telegram_channel import TelegramChannel

__all__ = [
    "JsonFileStore",
    "MemoryStore",
    "BannerChannel",
    "TelegramChannel",
]
