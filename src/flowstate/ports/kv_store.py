"""Key-value persistence interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for durable storage of serialized blobs by key."""

    def get(self, key: str) -> str | None:
        """Read the blob stored under key. Returns None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite the blob stored under key."""
        ...
