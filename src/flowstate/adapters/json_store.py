"""File-based key-value storage adapter."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    File-based key-value store.

    Implements KeyValueStore protocol. Each key gets a JSON file in the data
    directory; values are written to a temp file and moved into place.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        """Get the file path for a given key."""
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        """Read the blob stored under key. Returns None if not found."""
        path = self._path_for_key(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Write/overwrite the blob stored under key."""
        path = self._path_for_key(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)
        logger.debug(f"Wrote {len(value)} bytes to {path}")
