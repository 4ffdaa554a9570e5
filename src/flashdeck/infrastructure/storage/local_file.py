"""
Local File Gateway: Infrastructure adapter storing each blob as a file.

Implements PersistenceGateway on a directory: the key is the file name.
"""

import asyncio
import logging
import os
from pathlib import Path

from flashdeck.domain.errors import BlobNotFoundError, StorageError
from flashdeck.domain.ports import PersistenceGateway

logger = logging.getLogger(__name__)


class LocalFileGateway(PersistenceGateway):
    """Blob store backed by files under a root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Key '{key}' escapes the data directory")
        return path

    async def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    async def load(self, key: str) -> str:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise BlobNotFoundError(key) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def save(self, key: str, data: str) -> None:
        path = self._path(key)
        await asyncio.to_thread(self._write_atomic, path, data)

    def _write_atomic(self, path: Path, data: str) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(data, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")
