"""Byte-level file storage rooted at a base directory."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileStoreError(Exception):
    """Base class for file store failures."""


class FileReadError(FileStoreError):
    """Raised when a stored file is missing or unreadable."""


class StorageWriteError(FileStoreError):
    """Raised when a file cannot be created or written."""


class FileStore:
    """Read and write whole files under ``base_dir``.

    Names are joined to the base directory as given. Callers validate them
    first (see ``utils.resolve_file_path``). There is no locking: concurrent
    writers to the same name race and the last write wins.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, name: str) -> Path:
        return self.base_dir / name

    def read(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}") from exc

    def write(self, name: str, data: bytes) -> None:
        path = self.path_for(name)
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise StorageWriteError(f"Cannot write {path}") from exc
        logger.debug("stored %d bytes in %s", len(data), path)
