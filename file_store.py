"""Filesystem access for the ``/files/`` routes."""

from pathlib import Path
from urllib.parse import unquote


class FileStoreError(Exception):
    """Base error for file store operations."""


class FileStoreNotFoundError(FileStoreError):
    """The requested file does not exist or cannot be addressed."""


class FileStoreIOError(FileStoreError):
    """Writing the file failed."""


class FileStore:
    """Reads and writes files under one root directory.

    The root is fixed at construction and only read afterwards, so a single
    instance is shared by every worker. Writes are not synchronized: two
    concurrent creates of the same name leave whichever finished last.
    """

    def __init__(self, root: str | Path | None) -> None:
        self._root = Path(root).resolve() if root is not None else None

    @property
    def root(self) -> Path | None:
        return self._root

    def resolve(self, name: str) -> Path | None:
        """Resolve a safe path under the root or return None for traversal attempts."""
        if self._root is None or not name:
            return None

        try:
            candidate = (self._root / unquote(name)).resolve()
            candidate.relative_to(self._root)
        except (ValueError, OSError):
            return None
        if candidate == self._root:
            return None
        return candidate

    def read(self, name: str) -> bytes:
        path = self.resolve(name)
        if path is None or not path.is_file():
            raise FileStoreNotFoundError(name)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise FileStoreNotFoundError(name) from exc

    def create(self, name: str, data: bytes) -> Path:
        if self._root is None:
            raise FileStoreIOError("files directory is not configured")
        path = self.resolve(name)
        if path is None:
            raise FileStoreNotFoundError(name)
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise FileStoreIOError(f"could not write {name}") from exc
        return path
