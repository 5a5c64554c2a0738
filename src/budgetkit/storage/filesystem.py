"""Blob store backed by a local directory."""

from pathlib import Path
from typing import Optional

from budgetkit.storage.base import BlobStore, CSV_CONTENT_TYPE, validate_key


class LocalBlobStore(BlobStore):
    """Keeps each blob as a file below a root directory.

    Keys map to relative paths, so ``imports/3/12.csv`` is stored at
    ``<root>/imports/3/12.csv``. Content types are not persisted.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path_for(self, key: str) -> Path:
        return self.root / validate_key(key)

    def put(self, key: str, content: bytes, content_type: str = CSV_CONTENT_TYPE) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
