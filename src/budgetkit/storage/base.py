"""Abstract blob store interface for raw uploaded files."""

from abc import ABC, abstractmethod
from typing import Optional

CSV_CONTENT_TYPE = "text/csv"


def import_blob_key(project_id: int, batch_id: int) -> str:
    """Return the key under which a batch's uploaded CSV is stored."""
    return f"imports/{project_id}/{batch_id}.csv"


def validate_key(key: str) -> str:
    """Reject keys that could escape the store's namespace.

    Raises:
        ValueError: If the key is empty, absolute or contains '..'
    """
    if not key or key.startswith("/") or ".." in key:
        raise ValueError(f"Invalid blob key '{key}'")
    return key


class BlobStore(ABC):
    """Stores opaque byte payloads under string keys."""

    @abstractmethod
    def put(self, key: str, content: bytes, content_type: str = CSV_CONTENT_TYPE) -> None:
        """Store content under key, replacing any previous value."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the content stored under key, or None if absent."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        pass
