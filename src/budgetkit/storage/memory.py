"""In-process blob store, used by tests."""

from typing import Optional

from budgetkit.storage.base import BlobStore, CSV_CONTENT_TYPE, validate_key


class InMemoryBlobStore(BlobStore):
    """Dictionary-backed blob store that also remembers content types."""

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}

    def put(self, key: str, content: bytes, content_type: str = CSV_CONTENT_TYPE) -> None:
        validate_key(key)
        self.blobs[key] = bytes(content)
        self.content_types[key] = content_type

    def get(self, key: str) -> Optional[bytes]:
        return self.blobs.get(validate_key(key))

    def delete(self, key: str) -> None:
        validate_key(key)
        self.blobs.pop(key, None)
        self.content_types.pop(key, None)
