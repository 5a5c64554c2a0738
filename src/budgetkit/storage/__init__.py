"""Blob storage for uploaded CSV files."""

from budgetkit.storage.base import BlobStore, import_blob_key
from budgetkit.storage.factories import create_blob_store
from budgetkit.storage.memory import InMemoryBlobStore

__all__ = ["BlobStore", "InMemoryBlobStore", "create_blob_store", "import_blob_key"]
