"""Blob store factory functions."""

import os
from pathlib import Path
from typing import Optional

from budgetkit.storage.filesystem import LocalBlobStore

ENV_BLOB_DIR = "BUDGETKIT_BLOB_DIR"


def create_blob_store(blob_dir: Optional[str] = None) -> LocalBlobStore:
    """Create a directory-backed blob store.

    Args:
        blob_dir: Root directory. If None, checks BUDGETKIT_BLOB_DIR
            environment variable, then defaults to ~/.budgetkit/blobs

    Returns:
        LocalBlobStore rooted at the resolved directory
    """
    if blob_dir is None:
        blob_dir = os.environ.get(ENV_BLOB_DIR)

    if blob_dir is None:
        blob_dir = str(Path.home() / ".budgetkit" / "blobs")

    root = Path(blob_dir)
    root.mkdir(parents=True, exist_ok=True)
    return LocalBlobStore(root)
