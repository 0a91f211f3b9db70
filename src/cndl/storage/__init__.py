"""Storage layer for cndl.

This module provides the content-addressable object store, the ref store,
and commit object management.
"""

from cndl.storage.commit_manager import Commit, CommitManager
from cndl.storage.digest import digest
from cndl.storage.object_store import ObjectStore
from cndl.storage.ref_store import RefStore, normalize_ref_name

__all__ = [
    "Commit",
    "CommitManager",
    "ObjectStore",
    "RefStore",
    "digest",
    "normalize_ref_name",
]
