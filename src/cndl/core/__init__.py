"""Core engine layer for cndl.

This module provides the repository handle, the chunk envelope and the
staging of symbols for the next commit.
"""

from cndl.core.envelope import Envelope, unwrap, wrap
from cndl.core.repository import Repository
from cndl.core.staging import Chunk, StagingManager

__all__ = [
    "Chunk",
    "Envelope",
    "Repository",
    "StagingManager",
    "unwrap",
    "wrap",
]
