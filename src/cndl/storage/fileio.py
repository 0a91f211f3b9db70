"""Atomic file replacement shared by the object and ref stores."""

import os
import tempfile
from pathlib import Path

from cndl.constants import TMP_PREFIX


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` so readers never observe a partial file.

    The bytes go to a temp file in the destination directory, are flushed
    and fsynced, then renamed over ``path``. The directory entry is synced
    afterwards where the platform allows opening directories.

    Args:
        path: Final file location (parent directory must exist)
        data: Complete file content

    Raises:
        OSError: If any filesystem step fails; the temp file is removed
    """
    tmp_fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=TMP_PREFIX)
    try:
        with os.fdopen(tmp_fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())  # Ensure written to disk
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on error
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    sync_directory(path.parent)


def sync_directory(directory: Path) -> None:
    """Flush a directory entry to stable storage (POSIX only)."""
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
