"""Named mutable pointers to object hashes.

Refs are small files under .cndl/refs/ whose entire content is the target
hash. Names are hierarchical (``heads/main``, ``fetch/aapl``) and
lower-cased before they touch the filesystem, so ``fetch/AAPL`` and
``fetch/aapl`` are the same ref. A ref keeps no history.
"""

import os
from pathlib import Path
from typing import List, Optional

from cndl.constants import REFS_DIR, TMP_PREFIX
from cndl.errors import (
    InvalidRefNameError,
    RefConflictError,
    RefCorruptedError,
    RefNotFoundError,
)
from cndl.logging_config import get_logger
from cndl.storage.fileio import atomic_write

logger = get_logger(__name__)


def normalize_ref_name(name: str) -> str:
    """Normalize a ref name to its on-disk form.

    Args:
        name: Ref name such as ``fetch/AAPL``

    Returns:
        Lower-cased, ``/``-separated name without empty segments

    Raises:
        InvalidRefNameError: If the name is empty, absolute, or contains
            ``.``/``..`` segments or a temp-file prefix
    """
    if not isinstance(name, str):
        raise InvalidRefNameError(f"Ref name must be string, got {type(name)}")

    raw = name.strip().replace("\\", "/")
    if raw.startswith("/"):
        raise InvalidRefNameError(f"Ref name must be relative: '{name}'")

    segments = [segment for segment in raw.lower().split("/") if segment]
    if not segments:
        raise InvalidRefNameError("Ref name must not be empty")
    for segment in segments:
        if segment in (".", "..") or segment.startswith(TMP_PREFIX):
            raise InvalidRefNameError(f"Invalid segment '{segment}' in ref name '{name}'")

    return "/".join(segments)


class RefStore:
    """File-backed store of named refs.

    Attributes:
        repo_dir: Path to the repository directory
        refs_dir: Path to the refs directory
    """

    def __init__(self, repo_dir: Path) -> None:
        self.repo_dir = Path(repo_dir)
        self.refs_dir = self.repo_dir / REFS_DIR

    def write_ref(self, name: str, target: str) -> None:
        """Point ``name`` at ``target``, replacing any previous value.

        Missing namespace directories are created. The file is replaced
        atomically.

        Raises:
            InvalidRefNameError: If the name cannot be normalized
            OSError: If the write fails
        """
        ref_name = normalize_ref_name(name)
        ref_path = self.refs_dir / ref_name
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(ref_path, target.encode("ascii"))
        logger.debug("ref_written", ref=ref_name, target=target)

    def read_ref(self, name: str) -> str:
        """Return the hash ``name`` points at.

        Raises:
            RefNotFoundError: If the ref doesn't exist
            RefCorruptedError: If the file is not ASCII text
        """
        ref_name = normalize_ref_name(name)
        ref_path = self.refs_dir / ref_name
        try:
            return ref_path.read_text(encoding="ascii").strip()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise RefNotFoundError(ref_name) from e
        except UnicodeDecodeError as e:
            raise RefCorruptedError(ref_name, f"not ASCII text ({e.reason})") from e

    def read_ref_or_none(self, name: str) -> Optional[str]:
        """Like ``read_ref`` but returns None for a missing ref."""
        try:
            return self.read_ref(name)
        except RefNotFoundError:
            return None

    def ref_exists(self, name: str) -> bool:
        """Check if a ref file exists."""
        return (self.refs_dir / normalize_ref_name(name)).is_file()

    def delete_ref(self, name: str) -> None:
        """Remove a ref.

        Raises:
            RefNotFoundError: If the ref doesn't exist
        """
        ref_name = normalize_ref_name(name)
        ref_path = self.refs_dir / ref_name
        if not ref_path.is_file():
            raise RefNotFoundError(ref_name)
        ref_path.unlink()
        logger.debug("ref_deleted", ref=ref_name)

    def compare_and_swap(self, name: str, expected: Optional[str], target: str) -> None:
        """Update a ref only if it still holds ``expected``.

        This is a check-then-write under the single-writer model. It turns a
        ref that moved since it was read into an error instead of a lost
        update; it is not a lock.

        An empty ref file counts as absent.

        Args:
            name: Ref name
            expected: Value the ref must hold, or None if it must not exist
            target: New value

        Raises:
            RefConflictError: If the current value differs from ``expected``
        """
        current = self.read_ref_or_none(name) or None
        expected = expected or None
        if current != expected:
            raise RefConflictError(normalize_ref_name(name), expected, current)
        self.write_ref(name, target)

    def list_refs(self, namespace: str = "") -> List[str]:
        """List normalized names of all refs below ``namespace``.

        Args:
            namespace: Ref prefix such as ``fetch``; empty for every ref

        Returns:
            Sorted list of full ref names (e.g. ``fetch/aapl``)
        """
        base = self.refs_dir
        if namespace:
            base = base / normalize_ref_name(namespace)
        if not base.is_dir():
            return []

        names = []
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames[:] = [d for d in dirnames if not d.startswith(TMP_PREFIX)]
            for filename in filenames:
                if filename.startswith(TMP_PREFIX):
                    continue
                rel_path = Path(dirpath, filename).relative_to(self.refs_dir)
                names.append(rel_path.as_posix())
        return sorted(names)
