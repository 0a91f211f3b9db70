"""Content-addressable object storage for cndl.

This module implements a Git-like object store using SHA-256 hashing for
content addressing. Objects live in .cndl/objects/, sharded by the first
two hex characters of their hash, and are written atomically so a crash
never leaves a truncated file under its final name.
"""

import os
from pathlib import Path
from typing import Iterator, List

from cndl.constants import (
    HASH_LENGTH,
    MIN_PREFIX_LENGTH,
    OBJECTS_DIR,
    SHARD_LENGTH,
    TMP_PREFIX,
)
from cndl.errors import (
    AmbiguousPrefixError,
    ObjectCorruptedError,
    ObjectNotFoundError,
    PrefixTooShortError,
)
from cndl.logging_config import get_logger
from cndl.storage.digest import digest, is_hex, is_valid_hash
from cndl.storage.fileio import atomic_write

logger = get_logger(__name__)


class ObjectStore:
    """Content-addressable storage for immutable objects.

    Stores byte payloads identified by their SHA-256 hash. Provides
    automatic deduplication, durable atomic writes and prefix lookup.

    Storage layout:
        .cndl/objects/<hash[:2]>/<hash[2:]>

    Attributes:
        repo_dir: Path to the repository directory
        objects_dir: Path to the objects directory

    Example:
        >>> store = ObjectStore(Path(".cndl"))
        >>> object_hash = store.put(b"\\x01chunk")
        >>> assert store.get(object_hash) == b"\\x01chunk"
    """

    def __init__(self, repo_dir: Path) -> None:
        """Initialize the object store.

        Args:
            repo_dir: Path to .cndl directory

        Raises:
            ValueError: If repo_dir doesn't exist
        """
        self.repo_dir = Path(repo_dir)
        self.objects_dir = self.repo_dir / OBJECTS_DIR

        if not self.repo_dir.exists():
            raise ValueError(f"cndl directory not found: {repo_dir}")

    def put(self, content: bytes) -> str:
        """Write an object to the store.

        If an object with the same hash already exists, returns the hash
        without writing (deduplication). New objects are written to a temp
        file, fsynced, and renamed into place before this returns.

        Args:
            content: Binary content to store

        Returns:
            SHA-256 hash of the content (64 hex characters)

        Raises:
            OSError: If write fails (permissions, disk full, etc.)

        Example:
            >>> hash1 = store.put(b"data")
            >>> hash2 = store.put(b"data")
            >>> assert hash1 == hash2  # Deduplication
        """
        object_hash = digest(content)
        object_path = self.object_path(object_hash)

        if object_path.exists():
            logger.debug("object_dedup", hash=object_hash)
            return object_hash

        object_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            atomic_write(object_path, content)
        except OSError:
            # Another writer renamed identical content into place first
            if object_path.exists():
                return object_hash
            raise

        logger.debug("object_written", hash=object_hash, size=len(content))
        return object_hash

    def get(self, object_hash: str, verify: bool = False) -> bytes:
        """Read an object from the store.

        Args:
            object_hash: SHA-256 hash of the object (64 hex characters)
            verify: Recompute the hash and compare it with ``object_hash``

        Returns:
            Binary content of the object

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            ObjectCorruptedError: If verification fails
            ValueError: If object_hash is invalid format
        """
        self._validate_hash(object_hash)
        object_path = self.object_path(object_hash)

        try:
            content = object_path.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(object_hash, f"no file at {object_path}") from e

        if verify:
            actual_hash = digest(content)
            if actual_hash != object_hash:
                raise ObjectCorruptedError(object_hash, actual_hash)

        return content

    def delete(self, object_hash: str) -> None:
        """Remove an object from the store.

        Refs and commits pointing at the object are left untouched and
        become dangling.

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            ValueError: If object_hash is invalid format
        """
        self._validate_hash(object_hash)
        object_path = self.object_path(object_hash)

        try:
            object_path.unlink()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(object_hash) from e

        shard_dir = object_path.parent
        if not any(shard_dir.iterdir()):
            shard_dir.rmdir()

        logger.debug("object_deleted", hash=object_hash)

    def exists(self, object_hash: str) -> bool:
        """Check if an object exists in the store."""
        if not is_valid_hash(object_hash):
            return False
        return self.object_path(object_hash).is_file()

    def list(self) -> Iterator[str]:
        """Yield the hash of every stored object.

        Hashes are rebuilt from shard directory name plus file name. The
        order is unspecified and the listing reflects the directory state
        while it is being consumed.
        """
        if not self.objects_dir.exists():
            return

        with os.scandir(self.objects_dir) as shards:
            shard_dirs = [
                shard.name
                for shard in shards
                if shard.is_dir() and self._is_shard_name(shard.name)
            ]

        for shard in shard_dirs:
            with os.scandir(self.objects_dir / shard) as entries:
                names = [entry.name for entry in entries if entry.is_file()]
            for name in names:
                object_hash = shard + name
                if is_valid_hash(object_hash):
                    yield object_hash

    def resolve_path(self, prefix: str) -> Path:
        """Find the single object file whose hash starts with ``prefix``.

        Args:
            prefix: At least three hex characters of an object hash

        Returns:
            Path to the matching object file

        Raises:
            PrefixTooShortError: If prefix has fewer than three characters
            ObjectNotFoundError: If the shard or a matching file is missing
            AmbiguousPrefixError: If more than one object matches
        """
        prefix = prefix.strip().lower()
        if len(prefix) < MIN_PREFIX_LENGTH:
            raise PrefixTooShortError(prefix, MIN_PREFIX_LENGTH)
        if len(prefix) > HASH_LENGTH or not is_hex(prefix):
            raise ObjectNotFoundError(prefix, "not a hex hash prefix")

        shard = prefix[:SHARD_LENGTH]
        rest = prefix[SHARD_LENGTH:]
        shard_dir = self.objects_dir / shard
        if not shard_dir.is_dir():
            raise ObjectNotFoundError(prefix, f"no shard directory {shard}")

        with os.scandir(shard_dir) as entries:
            matches: List[str] = [
                entry.name
                for entry in entries
                if entry.name.startswith(rest)
                and not entry.name.startswith(TMP_PREFIX)
                and entry.is_file()
            ]
        if not matches:
            raise ObjectNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousPrefixError(prefix, (shard + name for name in matches))

        return shard_dir / matches[0]

    def resolve(self, prefix: str) -> str:
        """Expand a hash prefix to the full object hash."""
        object_path = self.resolve_path(prefix)
        return object_path.parent.name + object_path.name

    def object_path(self, object_hash: str) -> Path:
        """Get the filesystem path for an object.

        Uses Git-like sharding: objects/<hash[:2]>/<hash[2:]>
        """
        return self.objects_dir / object_hash[:SHARD_LENGTH] / object_hash[SHARD_LENGTH:]

    @staticmethod
    def _is_shard_name(name: str) -> bool:
        return len(name) == SHARD_LENGTH and is_hex(name)

    def _validate_hash(self, object_hash: str) -> None:
        """Validate that a hash string is properly formatted.

        Raises:
            ValueError: If hash is invalid format
        """
        if not isinstance(object_hash, str):
            raise ValueError(f"Hash must be string, got {type(object_hash)}")

        if len(object_hash) != HASH_LENGTH:
            raise ValueError(
                f"Hash must be {HASH_LENGTH} characters, got {len(object_hash)}"
            )

        if not is_hex(object_hash):
            raise ValueError(f"Hash must be lowercase hexadecimal: {object_hash}")
