"""Commit objects and branch history.

A commit records the full symbol -> chunk hash mapping at a point in time
plus a link to its parent. Commits are serialized to canonical JSON and
stored as ordinary objects; a branch ref (``heads/<branch>``) points at
the newest one.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from cndl.constants import DEFAULT_BRANCH, HEADS_NAMESPACE, STAGING_NAMESPACE
from cndl.errors import CommitCorruptedError
from cndl.logging_config import get_logger
from cndl.storage.digest import is_valid_hash
from cndl.storage.object_store import ObjectStore
from cndl.storage.ref_store import RefStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Commit:
    """Immutable snapshot record.

    Attributes:
        parent: Hash of the previous commit, empty for a root commit
        timestamp: Seconds since the epoch
        message: Free-form commit message
        snapshot: Mapping of symbol to object hash
    """

    parent: str
    timestamp: int
    message: str
    snapshot: Dict[str, str] = field(default_factory=dict)

    @property
    def is_root(self) -> bool:
        return not self.parent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parent": self.parent,
            "timestamp": self.timestamp,
            "message": self.message,
            "snapshot": dict(self.snapshot),
        }

    def to_bytes(self) -> bytes:
        """Serialize to canonical JSON (sorted keys, 2-space indent)."""
        text = json.dumps(self.to_dict(), sort_keys=True, indent=2, ensure_ascii=False)
        return (text + "\n").encode("utf-8")

    @classmethod
    def from_bytes(cls, commit_hash: str, content: bytes) -> "Commit":
        """Deserialize a stored commit.

        Args:
            commit_hash: Hash the bytes were read from (for error messages)
            content: Stored object content

        Raises:
            CommitCorruptedError: If content is not a well-formed commit
        """
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CommitCorruptedError(commit_hash, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise CommitCorruptedError(commit_hash, "expected a JSON object")

        parent = data.get("parent")
        timestamp = data.get("timestamp")
        message = data.get("message")
        snapshot = data.get("snapshot")

        if not isinstance(parent, str):
            raise CommitCorruptedError(commit_hash, "'parent' must be a string")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise CommitCorruptedError(commit_hash, "'timestamp' must be an integer")
        if not isinstance(message, str):
            raise CommitCorruptedError(commit_hash, "'message' must be a string")
        if not isinstance(snapshot, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in snapshot.items()
        ):
            raise CommitCorruptedError(
                commit_hash, "'snapshot' must map strings to strings"
            )

        return cls(parent=parent, timestamp=timestamp, message=message, snapshot=snapshot)


def branch_ref(branch: str) -> str:
    return f"{HEADS_NAMESPACE}/{branch}"


def symbol_for_ref(ref_name: str) -> str:
    """Map a staging ref (``fetch/aapl``) to its snapshot key (``AAPL``)."""
    return ref_name[len(STAGING_NAMESPACE) + 1:].upper()


class CommitManager:
    """Builds commits from staged refs and advances branch refs.

    Attributes:
        objects: ObjectStore that holds commit objects
        refs: RefStore holding staging and branch refs
    """

    def __init__(
        self,
        objects: ObjectStore,
        refs: RefStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize CommitManager.

        Args:
            objects: ObjectStore for commit objects
            refs: RefStore for staging and branch refs
            clock: Source of the current time in seconds
        """
        self.objects = objects
        self.refs = refs
        self._clock = clock

    def commit(self, message: str, branch: str = DEFAULT_BRANCH) -> str:
        """Fold every staged ref into a new commit on ``branch``.

        The new snapshot starts as a copy of the parent commit's snapshot
        and each staged ref overwrites its symbol entry. The commit object is
        stored before the branch ref moves; if anything fails the branch is
        left where it was.

        Args:
            message: Commit message
            branch: Branch to advance

        Returns:
            Hash of the new commit

        Raises:
            ObjectNotFoundError: If the parent commit object is missing
            CommitCorruptedError: If the parent commit is unreadable
            RefConflictError: If the branch moved while committing
            OSError: If writing the commit or the ref fails
        """
        head_ref = branch_ref(branch)
        parent_hash = self.refs.read_ref_or_none(head_ref) or ""

        snapshot: Dict[str, str] = {}
        if parent_hash:
            snapshot.update(self.read_commit(parent_hash).snapshot)

        staged = self.staged()
        snapshot.update(staged)

        new_commit = Commit(
            parent=parent_hash,
            timestamp=int(self._clock()),
            message=message,
            snapshot=snapshot,
        )
        commit_hash = self.objects.put(new_commit.to_bytes())

        self.refs.compare_and_swap(head_ref, parent_hash or None, commit_hash)

        logger.info(
            "commit_created",
            commit=commit_hash,
            parent=parent_hash,
            branch=branch,
            staged=len(staged),
            symbols=len(snapshot),
        )
        return commit_hash

    def read_commit(self, commit_hash: str) -> Commit:
        """Load and deserialize a commit object.

        Raises:
            ObjectNotFoundError: If no object has this hash
            CommitCorruptedError: If the hash is malformed or the object is
                not a commit
        """
        if not is_valid_hash(commit_hash):
            raise CommitCorruptedError(commit_hash, "not a full commit hash")
        content = self.objects.get(commit_hash)
        return Commit.from_bytes(commit_hash, content)

    def staged(self) -> Dict[str, str]:
        """Return symbol -> hash for every ref in the staging namespace."""
        return {
            symbol_for_ref(ref_name): self.refs.read_ref(ref_name)
            for ref_name in self.refs.list_refs(STAGING_NAMESPACE)
        }

    def head(self, branch: str = DEFAULT_BRANCH) -> Optional[str]:
        """Return the commit hash ``branch`` points at, or None."""
        return self.refs.read_ref_or_none(branch_ref(branch)) or None

    def log(
        self,
        start: Optional[str] = None,
        branch: str = DEFAULT_BRANCH,
        limit: Optional[int] = None,
    ) -> Iterator[Tuple[str, Commit]]:
        """Walk history newest-first by following parent links.

        Args:
            start: Commit hash to start from; defaults to the branch head
            branch: Branch used when ``start`` is not given
            limit: Maximum number of commits to yield

        Yields:
            (commit_hash, Commit) pairs

        Raises:
            ObjectNotFoundError: If a commit in the chain was deleted
        """
        current = start or self.head(branch)
        count = 0
        while current and (limit is None or count < limit):
            commit_obj = self.read_commit(current)
            yield current, commit_obj
            current = commit_obj.parent
            count += 1
