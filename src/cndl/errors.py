"""cndl exception hierarchy.

Errors are raised by the lowest layer that can observe them and carry the
hash, prefix or ref name involved. Filesystem failures are not wrapped and
surface as ``OSError``.
"""

from typing import Iterable, Optional


class CndlError(Exception):
    """Base exception for all cndl failures."""


class ConfigError(CndlError):
    """Raised for invalid runtime configuration."""


class NotFoundError(CndlError):
    """Raised when an object, ref or repository does not exist."""


class ObjectNotFoundError(NotFoundError):
    """Raised when an object cannot be found in the object store."""

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        message = f"Object not found: {key}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RefNotFoundError(NotFoundError):
    """Raised when a ref file does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Ref not found: {name}")


class RepositoryNotFoundError(NotFoundError):
    """Raised when the repository layout is missing."""


class PrefixError(CndlError):
    """Base class for hash prefix resolution failures."""


class PrefixTooShortError(PrefixError):
    """Raised when a prefix cannot select a shard plus one filename char."""

    def __init__(self, prefix: str, minimum: int) -> None:
        self.prefix = prefix
        super().__init__(
            f"Prefix too short: '{prefix}' (need at least {minimum} characters)"
        )


class AmbiguousPrefixError(PrefixError):
    """Raised when a prefix matches more than one stored object."""

    def __init__(self, prefix: str, candidates: Iterable[str]) -> None:
        self.prefix = prefix
        self.candidates = sorted(candidates)
        shown = ", ".join(self.candidates[:5])
        if len(self.candidates) > 5:
            shown += ", ..."
        super().__init__(
            f"Ambiguous prefix '{prefix}' matches {len(self.candidates)} objects: {shown}"
        )


class EnvelopeError(CndlError):
    """Base class for chunk envelope failures."""


class EnvelopeTooSmallError(EnvelopeError):
    """Raised when a frame is shorter than tag plus checksum."""

    def __init__(self, size: int, minimum: int) -> None:
        self.size = size
        super().__init__(
            f"Frame too small to be a valid chunk: {size} bytes (minimum {minimum})"
        )


class ChecksumMismatchError(EnvelopeError):
    """Raised when the envelope checksum disagrees with its contents."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch: data is corrupted "
            f"(stored {expected:#010x}, computed {actual:#010x})"
        )


class UnsupportedEncodingError(EnvelopeError):
    """Raised for an encoding tag no codec is registered for."""

    def __init__(self, encoding: int) -> None:
        self.encoding = encoding
        super().__init__(f"Unsupported encoding type: {encoding}")


class ChunkDecodeError(CndlError):
    """Raised when an encoded chunk payload cannot be decoded."""


class ObjectCorruptedError(CndlError):
    """Raised when an object's content no longer matches its hash."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Object corrupted: expected {expected}, got {actual}")


class CommitCorruptedError(CndlError):
    """Raised when a stored commit does not deserialize."""

    def __init__(self, commit_hash: str, reason: str) -> None:
        self.commit_hash = commit_hash
        super().__init__(f"Commit {commit_hash} is corrupt: {reason}")


class InvalidRefNameError(CndlError):
    """Raised for ref names that cannot be mapped to a file under refs/."""


class RefConflictError(CndlError):
    """Raised when a ref moved between read and update."""

    def __init__(self, name: str, expected: Optional[str], actual: Optional[str]) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Ref {name} changed concurrently: expected {expected or '<none>'}, "
            f"found {actual or '<none>'}"
        )


class RefCorruptedError(CndlError):
    """Raised when a ref file does not hold readable text."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Ref {name} is corrupt: {reason}")
