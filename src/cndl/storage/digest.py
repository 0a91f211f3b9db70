"""Content digests for the object store."""

import hashlib
import re

from cndl.constants import HASH_ALGORITHM, HASH_LENGTH

_HEX_PATTERN = re.compile(r"^[0-9a-f]+$")


def digest(content: bytes) -> str:
    """Compute the content identifier of a byte payload.

    Args:
        content: Binary data to hash

    Returns:
        Lowercase hex SHA-256 digest (64 characters)
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(content)
    return hasher.hexdigest()


def is_valid_hash(value: object) -> bool:
    """Check whether ``value`` looks like a full object hash."""
    return (
        isinstance(value, str)
        and len(value) == HASH_LENGTH
        and _HEX_PATTERN.match(value) is not None
    )


def is_hex(value: str) -> bool:
    """Check whether ``value`` is a non-empty lowercase hex string."""
    return _HEX_PATTERN.match(value) is not None
