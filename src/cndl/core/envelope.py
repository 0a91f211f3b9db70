"""Integrity-checked envelope for encoded chunks.

Frame layout::

    [encoding tag: 1 byte][payload: N bytes][CRC-32C: 4 bytes, big-endian]

The checksum covers tag and payload. It guards against bit rot and
truncation in storage; it is separate from the SHA-256 object hash, which
identifies content rather than validating it.
"""

import struct
from typing import Any, Dict, NamedTuple

import crc32c

from cndl.constants import (
    ENVELOPE_CHECKSUM_SIZE,
    ENVELOPE_MIN_SIZE,
    ENVELOPE_TAG_SIZE,
    SUPPORTED_ENCODINGS,
)
from cndl.errors import (
    ChecksumMismatchError,
    EnvelopeTooSmallError,
    UnsupportedEncodingError,
)

_CHECKSUM = struct.Struct(">I")


class Envelope(NamedTuple):
    """Decoded envelope contents."""

    encoding: int
    payload: bytes


def checksum(data: bytes) -> int:
    """CRC-32C (Castagnoli) of ``data``."""
    return crc32c.crc32c(data)


def wrap(encoding: int, payload: bytes) -> bytes:
    """Build a frame around an encoded payload.

    Args:
        encoding: One-byte encoding tag
        payload: Encoded chunk bytes (may be empty)

    Returns:
        Frame bytes ready to be stored as an object

    Raises:
        ValueError: If ``encoding`` does not fit in one byte
    """
    if not 0 <= encoding <= 0xFF:
        raise ValueError(f"Encoding tag must fit in one byte, got {encoding}")

    body = bytes([encoding]) + bytes(payload)
    return body + _CHECKSUM.pack(checksum(body))


def unwrap(frame: bytes) -> Envelope:
    """Validate a frame and split it into tag and payload.

    Checks run in order: size, checksum, encoding tag.

    Raises:
        EnvelopeTooSmallError: If the frame is shorter than 5 bytes
        ChecksumMismatchError: If the trailer disagrees with the contents
        UnsupportedEncodingError: If the tag is not a known encoding
    """
    if len(frame) < ENVELOPE_MIN_SIZE:
        raise EnvelopeTooSmallError(len(frame), ENVELOPE_MIN_SIZE)

    body = frame[:-ENVELOPE_CHECKSUM_SIZE]
    (expected,) = _CHECKSUM.unpack(frame[-ENVELOPE_CHECKSUM_SIZE:])
    actual = checksum(body)
    if actual != expected:
        raise ChecksumMismatchError(expected, actual)

    encoding = body[0]
    if encoding not in SUPPORTED_ENCODINGS:
        raise UnsupportedEncodingError(encoding)

    return Envelope(encoding=encoding, payload=bytes(body[ENVELOPE_TAG_SIZE:]))


def describe_frame(frame: bytes) -> Dict[str, Any]:
    """Validate a frame and summarize it for display."""
    envelope = unwrap(frame)
    (stored,) = _CHECKSUM.unpack(frame[-ENVELOPE_CHECKSUM_SIZE:])
    return {
        "encoding": envelope.encoding,
        "frame_size": len(frame),
        "payload_size": len(envelope.payload),
        "checksum": f"{stored:08x}",
    }
