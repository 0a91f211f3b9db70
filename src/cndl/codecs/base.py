"""Base class and registry for time-series chunk codecs.

A codec turns a list of ``(timestamp, value)`` samples into an encoded
payload and back. Codecs are keyed by the one-byte encoding tag written
into the chunk envelope; the storage layer never looks inside a payload.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple

from cndl.errors import UnsupportedEncodingError

Sample = Tuple[int, float]


class ChunkCodec(ABC):
    """Encoder/decoder for one chunk encoding.

    Example:
        class RawCodec(ChunkCodec):
            encoding = 7
            name = "raw"

            def encode(self, samples): ...
            def decode(self, payload): ...
    """

    encoding: int
    name: str

    @abstractmethod
    def encode(self, samples: Sequence[Sample]) -> bytes:
        """Encode samples (ordered by timestamp) into a payload."""

    @abstractmethod
    def decode(self, payload: bytes) -> List[Sample]:
        """Decode a payload produced by ``encode``.

        Raises:
            ChunkDecodeError: If the payload is truncated or malformed
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(encoding={self.encoding}, name={self.name!r})"


_REGISTRY: Dict[int, ChunkCodec] = {}
_DEFAULT_ENCODING: List[int] = []


def register_codec(codec: ChunkCodec, default: bool = False) -> None:
    """Register ``codec`` under its encoding tag.

    Raises:
        ValueError: If the tag is outside one byte or already registered
    """
    if not 0 <= codec.encoding <= 0xFF:
        raise ValueError(f"Encoding tag must fit in one byte: {codec.encoding}")
    if codec.encoding in _REGISTRY:
        raise ValueError(f"Encoding {codec.encoding} already registered")
    _REGISTRY[codec.encoding] = codec
    if default or not _DEFAULT_ENCODING:
        _DEFAULT_ENCODING[:] = [codec.encoding]


def get_codec(encoding: int) -> ChunkCodec:
    """Return the codec for ``encoding``.

    Raises:
        UnsupportedEncodingError: If no codec is registered for the tag
    """
    try:
        return _REGISTRY[encoding]
    except KeyError:
        raise UnsupportedEncodingError(encoding) from None


def default_codec() -> ChunkCodec:
    return get_codec(_DEFAULT_ENCODING[0])


def encode_series(samples: Sequence[Sample]) -> Tuple[int, bytes]:
    """Encode with the default codec, returning ``(tag, payload)``."""
    codec = default_codec()
    return codec.encoding, codec.encode(samples)


def decode_series(encoding: int, payload: bytes) -> List[Sample]:
    return get_codec(encoding).decode(payload)
