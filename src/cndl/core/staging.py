"""Staging of time-series chunks for the next commit.

Staging a symbol encodes its samples, wraps them in a chunk envelope,
stores the frame as an object and points ``fetch/<symbol>`` at it. The
next commit picks up every ref in that namespace.
"""

from typing import Dict, List, NamedTuple, Sequence

from cndl.codecs import Sample, decode_series, encode_series
from cndl.constants import STAGING_NAMESPACE
from cndl.core.envelope import unwrap, wrap
from cndl.core.repository import Repository
from cndl.errors import InvalidRefNameError
from cndl.logging_config import get_logger

logger = get_logger(__name__)


class Chunk(NamedTuple):
    """A stored chunk decoded back into samples."""

    object_hash: str
    encoding: int
    frame_size: int
    samples: List[Sample]


def staging_ref(symbol: str) -> str:
    """Ref name that stages ``symbol``.

    Raises:
        InvalidRefNameError: If the symbol is empty
    """
    symbol = symbol.strip()
    if not symbol:
        raise InvalidRefNameError("Symbol must not be empty")
    return f"{STAGING_NAMESPACE}/{symbol}"


class StagingManager:
    """Manager for staged symbols.

    Attributes:
        repo: Repository the chunks and refs are written to
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def stage_series(self, symbol: str, samples: Sequence[Sample]) -> str:
        """Encode ``samples`` with the default codec and stage them.

        Returns:
            Hash of the stored envelope
        """
        encoding, payload = encode_series(samples)
        object_hash = self.stage_bytes(symbol, encoding, payload)
        logger.debug(
            "series_staged", symbol=symbol, samples=len(samples), hash=object_hash
        )
        return object_hash

    def stage_bytes(self, symbol: str, encoding: int, payload: bytes) -> str:
        """Wrap an already-encoded payload, store it and stage it."""
        ref_name = staging_ref(symbol)
        object_hash = self.repo.objects.put(wrap(encoding, payload))
        self.repo.refs.write_ref(ref_name, object_hash)
        return object_hash

    def staged(self) -> Dict[str, str]:
        """Return SYMBOL -> hash for every staged symbol."""
        return self.repo.commits.staged()

    def unstage(self, symbol: str) -> None:
        """Drop the staging ref for ``symbol``.

        Raises:
            RefNotFoundError: If the symbol is not staged
        """
        self.repo.refs.delete_ref(staging_ref(symbol))

    def load(self, hash_or_prefix: str) -> Chunk:
        """Resolve, read, validate and decode a stored chunk.

        Raises:
            PrefixTooShortError: If the prefix is shorter than 3 characters
            AmbiguousPrefixError: If the prefix matches several objects
            ObjectNotFoundError: If nothing matches
            EnvelopeError: If the frame fails validation
            ChunkDecodeError: If the payload cannot be decoded
        """
        object_hash = self.repo.objects.resolve(hash_or_prefix)
        frame = self.repo.objects.get(object_hash)
        envelope = unwrap(frame)
        samples = decode_series(envelope.encoding, envelope.payload)
        return Chunk(
            object_hash=object_hash,
            encoding=envelope.encoding,
            frame_size=len(frame),
            samples=samples,
        )
