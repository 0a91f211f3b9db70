"""Time-series chunk codecs keyed by envelope encoding tag."""

from cndl.codecs.base import (
    ChunkCodec,
    Sample,
    decode_series,
    default_codec,
    encode_series,
    get_codec,
    register_codec,
)
from cndl.codecs.xor import XorChunkCodec

register_codec(XorChunkCodec(), default=True)

__all__ = [
    "ChunkCodec",
    "Sample",
    "XorChunkCodec",
    "decode_series",
    "default_codec",
    "encode_series",
    "get_codec",
    "register_codec",
]
