"""Unit tests for the XOR chunk codec and codec registry."""

import math

import pytest

from cndl.codecs import (
    ChunkCodec,
    XorChunkCodec,
    decode_series,
    encode_series,
    get_codec,
    register_codec,
)
from cndl.constants import ENCODING_XOR
from cndl.errors import ChunkDecodeError, UnsupportedEncodingError
from cndl.synthetic import gbm_series


@pytest.fixture
def codec() -> XorChunkCodec:
    return XorChunkCodec()


class TestXorCodec:
    """Test encoding and decoding samples."""

    def test_roundtrip(self, codec: XorChunkCodec, sample_series: list) -> None:
        assert codec.decode(codec.encode(sample_series)) == sample_series

    def test_empty(self, codec: XorChunkCodec) -> None:
        assert codec.encode([]) == b"\x00"
        assert codec.decode(b"\x00") == []

    def test_single_sample(self, codec: XorChunkCodec) -> None:
        assert codec.decode(codec.encode([(-5, 1.5)])) == [(-5, 1.5)]

    def test_irregular_and_negative_timestamps(self, codec: XorChunkCodec) -> None:
        samples = [(-100, 0.0), (-99, -0.0), (50, 1e308), (49, -1e-308), (10**12, 3.0)]
        decoded = codec.decode(codec.encode(samples))
        assert [t for t, _ in decoded] == [t for t, _ in samples]
        assert [math.copysign(1, v) for _, v in decoded] == [
            math.copysign(1, v) for _, v in samples
        ]
        assert [v for _, v in decoded] == [v for _, v in samples]

    def test_special_floats(self, codec: XorChunkCodec) -> None:
        samples = [(1, math.inf), (2, -math.inf), (3, math.nan), (4, 1.0)]
        decoded = codec.decode(codec.encode(samples))
        assert decoded[0][1] == math.inf
        assert decoded[1][1] == -math.inf
        assert math.isnan(decoded[2][1])
        assert decoded[3] == (4, 1.0)

    def test_repeated_values_compress(self, codec: XorChunkCodec) -> None:
        """Test that constant series cost about two bytes per sample."""
        samples = [(i, 42.0) for i in range(1000)]
        assert len(codec.encode(samples)) < 1000 * 2 + 16

    def test_gbm_series_smaller_than_raw(self, codec: XorChunkCodec) -> None:
        samples = gbm_series(steps=2000)
        payload = codec.encode(samples)
        assert codec.decode(payload) == samples
        assert len(payload) < 2000 * 16

    def test_truncated_payload(self, codec: XorChunkCodec, sample_series: list) -> None:
        payload = codec.encode(sample_series)
        for cut in range(len(payload)):
            with pytest.raises(ChunkDecodeError):
                codec.decode(payload[:cut])

    def test_trailing_bytes(self, codec: XorChunkCodec, sample_series: list) -> None:
        with pytest.raises(ChunkDecodeError, match="trailing"):
            codec.decode(codec.encode(sample_series) + b"\x00")

    def test_bad_control_byte(self, codec: XorChunkCodec) -> None:
        # count=2, ts=0, raw value, delta=1, control 0x40
        payload = b"\x02\x00" + b"\x00" * 8 + b"\x02\x40"
        with pytest.raises(ChunkDecodeError, match="control"):
            codec.decode(payload)


class TestRegistry:
    """Test codec lookup by encoding tag."""

    def test_xor_is_registered(self) -> None:
        assert isinstance(get_codec(ENCODING_XOR), XorChunkCodec)

    def test_unknown_tag(self) -> None:
        with pytest.raises(UnsupportedEncodingError):
            get_codec(99)

    def test_encode_decode_series(self, sample_series: list) -> None:
        tag, payload = encode_series(sample_series)
        assert tag == ENCODING_XOR
        assert decode_series(tag, payload) == sample_series

    def test_duplicate_registration_rejected(self) -> None:
        with pytest.raises(ValueError, match="already registered"):
            register_codec(XorChunkCodec())

    def test_tag_must_fit_in_byte(self) -> None:
        class Wide(ChunkCodec):
            encoding = 300
            name = "wide"

            def encode(self, samples):
                return b""

            def decode(self, payload):
                return []

        with pytest.raises(ValueError, match="one byte"):
            register_codec(Wide())
