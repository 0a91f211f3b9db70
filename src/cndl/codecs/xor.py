"""XOR chunk encoding for float time series.

Byte-aligned variant of the Gorilla scheme:

* sample count as unsigned varint;
* first sample: timestamp as zig-zag varint, value as big-endian float64;
* second sample: timestamp delta, later samples: delta-of-delta, both as
  zig-zag varints;
* every value after the first is XORed with the previous value's bits and
  written as a control byte followed by the meaningful bytes. Control
  ``0x00`` means "same value"; otherwise ``0x80 | leading << 3 | trailing``
  where ``leading``/``trailing`` count zero bytes dropped from each end.

Slowly moving prices share sign, exponent and high mantissa bits, so most
values shrink to a few bytes.
"""

import struct
from typing import List, Sequence

from cndl.codecs.base import ChunkCodec, Sample
from cndl.constants import ENCODING_XOR
from cndl.errors import ChunkDecodeError

_FLOAT = struct.Struct(">d")
_BITS = struct.Struct(">Q")
_MAX_VARINT_BYTES = 10


def _float_to_bits(value: float) -> int:
    return _BITS.unpack(_FLOAT.pack(float(value)))[0]


def _bits_to_float(bits: int) -> float:
    return _FLOAT.unpack(_BITS.pack(bits))[0]


def _zigzag(n: int) -> int:
    return n << 1 if n >= 0 else ((-n) << 1) - 1


def _unzigzag(z: int) -> int:
    return z >> 1 if not z & 1 else -((z + 1) >> 1)


def _put_uvarint(out: bytearray, n: int) -> None:
    while n >= 0x80:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)


def _put_xor(out: bytearray, xor: int) -> None:
    if xor == 0:
        out.append(0)
        return
    leading = (64 - xor.bit_length()) // 8
    trailing = ((xor & -xor).bit_length() - 1) // 8
    size = 8 - leading - trailing
    out.append(0x80 | (leading << 3) | trailing)
    out += (xor >> (8 * trailing)).to_bytes(size, "big")


class _Reader:
    """Cursor over an encoded payload."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise ChunkDecodeError(
                f"Truncated chunk: need {size} bytes at offset {self.pos}, "
                f"have {len(self.data) - self.pos}"
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def byte(self) -> int:
        return self.take(1)[0]

    def uvarint(self) -> int:
        result = 0
        for i in range(_MAX_VARINT_BYTES):
            b = self.byte()
            result |= (b & 0x7F) << (7 * i)
            if not b & 0x80:
                return result
        raise ChunkDecodeError(f"Varint too long at offset {self.pos}")

    def varint(self) -> int:
        return _unzigzag(self.uvarint())

    def xor(self) -> int:
        control = self.byte()
        if control == 0:
            return 0
        if control & 0xC0 != 0x80:
            raise ChunkDecodeError(f"Bad XOR control byte {control:#04x}")
        leading = (control >> 3) & 0x07
        trailing = control & 0x07
        size = 8 - leading - trailing
        if size < 1:
            raise ChunkDecodeError(f"Bad XOR control byte {control:#04x}")
        return int.from_bytes(self.take(size), "big") << (8 * trailing)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos


class XorChunkCodec(ChunkCodec):
    """Delta-of-delta timestamps and XOR-compressed float values."""

    encoding = ENCODING_XOR
    name = "xor"

    def encode(self, samples: Sequence[Sample]) -> bytes:
        out = bytearray()
        _put_uvarint(out, len(samples))

        prev_ts = 0
        prev_delta = 0
        prev_bits = 0
        for i, (timestamp, value) in enumerate(samples):
            timestamp = int(timestamp)
            bits = _float_to_bits(value)
            if i == 0:
                _put_uvarint(out, _zigzag(timestamp))
                out += _BITS.pack(bits)
            else:
                delta = timestamp - prev_ts
                if i == 1:
                    _put_uvarint(out, _zigzag(delta))
                else:
                    _put_uvarint(out, _zigzag(delta - prev_delta))
                prev_delta = delta
                _put_xor(out, bits ^ prev_bits)
            prev_ts = timestamp
            prev_bits = bits

        return bytes(out)

    def decode(self, payload: bytes) -> List[Sample]:
        reader = _Reader(payload)
        count = reader.uvarint()

        samples: List[Sample] = []
        prev_ts = 0
        prev_delta = 0
        prev_bits = 0
        for i in range(count):
            if i == 0:
                timestamp = reader.varint()
                bits = _BITS.unpack(reader.take(8))[0]
            else:
                if i == 1:
                    delta = reader.varint()
                else:
                    delta = prev_delta + reader.varint()
                timestamp = prev_ts + delta
                prev_delta = delta
                bits = prev_bits ^ reader.xor()
            samples.append((timestamp, _bits_to_float(bits)))
            prev_ts = timestamp
            prev_bits = bits

        if reader.remaining:
            raise ChunkDecodeError(
                f"{reader.remaining} trailing bytes after {count} samples"
            )
        return samples
