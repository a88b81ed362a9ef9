"""Byte, sub-block and bit level access to GIF data."""
from __future__ import annotations

from typing import Optional

from .errors import TruncatedError


class ByteReader:
    """Forward-only reader over an in-memory GIF datastream.

    The whole input is read up front; the only lookahead offered is
    `peek()` of a single byte.
    """

    def __init__(self, data: bytes):
        self._data = memoryview(bytes(data))
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.pos

    def read_bytes(self, n: int) -> bytes:
        if self.pos + n > len(self._data):
            raise TruncatedError(
                f"Unexpected EOF while reading {n} bytes at offset {self.pos}")
        b = self._data[self.pos:self.pos + n].tobytes()
        self.pos += n
        return b

    def read_u8(self) -> int:
        if self.pos >= len(self._data):
            raise TruncatedError(f"Unexpected EOF while reading u8 at offset {self.pos}")
        b = self._data[self.pos]
        self.pos += 1
        return b

    def read_u16le(self) -> int:
        b = self.read_bytes(2)
        return b[0] | (b[1] << 8)

    def peek(self) -> int:
        if self.pos >= len(self._data):
            raise TruncatedError(f"Unexpected EOF while peeking at offset {self.pos}")
        return self._data[self.pos]

    def read_sub_blocks(self) -> bytes:
        """Concatenate data sub-blocks up to (and consuming) the zero-length terminator."""
        out = bytearray()
        while True:
            n = self.read_u8()
            if n == 0:
                return bytes(out)
            out += self.read_bytes(n)


class BitReader:
    """LSB-first bit reader used for LZW codes."""

    def __init__(self, data: bytes):
        self._data = data
        self._total_bits = len(data) * 8
        self.bit_pos = 0

    def read(self, n: int) -> Optional[int]:
        # None once fewer than n bits remain
        if self.bit_pos + n > self._total_bits:
            return None
        byte_index = self.bit_pos >> 3
        shift = self.bit_pos & 7
        # a code of up to 12 bits spans at most 3 bytes
        chunk = int.from_bytes(self._data[byte_index:byte_index + 3], "little")
        self.bit_pos += n
        return (chunk >> shift) & ((1 << n) - 1)
