import pytest

from gifdecoder.errors import TruncatedError
from gifdecoder.reader import BitReader, ByteReader


def test_sequential_reads():
    r = ByteReader(b"\x01\x34\x12abc")
    assert r.read_u8() == 1
    assert r.read_u16le() == 0x1234
    assert r.peek() == ord("a")
    assert r.read_bytes(3) == b"abc"
    assert r.remaining == 0


def test_peek_does_not_consume():
    r = ByteReader(b"\x21")
    assert r.peek() == 0x21
    assert r.peek() == 0x21
    assert r.read_u8() == 0x21


@pytest.mark.parametrize("read", [
    lambda r: r.read_u8(),
    lambda r: r.read_u16le(),
    lambda r: r.read_bytes(2),
    lambda r: r.peek(),
])
def test_truncation(read):
    r = ByteReader(b"")
    with pytest.raises(TruncatedError):
        read(r)


def test_sub_blocks_are_concatenated():
    r = ByteReader(b"\x02ab\x03cde\x00rest")
    assert r.read_sub_blocks() == b"abcde"
    assert r.read_bytes(4) == b"rest"


def test_empty_sub_block_sequence():
    r = ByteReader(b"\x00")
    assert r.read_sub_blocks() == b""


def test_sub_blocks_without_terminator():
    r = ByteReader(b"\x02ab")
    with pytest.raises(TruncatedError):
        r.read_sub_blocks()


def test_bits_are_read_lsb_first():
    # 0b1010_1100, 0b0000_0011
    bits = BitReader(bytes([0xAC, 0x03]))
    assert bits.read(3) == 0b100
    assert bits.read(3) == 0b101
    assert bits.read(4) == 0b1110
    assert bits.read(6) == 0
    assert bits.read(1) is None


def test_twelve_bit_codes_across_bytes():
    bits = BitReader(bytes([0xFF, 0x0F, 0xF0, 0xFF]))
    assert bits.read(4) == 0xF
    assert bits.read(12) == 0x0FF
    assert bits.read(12) == 0xFF0
    assert bits.read(4) == 0xF
