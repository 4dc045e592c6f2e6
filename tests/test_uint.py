import pytest
from hypothesis import given
from hypothesis import strategies as st

from chessexplorer.uint import ByteReader, read_uint, write_uint

U64 = st.integers(min_value=0, max_value=2**64 - 1)


@given(U64)
def test_uint_roundtrip(n):
    buf = bytearray()
    write_uint(buf, n)
    reader = ByteReader(buf)
    assert read_uint(reader) == n
    assert not reader.has_remaining()


@given(U64)
def test_continuation_bits(n):
    buf = bytearray()
    write_uint(buf, n)
    assert all(byte & 0x80 for byte in buf[:-1])
    assert buf[-1] < 0x80


@pytest.mark.parametrize("n", [0, 1, 127])
def test_small_values_are_one_byte(n):
    buf = bytearray()
    write_uint(buf, n)
    assert bytes(buf) == bytes([n])


def test_first_two_byte_value():
    buf = bytearray()
    write_uint(buf, 128)
    assert bytes(buf) == b"\x80\x01"


@pytest.mark.parametrize("n", [-1, 2**64])
def test_write_out_of_range(n):
    with pytest.raises(ValueError):
        write_uint(bytearray(), n)


def test_truncated_uint():
    with pytest.raises(EOFError):
        read_uint(ByteReader(b"\x80"))


def test_sequence_of_uints():
    values = [0, 300, 2**63, 5]
    buf = bytearray()
    for value in values:
        write_uint(buf, value)
    reader = ByteReader(buf)
    assert [read_uint(reader) for _ in values] == values
    assert not reader.has_remaining()


def test_reader_fixed_width():
    data = (
        bytes([7])
        + (0x1234).to_bytes(2, "little")
        + (0x1234).to_bytes(2, "big")
        + (0xABCDEF).to_bytes(3, "little")
        + b"xy"
    )
    reader = ByteReader(data)
    assert reader.read_u8() == 7
    assert reader.read_u16_le() == 0x1234
    assert reader.read_u16_be() == 0x1234
    assert reader.read_uint_le(3) == 0xABCDEF
    assert reader.has_remaining()
    assert reader.read_bytes(2) == b"xy"
    assert not reader.has_remaining()


def test_reader_past_end():
    reader = ByteReader(b"\x01")
    with pytest.raises(EOFError):
        reader.read_u16_le()