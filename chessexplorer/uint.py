"""Variable-length unsigned integers and a sequential byte reader."""

from __future__ import annotations

_U64_LIMIT = 1 << 64


class ByteReader:
    """Reads fixed and variable size values from the front of a byte string."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def has_remaining(self) -> bool:
        return self._pos < len(self._data)

    def read_bytes(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        end = self._pos + size
        if end > len(self._data):
            raise EOFError(f"need {size} bytes, only {len(self)} remaining")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16_le(self) -> int:
        return int.from_bytes(self.read_bytes(2), "little")

    def read_u16_be(self) -> int:
        return int.from_bytes(self.read_bytes(2), "big")

    def read_uint_le(self, size: int) -> int:
        return int.from_bytes(self.read_bytes(size), "little")


def read_uint(reader: ByteReader) -> int:
    """Read a little-endian base-128 unsigned integer."""
    n = 0
    shift = 0
    while True:
        if shift >= 64:
            raise ValueError("variable-length integer too long")
        byte = reader.read_u8()
        n |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return n
        shift += 7


def write_uint(buf: bytearray, n: int) -> None:
    """Append ``n`` as a little-endian base-128 unsigned integer."""
    if not 0 <= n < _U64_LIMIT:
        raise ValueError(f"{n} does not fit in an unsigned 64-bit integer")
    while n > 0x7F:
        buf.append((n & 0x7F) | 0x80)
        n >>= 7
    buf.append(n)