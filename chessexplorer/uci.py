"""Moves in UCI notation and their compact 16-bit encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from chessexplorer.uint import ByteReader

_FILES = "abcdefgh"
_RANKS = "12345678"


class Color(Enum):
    """Side to move."""

    WHITE = "white"
    BLACK = "black"

    @property
    def char(self) -> str:
        return self.value[0]


class Role(IntEnum):
    """Piece type."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def char(self) -> str:
        return "pnbrqk"[self - 1]

    @property
    def upper_char(self) -> str:
        return self.char.upper()


_ROLE_BY_CHAR = {role.char: role for role in Role}
_ROLE_BY_UPPER = {role.upper_char: role for role in Role}


def parse_square(text: str) -> int:
    """Return the index (a1 = 0, h8 = 63) of a square name such as ``e4``."""
    if len(text) != 2 or text[0] not in _FILES or text[1] not in _RANKS:
        raise ValueError(f"invalid square: {text!r}")
    return _FILES.index(text[0]) + 8 * _RANKS.index(text[1])


def square_name(square: int) -> str:
    if not 0 <= square < 64:
        raise ValueError(f"invalid square index: {square}")
    rank, file = divmod(square, 8)
    return _FILES[file] + _RANKS[rank]


@dataclass(frozen=True)
class UciNormal:
    from_square: int
    to_square: int
    promotion: Role | None = None

    def __str__(self) -> str:
        promotion = self.promotion.char if self.promotion else ""
        return square_name(self.from_square) + square_name(self.to_square) + promotion


@dataclass(frozen=True)
class UciPut:
    role: Role
    to_square: int

    def __str__(self) -> str:
        return f"{self.role.upper_char}@{square_name(self.to_square)}"


@dataclass(frozen=True)
class UciNull:
    def __str__(self) -> str:
        return "0000"


Uci = Union[UciNormal, UciPut, UciNull]


def parse_uci(text: str) -> Uci:
    if text == "0000":
        return UciNull()
    if len(text) == 4 and text[1] == "@":
        role = _ROLE_BY_UPPER.get(text[0])
        if role is None:
            raise ValueError(f"invalid uci: {text!r}")
        return UciPut(role, parse_square(text[2:]))
    if len(text) in (4, 5):
        promotion = None
        if len(text) == 5:
            promotion = _ROLE_BY_CHAR.get(text[4])
            if promotion is None:
                raise ValueError(f"invalid uci: {text!r}")
        return UciNormal(parse_square(text[0:2]), parse_square(text[2:4]), promotion)
    raise ValueError(f"invalid uci: {text!r}")


@dataclass(frozen=True)
class RawUci:
    """A move packed into 16 bits: from, to and an optional role."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFF:
            raise ValueError(f"raw uci out of range: {self.value}")

    @staticmethod
    def from_uci(uci: Uci) -> RawUci:
        if isinstance(uci, UciNormal):
            from_square, to_square, role = uci.from_square, uci.to_square, uci.promotion
        elif isinstance(uci, UciPut):
            from_square, to_square, role = uci.to_square, uci.to_square, uci.role
        else:
            from_square, to_square, role = 0, 0, None
        return RawUci(from_square | (to_square << 6) | ((role or 0) << 12))

    def to_uci(self) -> Uci:
        from_square = self.value & 63
        to_square = (self.value >> 6) & 63
        role_bits = self.value >> 12
        role = Role(role_bits) if Role.PAWN <= role_bits <= Role.KING else None
        if from_square == to_square:
            return UciPut(role, to_square) if role is not None else UciNull()
        return UciNormal(from_square, to_square, role)

    @staticmethod
    def read(reader: ByteReader) -> RawUci:
        return RawUci(reader.read_u16_le())

    def write(self, buf: bytearray) -> None:
        buf += self.value.to_bytes(2, "little")

    def __repr__(self) -> str:
        return f"RawUci({self.to_uci()})"