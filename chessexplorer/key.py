"""Database keys: a hashed position prefix followed by a month or year."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from chessexplorer.date import Month, Year
from chessexplorer.uci import Color
from chessexplorer.user import UserId

_U128_LIMIT = 1 << 128


class Variant(Enum):
    """Chess variant of a position."""

    CHESS = "chess"
    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    CRAZYHOUSE = "crazyhouse"
    HORDE = "horde"
    KING_OF_THE_HILL = "kingOfTheHill"
    RACING_KINGS = "racingKings"
    THREE_CHECK = "threeCheck"


_VARIANT_MASKS = {
    Variant.CHESS: 0,
    Variant.ANTICHESS: 0x44782FCE075483666C81899CB65921C9,
    Variant.ATOMIC: 0x66CCBD680F655D562689CA333C5E2A42,
    Variant.CRAZYHOUSE: 0x9D04DB38CA4D923D82FF24EB9530E986,
    Variant.HORDE: 0xC29DFB1076AA15186EFFD0D34CC60737,
    Variant.KING_OF_THE_HILL: 0xDFB25D5DF41FC5961E61F6B4BA613FBE,
    Variant.RACING_KINGS: 0x8E72F94307F96710B3910CF7E5808E0D,
    Variant.THREE_CHECK: 0xD19242BAE967B40E7856BD1C71AA4220,
}


@dataclass(frozen=True)
class Key:
    """A complete database key."""

    data: bytes
    SIZE: ClassVar[int] = 14

    def __post_init__(self) -> None:
        if len(self.data) != Key.SIZE:
            raise ValueError(f"key must be {Key.SIZE} bytes, got {len(self.data)}")

    @staticmethod
    def from_bytes(data: bytes) -> Key:
        return Key(bytes(data))

    def into_bytes(self) -> bytes:
        return self.data

    def month(self) -> Month:
        """The month stored in the key; raises InvalidDate if it is none."""
        return Month.from_int(int.from_bytes(self.data[KeyPrefix.SIZE:], "big"))


@dataclass(frozen=True)
class KeyPrefix:
    """Position part of a key, before the date suffix."""

    prefix: bytes
    SIZE: ClassVar[int] = 12

    def _with_suffix(self, value: int) -> Key:
        return Key(self.prefix[: KeyPrefix.SIZE] + value.to_bytes(2, "big"))

    def with_month(self, month: Month) -> Key:
        return self._with_suffix(int(month))

    def with_year(self, year: Year) -> Key:
        return self._with_suffix(int(year))


@dataclass(frozen=True)
class KeyBuilder:
    """Starting point for keys of one database or one player's side."""

    base: int = 0

    @staticmethod
    def player(user: UserId, color: Color) -> KeyBuilder:
        digest = hashlib.sha1(
            color.char.encode("ascii") + user.as_lowercase_str().encode("utf-8")
        ).digest()
        return KeyBuilder(int.from_bytes(digest[:16], "little"))

    @staticmethod
    def masters() -> KeyBuilder:
        return KeyBuilder(0)

    @staticmethod
    def lichess() -> KeyBuilder:
        return KeyBuilder(0)

    def with_zobrist(self, variant: Variant, zobrist: int) -> KeyPrefix:
        # Zobrist hashes are not collision resistant against an adversary;
        # this is accepted for now.
        if not 0 <= zobrist < _U128_LIMIT:
            raise ValueError("zobrist hash must fit in 128 bits")
        prefix = self.base ^ zobrist ^ _VARIANT_MASKS[variant]
        return KeyPrefix(prefix.to_bytes(16, "little"))