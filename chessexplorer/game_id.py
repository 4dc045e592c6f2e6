"""Eight character base-62 game identifiers."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import ClassVar

from chessexplorer.uint import ByteReader

_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
_DIGITS = {char: value for value, char in enumerate(_ALPHABET)}
_LENGTH = 8
_LIMIT = 62**_LENGTH


class InvalidGameId(ValueError):
    """Raised for text or bytes that do not form a game id."""

    def __init__(self, message: str = "invalid game id") -> None:
        super().__init__(message)


@dataclass(frozen=True, order=True)
class GameId:
    """A game id, stored as its numeric value."""

    value: int
    SIZE: ClassVar[int] = 6

    def __post_init__(self) -> None:
        if not 0 <= self.value < _LIMIT:
            raise InvalidGameId()

    @staticmethod
    def parse(text: str) -> GameId:
        if len(text) != _LENGTH:
            raise InvalidGameId()
        n = 0
        for char in reversed(text):
            digit = _DIGITS.get(char)
            if digit is None:
                raise InvalidGameId()
            n = n * 62 + digit
        return GameId(n)

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(self.SIZE, "little")

    def write(self, buf: bytearray) -> None:
        buf += self.to_bytes()

    @staticmethod
    def read(reader: ByteReader) -> GameId:
        return GameId(reader.read_uint_le(GameId.SIZE))

    def __str__(self) -> str:
        chars = []
        n = self.value
        for _ in range(_LENGTH):
            n, rem = divmod(n, 62)
            chars.append(_ALPHABET[rem])
        return "".join(chars)

    def __repr__(self) -> str:
        return f"GameId({self})"