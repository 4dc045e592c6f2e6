"""Stored information about an indexed game."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from chessexplorer.date import Month
from chessexplorer.mode import Mode
from chessexplorer.speed import Speed
from chessexplorer.stats import Outcome
from chessexplorer.uci import Color
from chessexplorer.uint import ByteReader, read_uint, write_uint

_SPEEDS = list(Speed)
_SPEED_CODES = {speed: code for code, speed in enumerate(_SPEEDS)}
_OUTCOMES = [Outcome(Color.BLACK), Outcome(Color.WHITE), Outcome(None)]
_OUTCOME_CODES = {outcome: code for code, outcome in enumerate(_OUTCOMES)}


@dataclass
class GamePlayer:
    """Name and rating of one side of a game."""

    name: str
    rating: int

    def write(self, buf: bytearray) -> None:
        encoded = self.name.encode("utf-8")
        write_uint(buf, len(encoded))
        buf += encoded
        buf += self.rating.to_bytes(2, "little")

    @staticmethod
    def read(reader: ByteReader) -> GamePlayer:
        length = read_uint(reader)
        name = reader.read_bytes(length).decode("utf-8")
        return GamePlayer(name, reader.read_u16_le())


@dataclass
class LichessGame:
    """A game with the flags recording which indexes contain it."""

    outcome: Outcome
    speed: Speed
    mode: Mode
    players: dict[Color, GamePlayer]
    month: Month
    indexed_player: dict[Color, bool]
    indexed_lichess: bool

    SIZE_HINT: ClassVar[int] = 1 + 2 * (1 + 20 + 2) + 2

    def write(self, buf: bytearray) -> None:
        buf.append(
            _SPEED_CODES[self.speed]
            | (_OUTCOME_CODES[self.outcome] << 3)
            | (int(self.mode.is_rated()) << 5)
            | (int(self.indexed_player[Color.WHITE]) << 6)
            | (int(self.indexed_player[Color.BLACK]) << 7)
        )
        self.players[Color.WHITE].write(buf)
        self.players[Color.BLACK].write(buf)
        buf += int(self.month).to_bytes(2, "little")
        buf.append(int(self.indexed_lichess))

    @staticmethod
    def read(reader: ByteReader) -> LichessGame:
        byte = reader.read_u8()
        speed_code = byte & 7
        if speed_code >= len(_SPEEDS):
            raise ValueError("invalid speed")
        outcome_code = (byte >> 3) & 3
        if outcome_code >= len(_OUTCOMES):
            raise ValueError("invalid outcome")
        indexed_player = {
            Color.WHITE: bool((byte >> 6) & 1),
            Color.BLACK: bool((byte >> 7) & 1),
        }
        white = GamePlayer.read(reader)
        black = GamePlayer.read(reader)
        month = Month.from_int(reader.read_u16_le())
        indexed_lichess = reader.read_u8() != 0
        return LichessGame(
            outcome=_OUTCOMES[outcome_code],
            speed=_SPEEDS[speed_code],
            mode=Mode.from_rated(bool((byte >> 5) & 1)),
            players={Color.WHITE: white, Color.BLACK: black},
            month=month,
            indexed_player=indexed_player,
            indexed_lichess=indexed_lichess,
        )