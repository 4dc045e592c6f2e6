"""Win, draw and loss counts with their rating sum."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from chessexplorer.uci import Color
from chessexplorer.uint import ByteReader, read_uint, write_uint

_U16_MAX = 0xFFFF
_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1

# Rating differences by percentage score, FIDE handbook table B.02.
_DELTAS = (
    -800.0, -677.0, -589.0, -538.0, -501.0, -470.0, -444.0, -422.0, -401.0, -383.0, -366.0,
    -351.0, -336.0, -322.0, -309.0, -296.0, -284.0, -273.0, -262.0, -251.0, -240.0, -230.0,
    -220.0, -211.0, -202.0, -193.0, -184.0, -175.0, -166.0, -158.0, -149.0, -141.0, -133.0,
    -125.0, -117.0, -110.0, -102.0, -95.0, -87.0, -80.0, -72.0, -65.0, -57.0, -50.0, -43.0,
    -36.0, -29.0, -21.0, -14.0, -7.0, 0.0, 7.0, 14.0, 21.0, 29.0, 36.0, 43.0, 50.0, 57.0,
    65.0, 72.0, 80.0, 87.0, 95.0, 102.0, 110.0, 117.0, 125.0, 133.0, 141.0, 149.0, 158.0,
    166.0, 175.0, 184.0, 193.0, 202.0, 211.0, 220.0, 230.0, 240.0, 251.0, 262.0, 273.0,
    284.0, 296.0, 309.0, 322.0, 336.0, 351.0, 366.0, 383.0, 401.0, 422.0, 444.0, 470.0,
    501.0, 538.0, 589.0, 677.0, 800.0,
)


def _round_half_away(value: float) -> int:
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Outcome:
    """Result of a game: a winner, or a draw when ``winner`` is None."""

    winner: Color | None = None

    @staticmethod
    def from_winner(winner: Color | None) -> Outcome:
        return Outcome(winner)

    def __str__(self) -> str:
        if self.winner is Color.WHITE:
            return "1-0"
        if self.winner is Color.BLACK:
            return "0-1"
        return "1/2-1/2"


@dataclass
class Stats:
    """Game counts by result, plus the sum of the relevant ratings."""

    rating_sum: int = 0
    white: int = 0
    draws: int = 0
    black: int = 0

    @staticmethod
    def new_single(outcome: Outcome, rating: int) -> Stats:
        return Stats(
            rating_sum=rating,
            white=int(outcome.winner is Color.WHITE),
            draws=int(outcome.winner is None),
            black=int(outcome.winner is Color.BLACK),
        )

    def __iadd__(self, other: Stats) -> Stats:
        self.rating_sum += other.rating_sum
        self.white += other.white
        self.draws += other.draws
        self.black += other.black
        return self

    def __add__(self, other: Stats) -> Stats:
        result = Stats(self.rating_sum, self.white, self.draws, self.black)
        result += other
        return result

    def __sub__(self, other: Stats) -> Stats:
        result = Stats(
            rating_sum=self.rating_sum - other.rating_sum,
            white=self.white - other.white,
            draws=self.draws - other.draws,
            black=self.black - other.black,
        )
        if min(result.rating_sum, result.white, result.draws, result.black) < 0:
            raise ValueError("stats subtraction underflow")
        return result

    def total(self) -> int:
        return self.white + self.draws + self.black

    def is_empty(self) -> bool:
        return self.white == 0 and self.draws == 0 and self.black == 0

    def is_single(self) -> bool:
        return self.total() == 1

    def _average_rating_float(self) -> float | None:
        total = self.total()
        return self.rating_sum / total if total > 0 else None

    def average_rating(self) -> int | None:
        avg = self._average_rating_float()
        if avg is None:
            return None
        return min(max(_round_half_away(avg), 0), _U16_MAX)

    def performance(self, color: Color) -> int | None:
        """Performance rating of ``color`` against the average opponent rating."""
        avg_opponent_rating = self._average_rating_float()
        if avg_opponent_rating is None:
            return None
        wins = self.white if color is Color.WHITE else self.black
        score = 100 * wins + 50 * self.draws
        p = score / self.total()
        idx = int(p)
        fract = p - idx
        upper = _DELTAS[idx + 1] if idx + 1 < len(_DELTAS) else 800.0
        value = avg_opponent_rating + _DELTAS[idx] * (1.0 - fract) + upper * fract
        return min(max(_round_half_away(value), _I32_MIN), _I32_MAX)

    @staticmethod
    def read(reader: ByteReader) -> Stats:
        rating_sum = read_uint(reader)
        tag = read_uint(reader)
        if tag == 0:
            return Stats(rating_sum, white=1)
        if tag == 1:
            return Stats(rating_sum, black=1)
        if tag == 2:
            return Stats(rating_sum, draws=1)
        draws = read_uint(reader)
        black = read_uint(reader)
        return Stats(rating_sum, white=tag - 3, draws=draws, black=black)

    def write(self, buf: bytearray) -> None:
        write_uint(buf, self.rating_sum)
        counts = (self.white, self.draws, self.black)
        if counts == (1, 0, 0):
            write_uint(buf, 0)
        elif counts == (0, 0, 1):
            write_uint(buf, 1)
        elif counts == (0, 1, 0):
            write_uint(buf, 2)
        else:
            write_uint(buf, self.white + 3)
            write_uint(buf, self.draws)
            write_uint(buf, self.black)