"""Aggregated move statistics of the lichess database, by speed and rating."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar

from chessexplorer.game_id import GameId
from chessexplorer.speed import BySpeed, Speed
from chessexplorer.stats import Outcome, Stats
from chessexplorer.uci import RawUci, Uci
from chessexplorer.uint import ByteReader, read_uint, write_uint
from chessexplorer.util import midpoint, sort_by_key_and_truncate

MAX_LICHESS_GAMES = 8
MAX_TOP_GAMES = 4  # <= MAX_LICHESS_GAMES

_U16_LIMIT = 1 << 16


class RatingGroup(IntEnum):
    """Average rating bracket of the two players; values are wire codes."""

    GROUP_LOW = 0
    GROUP_1000 = 1
    GROUP_1200 = 2
    GROUP_1400 = 3
    GROUP_1600 = 4
    GROUP_1800 = 5
    GROUP_2000 = 6
    GROUP_2200 = 7
    GROUP_2500 = 8
    GROUP_2800 = 9
    GROUP_3200 = 10

    @staticmethod
    def select_avg(avg: int) -> RatingGroup:
        for bound, group in _BOUNDS:
            if avg < bound:
                return group
        return RatingGroup.GROUP_3200

    @staticmethod
    def select(mover_rating: int, opponent_rating: int) -> RatingGroup:
        return RatingGroup.select_avg(midpoint(mover_rating, opponent_rating))

    @staticmethod
    def parse(text: str) -> RatingGroup:
        digits = text[1:] if text.startswith("+") else text
        if not digits or not (digits.isascii() and digits.isdigit()):
            raise ValueError(f"invalid rating: {text!r}")
        value = int(digits)
        if value >= _U16_LIMIT:
            raise ValueError(f"rating out of range: {text!r}")
        return RatingGroup.select_avg(value)


_BOUNDS = (
    (1000, RatingGroup.GROUP_LOW),
    (1200, RatingGroup.GROUP_1000),
    (1400, RatingGroup.GROUP_1200),
    (1600, RatingGroup.GROUP_1400),
    (1800, RatingGroup.GROUP_1600),
    (2000, RatingGroup.GROUP_1800),
    (2200, RatingGroup.GROUP_2000),
    (2500, RatingGroup.GROUP_2200),
    (2800, RatingGroup.GROUP_2500),
)

_SPEEDS = list(Speed)
_SPEED_CODES = {speed: code for code, speed in enumerate(_SPEEDS, start=1)}


@dataclass
class LichessGroup:
    """Statistics and recent games of one speed and rating bracket."""

    stats: Stats = field(default_factory=Stats)
    games: list[tuple[int, GameId]] = field(default_factory=list)


@dataclass
class PreparedMove:
    uci: Uci
    stats: Stats
    game: GameId | None = None
    average_rating: int | None = None
    average_opponent_rating: int | None = None
    performance: int | None = None


@dataclass
class PreparedResponse:
    total: Stats
    moves: list[PreparedMove]
    recent_games: list[tuple[Uci, GameId]]
    top_games: list[tuple[Uci, GameId]]


_SubEntry = BySpeed[dict[RatingGroup, LichessGroup]]


def _new_sub_entry() -> _SubEntry:
    return BySpeed(*({group: LichessGroup() for group in RatingGroup} for _ in _SPEEDS))


def _read_header(reader: ByteReader) -> tuple[Speed, RatingGroup, int] | None:
    """Read a group header; None marks the end of a move's groups."""
    n = reader.read_u8()
    speed_code = n & 7
    if speed_code == 0:
        return None
    if speed_code > len(_SPEEDS):
        raise ValueError("invalid speed")
    group_code = (n >> 3) & 15
    if group_code > RatingGroup.GROUP_3200:
        raise ValueError("invalid rating group")
    num_games = 1 if n >> 7 else read_uint(reader)
    return _SPEEDS[speed_code - 1], RatingGroup(group_code), num_games


def _write_header(buf: bytearray, speed: Speed, group: RatingGroup, num_games: int) -> None:
    single_game = num_games == 1
    buf.append(_SPEED_CODES[speed] | (int(group) << 3) | (int(single_game) << 7))
    if not single_game:
        write_uint(buf, num_games)


def _write_end(buf: bytearray) -> None:
    buf.append(0)


def _limit(value: int | None) -> int:
    return sys.maxsize if value is None else value


@dataclass
class LichessEntry:
    """All moves played from one position in one month."""

    sub_entries: dict[RawUci, _SubEntry] = field(default_factory=dict)
    min_game_idx: int | None = None
    max_game_idx: int | None = None

    SIZE_HINT: ClassVar[int] = 13

    @staticmethod
    def new_single(
        uci: Uci,
        speed: Speed,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> LichessEntry:
        sub_entry = _new_sub_entry()
        group = RatingGroup.select(mover_rating, opponent_rating)
        sub_entry[speed][group] = LichessGroup(
            stats=Stats.new_single(outcome, mover_rating),
            games=[(0, game_id)],
        )
        return LichessEntry(
            sub_entries={RawUci.from_uci(uci): sub_entry},
            min_game_idx=0,
            max_game_idx=0,
        )

    def extend_from_reader(self, reader: ByteReader) -> None:
        """Merge serialized entry data; its games count as newer than ours."""
        base_game_idx = 0 if self.max_game_idx is None else self.max_game_idx + 1

        while reader.has_remaining():
            uci = RawUci.read(reader)
            sub_entry = self.sub_entries.get(uci)
            if sub_entry is None:
                sub_entry = self.sub_entries[uci] = _new_sub_entry()

            while reader.has_remaining():
                header = _read_header(reader)
                if header is None:
                    break
                speed, rating_group, num_games = header
                group = sub_entry[speed][rating_group]
                group.stats += Stats.read(reader)
                for _ in range(num_games):
                    game_idx = base_game_idx + read_uint(reader)
                    self.min_game_idx = (
                        game_idx if self.min_game_idx is None else min(self.min_game_idx, game_idx)
                    )
                    self.max_game_idx = (
                        game_idx if self.max_game_idx is None else max(self.max_game_idx, game_idx)
                    )
                    group.games.append((game_idx, GameId.read(reader)))

    def write(self, buf: bytearray) -> None:
        min_idx = self.min_game_idx or 0
        for i, (uci, sub_entry) in enumerate(self.sub_entries.items()):
            if i > 0:
                _write_end(buf)
            uci.write(buf)
            for speed, by_rating_group in sub_entry.items():
                for rating_group, group in by_rating_group.items():
                    if group.stats.is_empty():
                        continue
                    num_games = min(len(group.games), MAX_LICHESS_GAMES)
                    _write_header(buf, speed, rating_group, num_games)
                    group.stats.write(buf)
                    for game_idx, game in group.games[len(group.games) - num_games:]:
                        write_uint(buf, game_idx - min_idx)
                        game.write(buf)

    def _selected_groups(self, sub_entry, speeds, ratings):
        for speed, by_rating_group in sub_entry.items():
            if speeds is not None and speed not in speeds:
                continue
            for rating_group, group in by_rating_group.items():
                if ratings is None or rating_group in ratings:
                    yield speed, rating_group, group

    def total(self, speeds=None, ratings=None) -> Stats:
        """Sum of statistics over the selected speeds and rating groups."""
        stats = Stats()
        for sub_entry in self.sub_entries.values():
            for _, _, group in self._selected_groups(sub_entry, speeds, ratings):
                stats += group.stats
        return stats

    def prepare(
        self,
        speeds=None,
        ratings=None,
        top_group=None,
        moves=None,
        recent_games=None,
        top_games=None,
    ) -> PreparedResponse:
        """Build a query response; limits of None mean no limit."""
        moves_limit = _limit(moves)
        recent_limit = _limit(recent_games)
        top_limit = _limit(top_games)
        games_wanted = recent_limit > 0 or top_limit > 0

        total = Stats()
        prepared_moves: list[PreparedMove] = []
        recent: list[tuple[RatingGroup, Speed, int, Uci, GameId]] = []

        for raw_uci, sub_entry in self.sub_entries.items():
            uci = raw_uci.to_uci()
            latest_game: tuple[int, GameId] | None = None
            stats = Stats()

            for speed, rating_group, group in self._selected_groups(sub_entry, speeds, ratings):
                stats += group.stats
                for idx, game in group.games:
                    if latest_game is None or latest_game[0] < idx:
                        latest_game = (idx, game)
                if games_wanted:
                    recent.extend(
                        (rating_group, speed, idx, uci, game) for idx, game in group.games
                    )

            if not stats.is_empty():
                total += stats
                prepared_moves.append(
                    PreparedMove(
                        uci=uci,
                        stats=stats,
                        game=latest_game[1] if latest_game and stats.is_single() else None,
                        average_rating=stats.average_rating(),
                    )
                )

        sort_by_key_and_truncate(prepared_moves, moves_limit, lambda m: -m.stats.total())

        if top_group is not None:
            top = [
                entry
                for entry in recent
                if entry[0] >= top_group and entry[1] is not Speed.CORRESPONDENCE
            ]
            sort_by_key_and_truncate(top, MAX_TOP_GAMES * 2, lambda e: (-e[0], -e[2]))
            sort_by_key_and_truncate(top, MAX_TOP_GAMES, lambda e: -e[2])
            top_ids = {entry[4] for entry in top}
            recent = [entry for entry in recent if entry[4] not in top_ids]
        else:
            top = []
        valid_recent_games = MAX_LICHESS_GAMES - len(top)
        top = top[:top_limit]

        sort_by_key_and_truncate(
            recent, min(valid_recent_games, recent_limit), lambda e: -e[2]
        )

        return PreparedResponse(
            total=total,
            moves=prepared_moves,
            recent_games=[(uci, game) for _, _, _, uci, game in recent],
            top_games=[(uci, game) for _, _, _, uci, game in top],
        )