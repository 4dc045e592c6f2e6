"""Per-player move statistics and the indexing status of a player."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import ClassVar

from chessexplorer.game_id import GameId
from chessexplorer.lichess import LichessGroup, PreparedMove, PreparedResponse
from chessexplorer.mode import ByMode, Mode
from chessexplorer.speed import BySpeed, Speed
from chessexplorer.stats import Outcome, Stats
from chessexplorer.uci import Color, RawUci, Uci
from chessexplorer.uint import ByteReader, read_uint, write_uint

MAX_PLAYER_GAMES = 8  # must fit into 4 bits

_SPEEDS = list(Speed)
_SPEED_CODES = {speed: code for code, speed in enumerate(_SPEEDS, start=1)}

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_REVISIT_COOLDOWN = timedelta(hours=24)
_INDEX_COOLDOWN = timedelta(minutes=2)

_SubEntry = BySpeed[ByMode[LichessGroup]]


def _new_sub_entry() -> _SubEntry:
    return BySpeed(*(ByMode(LichessGroup(), LichessGroup()) for _ in _SPEEDS))


def _read_header(reader: ByteReader) -> tuple[Speed, Mode, int] | None:
    """Read a group header; None marks the end of a move's groups."""
    n = reader.read_u8()
    speed_code = n & 7
    if speed_code == 0:
        return None
    if speed_code > len(_SPEEDS):
        raise ValueError("invalid player header")
    return _SPEEDS[speed_code - 1], Mode.from_rated(bool((n >> 3) & 1)), n >> 4


def _write_header(buf: bytearray, speed: Speed, mode: Mode, num_games: int) -> None:
    if not 0 <= num_games <= 15:
        raise ValueError(f"too many games for a header: {num_games}")
    buf.append(_SPEED_CODES[speed] | (int(mode.is_rated()) << 3) | (num_games << 4))


def _write_end(buf: bytearray) -> None:
    buf.append(0)


def _limit(value: int | None) -> int:
    return sys.maxsize if value is None else value


@dataclass
class PlayerEntry:
    """Moves a player made from one position in one month."""

    sub_entries: dict[RawUci, _SubEntry] = field(default_factory=dict)
    min_game_idx: int | None = None
    max_game_idx: int | None = None

    SIZE_HINT: ClassVar[int] = 13

    @staticmethod
    def new_single(
        uci: Uci,
        speed: Speed,
        mode: Mode,
        game_id: GameId,
        outcome: Outcome,
        opponent_rating: int,
    ) -> PlayerEntry:
        sub_entry = _new_sub_entry()
        sub_entry[speed][mode] = LichessGroup(
            stats=Stats.new_single(outcome, opponent_rating),
            games=[(0, game_id)],
        )
        return PlayerEntry(
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
                speed, mode, num_games = header
                group = sub_entry[speed][mode]
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
            for speed, by_mode in sub_entry.items():
                for mode, group in by_mode.items():
                    if group.stats.is_empty():
                        continue
                    games = group.games[-MAX_PLAYER_GAMES:]
                    _write_header(buf, speed, mode, len(games))
                    group.stats.write(buf)
                    for game_idx, game in games:
                        write_uint(buf, game_idx - min_idx)
                        game.write(buf)

    def prepare(
        self,
        color: Color,
        speeds=None,
        modes=None,
        moves=None,
        recent_games=None,
    ) -> PreparedResponse:
        """Build a query response from ``color``'s view; limits of None mean no limit."""
        total = Stats()
        prepared_moves: list[PreparedMove] = []
        recent: list[tuple[int, RawUci, GameId]] = []

        for raw_uci, sub_entry in self.sub_entries.items():
            latest_game: tuple[int, GameId] | None = None
            stats = Stats()

            for speed, by_mode in sub_entry.items():
                if speeds is not None and speed not in speeds:
                    continue
                for mode, group in by_mode.items():
                    if modes is not None and mode not in modes:
                        continue
                    stats += group.stats
                    for idx, game in group.games:
                        if latest_game is None or latest_game[0] < idx:
                            latest_game = (idx, game)
                    recent.extend((idx, raw_uci, game) for idx, game in group.games)

            if not stats.is_empty():
                total += stats
                prepared_moves.append(
                    PreparedMove(
                        uci=raw_uci.to_uci(),
                        stats=stats,
                        game=latest_game[1] if latest_game and stats.is_single() else None,
                        average_opponent_rating=stats.average_rating(),
                        performance=stats.performance(color),
                    )
                )

        from chessexplorer.util import sort_by_key_and_truncate

        sort_by_key_and_truncate(prepared_moves, _limit(moves), lambda m: -m.stats.total())
        sort_by_key_and_truncate(
            recent, min(_limit(recent_games), MAX_PLAYER_GAMES), lambda e: -e[0]
        )

        return PreparedResponse(
            total=total,
            moves=prepared_moves,
            recent_games=[(raw_uci.to_uci(), game) for _, raw_uci, game in recent],
            top_games=[],
        )


class IndexRunKind(Enum):
    INDEX = "index"
    REVISIT = "revisit"


@dataclass(frozen=True)
class IndexRun:
    """A planned pass over a player's games, by creation time."""

    kind: IndexRunKind
    created_at: int

    @staticmethod
    def index_after(after: int) -> IndexRun:
        return IndexRun(IndexRunKind.INDEX, after)

    @staticmethod
    def revisit_since(since: int) -> IndexRun:
        return IndexRun(IndexRunKind.REVISIT, since)

    def since(self) -> int:
        if self.kind is IndexRunKind.INDEX:
            # One millisecond later avoids overlap, but may miss games created
            # in the same millisecond as the previous run happened.
            return min(self.created_at + 1, (1 << 64) - 1)
        return self.created_at

    def __str__(self) -> str:
        if self.kind is IndexRunKind.INDEX:
            return f"created_at > {self.created_at}"
        return f"created_at >= {self.created_at}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _seconds_since_epoch(moment: datetime) -> int:
    elapsed = moment - EPOCH
    if elapsed < timedelta(0):
        raise ValueError("time before the unix epoch")
    return elapsed // timedelta(seconds=1)


@dataclass
class PlayerStatus:
    """When a player's games were last indexed and revisited."""

    latest_created_at: int = 0
    revisit_ongoing_created_at: int | None = None
    indexed_at: datetime = EPOCH
    revisited_at: datetime = EPOCH

    SIZE_HINT: ClassVar[int] = 3 * 8

    def maybe_start_index_run(self) -> IndexRun | None:
        return self._maybe_revisit_ongoing() or self._maybe_index()

    def _maybe_revisit_ongoing(self) -> IndexRun | None:
        elapsed = max(_now() - self.revisited_at, timedelta(0))
        if elapsed > _REVISIT_COOLDOWN and self.revisit_ongoing_created_at is not None:
            return IndexRun.revisit_since(self.revisit_ongoing_created_at)
        return None

    def _maybe_index(self) -> IndexRun | None:
        if _now() - self.indexed_at > _INDEX_COOLDOWN:
            return IndexRun.index_after(self.latest_created_at)
        return None

    def finish_index_run(self, run: IndexRun) -> None:
        self.indexed_at = _now()
        if run.kind is IndexRunKind.REVISIT:
            self.revisited_at = self.indexed_at

    @staticmethod
    def read(reader: ByteReader) -> PlayerStatus:
        latest_created_at = read_uint(reader)
        revisit = read_uint(reader)
        indexed_at = EPOCH + timedelta(seconds=read_uint(reader))
        revisited_at = EPOCH + timedelta(seconds=read_uint(reader))
        return PlayerStatus(
            latest_created_at=latest_created_at,
            revisit_ongoing_created_at=revisit or None,
            indexed_at=indexed_at,
            revisited_at=revisited_at,
        )

    def write(self, buf: bytearray) -> None:
        write_uint(buf, self.latest_created_at)
        write_uint(buf, self.revisit_ongoing_created_at or 0)
        write_uint(buf, _seconds_since_epoch(self.indexed_at))
        write_uint(buf, _seconds_since_epoch(self.revisited_at))