"""Move statistics and top games of the masters database."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from chessexplorer.date import LaxDate
from chessexplorer.game_id import GameId
from chessexplorer.lichess import PreparedMove, PreparedResponse
from chessexplorer.lichess_game import GamePlayer
from chessexplorer.stats import Outcome, Stats
from chessexplorer.uci import Color, RawUci, Uci, parse_uci
from chessexplorer.uint import ByteReader
from chessexplorer.util import sort_by_key_and_truncate

MAX_MASTERS_GAMES = 15

_U16_MAX = 0xFFFF
_U8_MAX = 0xFF


def _limit(value: int | None) -> int:
    return sys.maxsize if value is None else value


def _player_from_dict(data: Mapping[str, Any]) -> GamePlayer:
    try:
        name = data["name"]
        rating = data["rating"]
    except KeyError as err:
        raise ValueError(f"missing player field: {err.args[0]}") from None
    if not isinstance(name, str):
        raise ValueError("player name must be a string")
    if not isinstance(rating, int) or isinstance(rating, bool) or not 0 <= rating <= _U16_MAX:
        raise ValueError(f"invalid player rating: {rating!r}")
    return GamePlayer(name, rating)


def _parse_winner(value: str | None) -> Color | None:
    if value is None:
        return None
    try:
        return Color(value)
    except ValueError:
        raise ValueError(f"invalid winner: {value!r}") from None


def _parse_moves(text: str) -> list[Uci]:
    if not text:
        return []
    return [parse_uci(token) for token in text.split(" ")]


@dataclass
class MastersGame:
    """An over-the-board game between strong players."""

    event: str
    site: str
    date: LaxDate
    round: str
    players: dict[Color, GamePlayer]
    winner: Color | None
    moves: list[Uci] = field(default_factory=list)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> MastersGame:
        try:
            return MastersGame(
                event=str(data["event"]),
                site=str(data["site"]),
                date=LaxDate.parse(data["date"]),
                round=str(data["round"]),
                players={
                    Color.WHITE: _player_from_dict(data["white"]),
                    Color.BLACK: _player_from_dict(data["black"]),
                },
                winner=_parse_winner(data.get("winner")),
                moves=_parse_moves(data["moves"]),
            )
        except KeyError as err:
            raise ValueError(f"missing game field: {err.args[0]}") from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "site": self.site,
            "date": str(self.date),
            "round": self.round,
            "white": {
                "name": self.players[Color.WHITE].name,
                "rating": self.players[Color.WHITE].rating,
            },
            "black": {
                "name": self.players[Color.BLACK].name,
                "rating": self.players[Color.BLACK].rating,
            },
            "winner": None if self.winner is None else self.winner.value,
            "moves": " ".join(str(uci) for uci in self.moves),
        }

    def outcome(self) -> Outcome:
        return Outcome.from_winner(self.winner)


@dataclass
class MastersGameWithId:
    """A masters game together with its id."""

    id: GameId
    game: MastersGame

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> MastersGameWithId:
        if "id" not in data:
            raise ValueError("missing game field: id")
        return MastersGameWithId(
            id=GameId.parse(data["id"]),
            game=MastersGame.from_dict(data),
        )


@dataclass
class MastersGroup:
    """Statistics of one move, with games keyed by combined rating."""

    stats: Stats = field(default_factory=Stats)
    games: list[tuple[int, GameId]] = field(default_factory=list)


@dataclass
class MastersEntry:
    """All moves played from one position in one year."""

    groups: dict[RawUci, MastersGroup] = field(default_factory=dict)

    SIZE_HINT: ClassVar[int] = 14

    @staticmethod
    def new_single(
        uci: Uci,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> MastersEntry:
        sort_key = min(mover_rating + opponent_rating, _U16_MAX)
        return MastersEntry(
            groups={
                RawUci.from_uci(uci): MastersGroup(
                    stats=Stats.new_single(outcome, mover_rating),
                    games=[(sort_key, game_id)],
                )
            }
        )

    def extend_from_reader(self, reader: ByteReader) -> None:
        """Merge serialized entry data into this entry."""
        while reader.has_remaining():
            uci = RawUci.read(reader)
            group = self.groups.get(uci)
            if group is None:
                group = self.groups[uci] = MastersGroup()
            group.stats += Stats.read(reader)
            num_games = reader.read_u8()
            for _ in range(num_games):
                sort_key = reader.read_u16_le()
                group.games.append((sort_key, GameId.read(reader)))

    def write(self, buf: bytearray) -> None:
        """Serialize, keeping only games among the overall top games."""
        top_games = sorted(
            (game for group in self.groups.values() for game in group.games),
            reverse=True,
        )
        if not top_games:
            return
        lowest_top_game = top_games[min(len(top_games), MAX_MASTERS_GAMES) - 1]

        for uci, group in self.groups.items():
            uci.write(buf)
            group.stats.write(buf)

            if len(group.games) == 1:
                games = group.games
            else:
                games = [game for game in group.games if game >= lowest_top_game]
            if len(games) > _U8_MAX:
                raise ValueError(f"too many games for one move: {len(games)}")
            buf.append(len(games))

            for sort_key, game_id in games:
                buf += sort_key.to_bytes(2, "little")
                game_id.write(buf)

    def prepare(self, moves=None, top_games=None) -> PreparedResponse:
        """Build a query response; limits of None mean no limit."""
        total = Stats()
        prepared_moves: list[PreparedMove] = []
        top: list[tuple[int, Uci, GameId]] = []

        for raw_uci, group in self.groups.items():
            total += group.stats
            uci = raw_uci.to_uci()

            single_game = None
            if group.stats.is_single() and group.games:
                single_game = group.games[0][1]

            prepared_moves.append(
                PreparedMove(
                    uci=uci,
                    stats=group.stats,
                    game=single_game,
                    average_rating=group.stats.average_rating(),
                )
            )
            top.extend((sort_key, uci, game) for sort_key, game in group.games)

        sort_by_key_and_truncate(
            top, min(_limit(top_games), MAX_MASTERS_GAMES), lambda entry: -entry[0]
        )
        sort_by_key_and_truncate(prepared_moves, _limit(moves), lambda m: -m.stats.total())

        return PreparedResponse(
            total=total,
            moves=prepared_moves,
            recent_games=[],
            top_games=[(uci, game) for _, uci, game in top],
        )