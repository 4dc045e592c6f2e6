# chessexplorer

The data model of a chess opening explorer. For each position, the
explorer keeps compact binary entries, keyed by position and month or
year. An entry holds per-move win/draw/loss statistics and the ids of
example games. Entries can be merged from their serialized form, written
back, and turned into query responses. The package has no dependencies
beyond the standard library.

## Modules

- `chessexplorer.uint`: `ByteReader` reads bytes, `u8`, `u16` and
  little-endian integers from the front of a buffer and raises `EOFError`
  when the buffer runs out. `read_uint` and `write_uint` handle
  little-endian base-128 variable-length unsigned 64-bit integers.
- `chessexplorer.game_id`: `GameId`, an 8-character base-62 game id
  (`GameId.parse`, `str()`), stored in 6 little-endian bytes
  (`to_bytes`, `write`, `read`). Invalid ids raise `InvalidGameId`.
- `chessexplorer.date`: `Year` (1952 to 3000), `Month` (counted as
  `year * 12 + month index`, shown as `YYYY-MM`), both with parsing and
  saturating addition. `LaxDate` is a PGN-style `YYYY.MM.DD` date whose
  month and day may be unknown (`??`). Out-of-range values raise
  `InvalidDate`.
- `chessexplorer.user`: `UserName` (1 to 30 ASCII letters, digits, `-`
  or `_`, compared ignoring case) and `UserId`, its lower-case form.
- `chessexplorer.mode`, `chessexplorer.speed`: the `Mode` and `Speed`
  enums, with `ByMode` and `BySpeed`. These hold one value per mode or
  per speed and can be indexed by the enum.
- `chessexplorer.uci`: `Color`, `Role`, the move types `UciNormal`,
  `UciPut` and `UciNull`, `parse_uci`, `parse_square` and `square_name`.
  `RawUci` packs a move into 16 bits.
- `chessexplorer.stats`: `Outcome` and `Stats`. `Stats` holds white,
  draw and black counts and a rating sum. It computes `average_rating()`
  and `performance(color)`, a performance rating from the FIDE
  percentage-score table. It also has a compact binary form.
- `chessexplorer.history`: `HistoryBuilder(since, until)` turns running
  totals into one `HistorySegment` per month and fills gaps with empty
  months. When `until` is not given it leaves out the last month, which
  may not be completely indexed yet.
- `chessexplorer.key`: `KeyBuilder` (`player`, `masters`, `lichess`),
  `with_zobrist(variant, zobrist)` to get a `KeyPrefix`, then
  `with_month` / `with_year` to get a 14-byte `Key`. Keys of one prefix
  sort bytewise in date order.
- `chessexplorer.lichess`: `RatingGroup` and `LichessEntry`, with
  statistics per move, speed and rating group.
  `LichessEntry.prepare(speeds, ratings, top_group, moves, recent_games,
  top_games)` returns a `PreparedResponse` with totals, moves sorted by
  game count, recent games and top games.
- `chessexplorer.player`: `PlayerEntry`, with statistics per move, speed
  and mode, and `prepare(color, ...)`, which adds average opponent rating
  and performance. Also `PlayerStatus` and `IndexRun`, which decide when
  a player's games should be indexed again or revisited.
- `chessexplorer.masters`: `MastersGame` and `MastersGameWithId`, built
  from and turned into plain dicts. Also `MastersEntry`: it keeps top
  games ranked by combined rating, and `write` keeps only the overall
  top 15 games.
- `chessexplorer.lichess_game`: `LichessGame` and `GamePlayer`, the
  per-game record with flags for which indexes contain it.
- `chessexplorer.metrics`: `Metrics`, thread-safe hit counters for each
  query `Source` and ply range. Queries that take 500 ms or more are
  also counted separately. `to_influx_string()` renders the counters as
  InfluxDB line-protocol fields.

In every `prepare` method, a limit of `None` means no limit. A filter of
`None` (`speeds`, `ratings`, `modes`) means no filtering.

## Example

```python
from chessexplorer.game_id import GameId
from chessexplorer.lichess import LichessEntry
from chessexplorer.speed import Speed
from chessexplorer.stats import Outcome
from chessexplorer.uci import Color, parse_uci
from chessexplorer.uint import ByteReader

entry = LichessEntry.new_single(
    parse_uci("e2e4"),
    Speed.CLASSICAL,
    GameId.parse("abcdefgh"),
    Outcome.from_winner(Color.WHITE),
    1610,
    1620,
)

buf = bytearray()
entry.write(buf)

merged = LichessEntry()
merged.extend_from_reader(ByteReader(bytes(buf)))

response = merged.prepare(moves=12)
print(response.total, [str(m.uci) for m in response.moves])
```

## What it does not do

This package is only the data model. It does not provide:

- a database or any storage: it builds keys and serialized values, but
  storing them is up to you;
- an HTTP server or command-line program;
- game import or indexing;
- opening names;
- checking whether moves are legal, or turning masters games into PGN.
  Moves are handled as UCI only.

## Running the tests

```
pip install -e .[test]
pytest
```