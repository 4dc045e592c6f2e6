from datetime import datetime, timedelta, timezone

import pytest

from chessexplorer.game_id import GameId
from chessexplorer.mode import Mode
from chessexplorer.player import (
    EPOCH,
    IndexRun,
    IndexRunKind,
    PlayerEntry,
    PlayerStatus,
    _read_header,
    _write_header,
)
from chessexplorer.speed import Speed
from chessexplorer.stats import Outcome
from chessexplorer.uci import Color, RawUci, parse_uci
from chessexplorer.uint import ByteReader


def _merge(*entries):
    merged = PlayerEntry()
    for entry in entries:
        buf = bytearray()
        entry.write(buf)
        merged.extend_from_reader(ByteReader(buf))
    return merged


def _roundtrip(entry):
    buf = bytearray()
    entry.write(buf)
    result = PlayerEntry()
    result.extend_from_reader(ByteReader(buf))
    return result


@pytest.fixture
def abc():
    uci_ab = parse_uci("e2e4")
    uci_c = parse_uci("d2d4")
    a = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("aaaaaaaa"), Outcome(Color.WHITE), 1600
    )
    b = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("bbbbbbbb"), Outcome(Color.BLACK), 1800
    )
    c = PlayerEntry.new_single(
        uci_c, Speed.BULLET, Mode.RATED, GameId.parse("cccccccc"), Outcome(None), 1700
    )
    return a, b, c


def test_header_roundtrip():
    buf = bytearray()
    _write_header(buf, Speed.CORRESPONDENCE, Mode.RATED, 15)
    buf.append(0)
    reader = ByteReader(buf)
    assert _read_header(reader) == (Speed.CORRESPONDENCE, Mode.RATED, 15)
    assert _read_header(reader) is None


def test_invalid_header_speed():
    with pytest.raises(ValueError):
        _read_header(ByteReader(bytes([7])))


def test_single_entry_size(abc):
    buf = bytearray()
    abc[0].write(buf)
    assert len(buf) == PlayerEntry.SIZE_HINT


def test_merge_player(abc):
    merged = _merge(*abc)
    assert len(merged.sub_entries) == 2
    assert merged.max_game_idx == 2
    group = merged.sub_entries[RawUci.from_uci(parse_uci("e2e4"))].bullet.rated
    assert group.stats.white == 1
    assert group.stats.draws == 0
    assert group.stats.black == 1
    assert group.stats.average_rating() == 1700
    assert len(group.games) == 2

    again = _roundtrip(merged)
    assert len(again.sub_entries) == 2
    assert again.max_game_idx == 2


def test_prepare_orders_moves_and_recent_games(abc):
    res = _merge(*abc).prepare(Color.WHITE)
    assert res.total.total() == 3
    assert [str(m.uci) for m in res.moves] == ["e2e4", "d2d4"]
    assert res.moves[0].game is None
    assert res.moves[1].game == GameId.parse("cccccccc")
    assert res.moves[1].average_opponent_rating == 1700
    assert res.moves[1].average_rating is None
    assert [str(g) for _, g in res.recent_games] == ["cccccccc", "bbbbbbbb", "aaaaaaaa"]
    assert res.top_games == []


def test_prepare_filters(abc):
    merged = _merge(*abc)
    assert merged.prepare(Color.WHITE, speeds={Speed.BLITZ}).total.is_empty()
    assert merged.prepare(Color.WHITE, modes={Mode.CASUAL}).moves == []
    res = merged.prepare(Color.WHITE, moves=1, recent_games=1)
    assert len(res.moves) == 1
    assert [str(g) for _, g in res.recent_games] == ["cccccccc"]


def test_write_keeps_last_games():
    uci = parse_uci("g1f3")
    ids = [GameId(n) for n in range(10)]
    entries = [
        PlayerEntry.new_single(uci, Speed.BLITZ, Mode.CASUAL, gid, Outcome(None), 1500)
        for gid in ids
    ]
    merged = _merge(*entries)
    again = _roundtrip(merged)
    group = again.sub_entries[RawUci.from_uci(uci)].blitz.casual
    assert group.stats.total() == 10
    assert [g for _, g in group.games] == ids[2:]
    recent = merged.prepare(Color.BLACK).recent_games
    assert [g for _, g in recent] == list(reversed(ids))[: len(recent)]
    assert len(recent) == 8


def test_index_run_since_and_str():
    assert IndexRun.index_after(5).since() == 6
    assert IndexRun.revisit_since(5).since() == 5
    assert str(IndexRun.index_after(5)) == "created_at > 5"
    assert str(IndexRun.revisit_since(5)) == "created_at >= 5"


def test_default_status_starts_index():
    run = PlayerStatus(latest_created_at=42).maybe_start_index_run()
    assert run == IndexRun.index_after(42)


def test_revisit_has_priority():
    status = PlayerStatus(latest_created_at=42, revisit_ongoing_created_at=7)
    assert status.maybe_start_index_run() == IndexRun.revisit_since(7)


def test_recently_indexed_status_waits():
    now = datetime.now(timezone.utc)
    status = PlayerStatus(revisit_ongoing_created_at=7, indexed_at=now, revisited_at=now)
    assert status.maybe_start_index_run() is None


def test_finish_revisit_updates_both_times():
    status = PlayerStatus(revisit_ongoing_created_at=7)
    status.finish_index_run(IndexRun.revisit_since(7))
    assert status.revisited_at == status.indexed_at
    assert status.indexed_at > EPOCH
    assert status.maybe_start_index_run() is None


def test_finish_index_keeps_revisit_time():
    status = PlayerStatus()
    status.finish_index_run(IndexRun.index_after(0))
    assert status.revisited_at == EPOCH
    assert status.indexed_at > EPOCH


def test_status_roundtrip():
    status = PlayerStatus(
        latest_created_at=123456789,
        revisit_ongoing_created_at=987,
        indexed_at=EPOCH + timedelta(seconds=1000),
        revisited_at=EPOCH + timedelta(seconds=2000),
    )
    buf = bytearray()
    status.write(buf)
    assert PlayerStatus.read(ByteReader(buf)) == status


def test_status_default_wire_bytes():
    buf = bytearray()
    PlayerStatus().write(buf)
    assert bytes(buf) == bytes(4)
    assert PlayerStatus.read(ByteReader(buf)).revisit_ongoing_created_at is None


def test_status_before_epoch_rejected():
    status = PlayerStatus(indexed_at=EPOCH - timedelta(seconds=1))
    with pytest.raises(ValueError):
        status.write(bytearray())


def test_index_run_kind():
    assert IndexRun.revisit_since(1).kind is IndexRunKind.REVISIT