import pytest
from hypothesis import given
from hypothesis import strategies as st

from chessexplorer.date import InvalidDate, Month, Year
from chessexplorer.key import Key, KeyBuilder, KeyPrefix, Variant
from chessexplorer.uci import Color
from chessexplorer.user import UserId, UserName

ZOBRIST = 0xD1D06239BD7D2AE8AD6FA208133E1F9A

months = st.integers(
    min_value=int(Month.min_value()), max_value=int(Month.max_value())
).map(Month.from_int)


def player_prefix() -> KeyPrefix:
    user_id = UserId.from_name(UserName.parse("blindfoldpig"))
    return KeyBuilder.player(user_id, Color.WHITE).with_zobrist(Variant.CHESS, ZOBRIST)


@given(months, months)
def test_key_order(a, b):
    prefix = player_prefix()
    assert (a <= b) == (prefix.with_month(a).into_bytes() <= prefix.with_month(b).into_bytes())


@given(months)
def test_month_roundtrip(month):
    key = player_prefix().with_month(month)
    assert len(key.into_bytes()) == Key.SIZE
    assert key.month() == month
    assert Key.from_bytes(key.into_bytes()) == key


def test_lichess_chess_prefix_is_zobrist():
    key = KeyBuilder.lichess().with_zobrist(Variant.CHESS, ZOBRIST).with_month(Month.parse("2020-01"))
    assert key.into_bytes()[:KeyPrefix.SIZE] == ZOBRIST.to_bytes(16, "little")[:KeyPrefix.SIZE]


def test_variant_mask():
    prefix = KeyBuilder.masters().with_zobrist(Variant.ATOMIC, 0)
    assert int.from_bytes(prefix.prefix, "little") == 0x66CCBD680F655D562689CA333C5E2A42


def test_player_keys_differ_by_color_and_ignore_case():
    lower = UserId.from_name(UserName.parse("blindfoldpig"))
    upper = UserId.from_name(UserName.parse("BlindfoldPig"))
    assert KeyBuilder.player(lower, Color.WHITE) == KeyBuilder.player(upper, Color.WHITE)
    assert KeyBuilder.player(lower, Color.WHITE) != KeyBuilder.player(lower, Color.BLACK)


def test_year_suffix_big_endian():
    key = KeyBuilder.masters().with_zobrist(Variant.CHESS, 0).with_year(Year.from_int(2000))
    assert key.into_bytes()[KeyPrefix.SIZE:] == (2000).to_bytes(2, "big")
    with pytest.raises(InvalidDate):
        key.month()


def test_key_wrong_length():
    with pytest.raises(ValueError):
        Key.from_bytes(b"\x00" * 13)


def test_zobrist_out_of_range():
    with pytest.raises(ValueError):
        KeyBuilder.lichess().with_zobrist(Variant.CHESS, 1 << 128)