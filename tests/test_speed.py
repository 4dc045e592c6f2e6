import pytest

from chessexplorer.speed import BySpeed, InvalidSpeed, Speed

SPEED_TEXTS = ["ultraBullet", "bullet", "blitz", "rapid", "classical", "correspondence"]


@pytest.mark.parametrize(
    ("text", "speed"),
    [
        ("ultraBullet", Speed.ULTRA_BULLET),
        ("bullet", Speed.BULLET),
        ("blitz", Speed.BLITZ),
        ("rapid", Speed.RAPID),
        ("classical", Speed.CLASSICAL),
        ("correspondence", Speed.CORRESPONDENCE),
    ],
)
def test_parse(text, speed):
    assert Speed.parse(text) is speed
    assert speed.value == text


@pytest.mark.parametrize("text", ["ultrabullet", "Blitz", "", "daily"])
def test_parse_invalid(text):
    with pytest.raises(InvalidSpeed):
        Speed.parse(text)


def test_ordering():
    parsed = [Speed.parse(text) for text in reversed(SPEED_TEXTS)]
    assert sorted(parsed) == list(Speed)
    assert Speed.parse("bullet") < Speed.parse("correspondence")
    assert Speed.parse("classical") >= Speed.parse("rapid")
    assert max(parsed) is Speed.CORRESPONDENCE


def _by_speed():
    return BySpeed(
        ultra_bullet=0, bullet=1, blitz=2, rapid=3, classical=4, correspondence=5
    )


def test_by_speed_items_order():
    assert [speed for speed, _ in _by_speed().items()] == list(Speed)
    assert list(_by_speed()) == [0, 1, 2, 3, 4, 5]


def test_by_speed_access_and_set():
    by_speed = _by_speed()
    assert by_speed.by_speed(Speed.RAPID) == 3
    by_speed[Speed.BLITZ] = 9
    assert by_speed.blitz == 9
    assert by_speed[Speed.BLITZ] == 9