"""Time control categories of games."""

from __future__ import annotations

import functools
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class InvalidSpeed(ValueError):
    """Raised for an unknown speed name."""

    def __init__(self, message: str = "invalid speed") -> None:
        super().__init__(message)


@functools.total_ordering
class Speed(Enum):
    """Time control category, ordered from fastest to slowest."""

    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"

    @staticmethod
    def parse(text: str) -> Speed:
        try:
            return Speed(text)
        except ValueError:
            raise InvalidSpeed() from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Speed):
            return NotImplemented
        return _ORDER[self] < _ORDER[other]


_ORDER = {speed: index for index, speed in enumerate(Speed)}

_FIELD_BY_SPEED = {
    Speed.ULTRA_BULLET: "ultra_bullet",
    Speed.BULLET: "bullet",
    Speed.BLITZ: "blitz",
    Speed.RAPID: "rapid",
    Speed.CLASSICAL: "classical",
    Speed.CORRESPONDENCE: "correspondence",
}


@dataclass
class BySpeed(Generic[T]):
    """One value for each speed."""

    ultra_bullet: T
    bullet: T
    blitz: T
    rapid: T
    classical: T
    correspondence: T

    def by_speed(self, speed: Speed) -> T:
        return getattr(self, _FIELD_BY_SPEED[speed])

    def __getitem__(self, speed: Speed) -> T:
        return self.by_speed(speed)

    def __setitem__(self, speed: Speed, value: T) -> None:
        setattr(self, _FIELD_BY_SPEED[speed], value)

    def items(self) -> Iterator[tuple[Speed, T]]:
        return (
            (speed, getattr(self, field)) for speed, field in _FIELD_BY_SPEED.items()
        )

    def __iter__(self) -> Iterator[T]:
        return (value for _, value in self.items())