"""Rated and casual game modes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class InvalidMode(ValueError):
    """Raised for an unknown mode name."""

    def __init__(self, message: str = "invalid mode") -> None:
        super().__init__(message)


class Mode(Enum):
    """Whether a game was rated."""

    RATED = "rated"
    CASUAL = "casual"

    @staticmethod
    def from_rated(rated: bool) -> Mode:
        return Mode.RATED if rated else Mode.CASUAL

    @staticmethod
    def parse(text: str) -> Mode:
        try:
            return Mode(text)
        except ValueError:
            raise InvalidMode() from None

    def is_rated(self) -> bool:
        return self is Mode.RATED


_FIELD_BY_MODE = {Mode.RATED: "rated", Mode.CASUAL: "casual"}


@dataclass
class ByMode(Generic[T]):
    """One value for each mode."""

    rated: T
    casual: T

    def by_mode(self, mode: Mode) -> T:
        return getattr(self, _FIELD_BY_MODE[mode])

    def __getitem__(self, mode: Mode) -> T:
        return self.by_mode(mode)

    def __setitem__(self, mode: Mode, value: T) -> None:
        setattr(self, _FIELD_BY_MODE[mode], value)

    def items(self) -> Iterator[tuple[Mode, T]]:
        return ((mode, getattr(self, field)) for mode, field in _FIELD_BY_MODE.items())

    def __iter__(self) -> Iterator[T]:
        return (value for _, value in self.items())