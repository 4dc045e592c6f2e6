"""Years, months and loosely specified dates of games."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

MIN_YEAR = 1952
MAX_YEAR = 3000
_U16_MAX = 0xFFFF


class InvalidDate(ValueError):
    """Raised for a year or month outside the supported range."""


def _invalid_year() -> InvalidDate:
    return InvalidDate("invalid year")


def _invalid_month() -> InvalidDate:
    return InvalidDate("invalid month")


def _parse_unsigned(text: str, bits: int) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value < 1 << bits else None


@dataclass(frozen=True, order=True)
class Year:
    """A calendar year between MIN_YEAR and MAX_YEAR."""

    value: int

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.value <= MAX_YEAR:
            raise _invalid_year()

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def from_int(value: int) -> Year:
        return Year(value)

    @staticmethod
    def parse(text: str) -> Year:
        value = _parse_unsigned(text, 16)
        if value is None:
            raise _invalid_year()
        return Year(value)

    @staticmethod
    def min_value() -> Year:
        return Year(MIN_YEAR)

    @staticmethod
    def max_value() -> Year:
        return Year(MAX_YEAR)

    @staticmethod
    def max_masters() -> Year:
        return Year(2024)

    def add_years_saturating(self, years: int) -> Year:
        return Year(min(self.value + years, _U16_MAX, MAX_YEAR))


_MIN_MONTH = MIN_YEAR * 12
_MAX_MONTH = MAX_YEAR * 12 + 11


@dataclass(frozen=True, order=True)
class Month:
    """A month, counted as year * 12 + month index."""

    value: int

    def __post_init__(self) -> None:
        if not _MIN_MONTH <= self.value <= _MAX_MONTH:
            raise _invalid_month()

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        year, month0 = divmod(self.value, 12)
        return f"{year:04}-{month0 + 1:02}"

    @staticmethod
    def from_int(value: int) -> Month:
        return Month(value)

    @staticmethod
    def parse(text: str) -> Month:
        parts = re.split(r"[-/]", text, maxsplit=1)
        if len(parts) != 2:
            raise _invalid_month()
        year = _parse_unsigned(parts[0], 16)
        month_plus_one = _parse_unsigned(parts[1], 16)
        if year is None or month_plus_one is None:
            raise _invalid_month()
        if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month_plus_one <= 12):
            raise _invalid_month()
        return Month(year * 12 + month_plus_one - 1)

    @staticmethod
    def min_value() -> Month:
        return Month(_MIN_MONTH)

    @staticmethod
    def max_value() -> Month:
        return Month(_MAX_MONTH)

    @staticmethod
    def from_time_saturating(time: date) -> Month:
        year = min(max(time.year, MIN_YEAR), MAX_YEAR)
        return Month(year * 12 + time.month - 1)

    def add_months_saturating(self, months: int) -> Month:
        return Month(min(self.value + months, _U16_MAX, _MAX_MONTH))

    def year(self) -> Year:
        return Year(self.value // 12)


@dataclass(frozen=True)
class LaxDate:
    """A date whose month and day may be unknown."""

    year: Year
    month_number: int | None = None
    day: int | None = None

    @staticmethod
    def parse(text: str) -> LaxDate:
        parts = text.split(".", 2)
        year_value = _parse_unsigned(parts[0], 16)
        if year_value is None:
            raise _invalid_year()
        year = Year(year_value)
        month = _parse_unsigned(parts[1], 8) if len(parts) > 1 else None
        if month is not None and not 1 <= month <= 12:
            month = None
        day = _parse_unsigned(parts[2], 8) if len(parts) > 2 else None
        return LaxDate(year, month, day)

    def month(self) -> Month | None:
        if self.month_number is None:
            return None
        return Month(self.year.value * 12 + self.month_number - 1)

    def __str__(self) -> str:
        month = "??" if self.month_number is None else f"{self.month_number:02}"
        day = "??" if self.day is None else f"{self.day:02}"
        return f"{self.year.value:04}.{month}.{day}"