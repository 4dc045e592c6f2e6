"""Month by month history of position statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chessexplorer.date import Month
from chessexplorer.stats import Stats


@dataclass
class HistorySegment:
    """Games played in one month."""

    month: Month
    stats: Stats

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": str(self.month),
            "white": self.stats.white,
            "draws": self.stats.draws,
            "black": self.stats.black,
        }


History = list[HistorySegment]


@dataclass
class HistoryBuilder:
    """Turns running totals into per-month segments, filling gaps."""

    since: Month | None = None
    until: Month | None = None
    _segments: list[HistorySegment] = field(default_factory=list, init=False, repr=False)
    _last_total: Stats = field(default_factory=Stats, init=False, repr=False)
    _last_month: Month | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._last_month = self.since

    def record_difference(self, month: Month, total: Stats) -> None:
        """Record the running ``total`` up to and including ``month``."""
        last_month = self._last_month
        if last_month is not None:
            while last_month < month:
                self._segments.append(HistorySegment(last_month, Stats()))
                last_month = last_month.add_months_saturating(1)
        self._last_month = month.add_months_saturating(1)

        self._segments.append(HistorySegment(month, total - self._last_total))
        self._last_total = total

    def build(self) -> History:
        segments = list(self._segments)
        if self.until is None and segments:
            # The last month may not be completely indexed yet.
            segments.pop()
        return segments