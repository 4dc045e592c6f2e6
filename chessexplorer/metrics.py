"""Request counters reported in InfluxDB line protocol fields."""

from __future__ import annotations

import threading
from collections import Counter
from datetime import timedelta
from enum import Enum


class Source(Enum):
    """Where a query came from."""

    ANALYSIS = "analysis"
    MOBILE = "mobile"
    FISHNET = "fishnet"
    OPENING = "opening"
    OPENING_CRAWLER = "openingCrawler"


_SOURCE_FIELDS = (
    "source_none",
    "source_analysis_lichess",
    "source_analysis_masters",
    "source_fishnet",
    "source_opening",
    "source_opening_crawler",
    "source_analysis_player",
    "source_analysis_player_incomplete",
)

_SOURCE_FIELD = {
    None: "source_none",
    Source.FISHNET: "source_fishnet",
    Source.OPENING: "source_opening",
    Source.OPENING_CRAWLER: "source_opening_crawler",
}


class _PlyMetrics:
    GROUP_WIDTH = 5
    GROUPS = 10

    def __init__(self) -> None:
        self._groups = [0] * self.GROUPS

    def inc(self, ply: int) -> None:
        group = ply // self.GROUP_WIDTH
        if 0 <= group < self.GROUPS:
            self._groups[group] += 1

    def to_influx_string(self, field_prefix: str) -> str:
        return ",".join(
            f"{field_prefix}{group * self.GROUP_WIDTH}={num}u"
            for group, num in enumerate(self._groups)
        )


class _HitMetrics:
    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lichess_ply = _PlyMetrics()
        self._masters_ply = _PlyMetrics()
        self._player_ply = _PlyMetrics()

    def inc_lichess(self, source: Source | None, ply: int) -> None:
        self._counts["lichess_miss"] += 1
        self._inc_source(source, "source_analysis_lichess")
        self._lichess_ply.inc(ply)

    def inc_masters(self, source: Source | None, ply: int) -> None:
        self._counts["masters_miss"] += 1
        self._inc_source(source, "source_analysis_masters")
        self._masters_ply.inc(ply)

    def inc_player(self, done: bool, ply: int) -> None:
        field = "source_analysis_player" if done else "source_analysis_player_incomplete"
        self._counts[field] += 1
        self._player_ply.inc(ply)

    def _inc_source(self, source: Source | None, analysis_field: str) -> None:
        if source in (Source.ANALYSIS, Source.MOBILE):
            self._counts[analysis_field] += 1
        else:
            self._counts[_SOURCE_FIELD[source]] += 1

    def to_influx_string(self, field_prefix: str) -> str:
        parts = [f"{field_prefix}{name}={self._counts[name]}u" for name in _SOURCE_FIELDS]
        parts.append(self._lichess_ply.to_influx_string(f"{field_prefix}lichess_ply_"))
        parts.append(self._masters_ply.to_influx_string(f"{field_prefix}masters_ply_"))
        parts.append(self._player_ply.to_influx_string(f"{field_prefix}player_ply_"))
        return ",".join(parts)


class Metrics:
    """Thread-safe counters of answered queries, with a separate slow tally."""

    SLOW_DURATION = timedelta(milliseconds=500)

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._deploy_event_sent = False
        self._hit = _HitMetrics()
        self._slow_hit = _HitMetrics()

    def fetch_set_deploy_event_sent(self) -> bool:
        """Mark the deploy event as sent and return whether it already was."""
        with self._lock:
            previous = self._deploy_event_sent
            self._deploy_event_sent = True
            return previous

    def to_influx_string(self) -> str:
        with self._lock:
            return ",".join(
                [self._hit.to_influx_string(""), self._slow_hit.to_influx_string("slow_")]
            )

    def _is_slow(self, duration: timedelta) -> bool:
        return self.SLOW_DURATION <= duration

    def inc_lichess(self, duration: timedelta, source: Source | None, ply: int) -> None:
        with self._lock:
            self._hit.inc_lichess(source, ply)
            if self._is_slow(duration):
                self._slow_hit.inc_lichess(source, ply)

    def inc_masters(self, duration: timedelta, source: Source | None, ply: int) -> None:
        with self._lock:
            self._hit.inc_masters(source, ply)
            if self._is_slow(duration):
                self._slow_hit.inc_masters(source, ply)

    def inc_player(self, duration: timedelta, done: bool, ply: int) -> None:
        with self._lock:
            self._hit.inc_player(done, ply)
            if self._is_slow(duration):
                self._slow_hit.inc_player(done, ply)