"""Record types shared by the readers, the classifier and the disaggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

HOURS_PER_DAY = 24


def _flag_is_true(value: str) -> bool:
    return value.startswith("TRUE")


@dataclass
class DailyRecord:
    """One day of daily rainfall at every station, to be disaggregated."""

    day: date
    rain: list[float]
    cp: int = 0
    season: int = 0
    category: int = 0


@dataclass
class HourlyRecord:
    """One observed day of hourly rainfall at every station.

    ``hourly[s][h]`` is the rainfall of station ``s`` in hour ``h``;
    ``daily[s]`` is the day total of station ``s``.
    """

    day: date
    hourly: list[list[float]]
    daily: list[float]
    cp: int = 0
    season: int = 0
    category: int = 0

    @classmethod
    def from_hourly(cls, day: date, hourly: list[list[float]]) -> HourlyRecord:
        """Build a record whose daily totals are the sums of the hourly values."""
        rows = [list(station) for station in hourly]
        for station in rows:
            if len(station) != HOURS_PER_DAY:
                raise ValueError(
                    f"expected {HOURS_PER_DAY} hourly values per station, got {len(station)}"
                )
        return cls(day=day, hourly=rows, daily=[sum(station) for station in rows])


@dataclass(frozen=True)
class CirculationRecord:
    """The circulation pattern class of one day."""

    day: date
    cp: int


@dataclass
class GlobalParams:
    """Settings of one disaggregation run, as read from the global parameter file."""

    fp_daily: str = ""
    fp_cp: str = ""
    fp_hourly: str = ""
    fp_out: str = ""
    fp_log: str = ""
    n_station: int = 0
    t_cp: str = ""
    month: str = ""
    season: str = ""
    summer_from: int = 0
    summer_to: int = 0
    continuity: int = 1
    wd: int = 1
    run: int = 1
    class_n: int = 0
    extra: dict[str, str] = field(default_factory=dict, repr=False)

    def conditions_on_cp(self) -> bool:
        """Whether circulation patterns take part in candidate selection."""
        return _flag_is_true(self.t_cp)

    def conditions_on_season(self) -> bool:
        """Whether the summer/winter split takes part in candidate selection."""
        return _flag_is_true(self.season)

    def conditions_on_month(self) -> bool:
        """Whether the calendar month takes part in candidate selection."""
        return _flag_is_true(self.month)