"""Reading the parameter and data files and writing disaggregated output."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from typing import TextIO

from .models import (
    HOURS_PER_DAY,
    CirculationRecord,
    DailyRecord,
    GlobalParams,
    HourlyRecord,
)


class DataError(Exception):
    """Raised when an input file cannot be opened or holds malformed content."""


_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _to_int(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _to_float(text: str) -> float:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else 0.0


def _next_token(text: str, delims: str) -> tuple[str | None, str]:
    """Return the next run of non-delimiter characters and the text after it."""
    start = 0
    while start < len(text) and text[start] in delims:
        start += 1
    if start == len(text):
        return None, ""
    end = start
    while end < len(text) and text[end] not in delims:
        end += 1
    return text[start:end], text[end + 1:]


def _fields(line: str, count: int, what: str) -> list[str]:
    fields = []
    rest = line
    for _ in range(count):
        token, rest = _next_token(rest, ",")
        if token is None:
            raise DataError(f"too few fields in {what} row: {line.rstrip()!r}")
        fields.append(token)
    return fields


def _make_date(y: str, m: str, d: str, line: str) -> date:
    try:
        return date(_to_int(y), _to_int(m), _to_int(d))
    except ValueError as exc:
        raise DataError(f"invalid date in row: {line.rstrip()!r}") from exc


def _data_lines(lines: Iterable[str]) -> Iterable[str]:
    return (line for line in lines if line.strip())


def _open_lines(path: str, what: str) -> list[str]:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.readlines()
    except OSError as exc:
        raise DataError(f"cannot open {what}: {path}") from exc


# Checked in this order; a key matches when it starts with the name.
_TEXT_KEYS = {
    "FP_DAILY": "fp_daily",
    "FP_CP": "fp_cp",
    "FP_HOURLY": "fp_hourly",
    "SEASON": "season",
    "T_CP": "t_cp",
    "MONTH": "month",
    "FP_OUT": "fp_out",
    "FP_LOG": "fp_log",
}
_INT_KEYS = {
    "SUMMER_FROM": "summer_from",
    "SUMMER_TO": "summer_to",
    "N_STATION": "n_station",
    "WD": "wd",
    "CONTINUITY": "continuity",
    "RUN": "run",
}
_KEY_ORDER = [
    "FP_DAILY", "FP_CP", "FP_HOURLY", "SEASON", "SUMMER_FROM", "SUMMER_TO",
    "T_CP", "MONTH", "N_STATION", "WD", "FP_OUT", "FP_LOG", "CONTINUITY", "RUN",
]


def parse_global(lines: Iterable[str]) -> GlobalParams:
    """Parse ``KEY,value`` lines of a global parameter file; ``#`` starts a comment."""
    params = GlobalParams()
    for raw in lines:
        row = raw.lstrip()
        if len(row) <= 1 or row.startswith("#"):
            continue
        row = row.split("#", 1)[0]
        key, rest = _next_token(row, ",")
        if key is None:
            raise DataError(f"missing parameter name in line: {raw.rstrip()!r}")
        name = next((k for k in _KEY_ORDER if key.startswith(k)), None)
        if name is None:
            raise DataError(
                f"unrecognized parameter field in global parameter file: {key.strip()!r}"
            )
        value, _ = _next_token(rest, ",\r\n")
        if value is None:
            raise DataError(f"missing value for parameter {name}")
        if name in _TEXT_KEYS:
            setattr(params, _TEXT_KEYS[name], value.strip())
        else:
            setattr(params, _INT_KEYS[name], _to_int(value))
    if params.run <= 0:
        raise DataError("RUN <= 0")
    return params


def read_global(path: str) -> GlobalParams:
    """Read the global parameter file at ``path``."""
    return parse_global(_open_lines(path, "global parameter file"))


def parse_daily(lines: Iterable[str], n_station: int) -> list[DailyRecord]:
    """Parse ``y,m,d,rr_1,...,rr_n`` rows of daily rainfall."""
    records = []
    for line in _data_lines(lines):
        fields = _fields(line, 3 + n_station, "daily")
        records.append(
            DailyRecord(
                day=_make_date(*fields[:3], line),
                rain=[_to_float(v) for v in fields[3:]],
            )
        )
    return records


def read_daily(path: str, n_station: int) -> list[DailyRecord]:
    """Read the daily rainfall file at ``path``."""
    return parse_daily(_open_lines(path, "daily rr data file"), n_station)


def parse_hourly(lines: Iterable[str], n_station: int) -> list[HourlyRecord]:
    """Parse ``y,m,d,h,rr_1,...,rr_n`` rows, 24 per day.

    The date of each day is taken from its first row; a trailing day with
    fewer than 24 rows is dropped.
    """
    records = []
    day: date | None = None
    values: list[list[float]] = []
    for count, line in enumerate(_data_lines(lines)):
        fields = _fields(line, 4 + n_station, "hourly")
        if count % HOURS_PER_DAY == 0:
            day = _make_date(*fields[:3], line)
            values = [[0.0] * HOURS_PER_DAY for _ in range(n_station)]
        hour = _to_int(fields[3])
        if not 0 <= hour < HOURS_PER_DAY:
            raise DataError(f"hour out of range in row: {line.rstrip()!r}")
        for station, text in zip(values, fields[4:]):
            station[hour] = _to_float(text)
        if count % HOURS_PER_DAY == HOURS_PER_DAY - 1:
            records.append(HourlyRecord.from_hourly(day, values))
    return records


def read_hourly(path: str, n_station: int) -> list[HourlyRecord]:
    """Read the hourly rainfall file at ``path``."""
    return parse_hourly(_open_lines(path, "hourly rr data file"), n_station)


def parse_cp(lines: Iterable[str]) -> list[CirculationRecord]:
    """Parse ``y,m,d,cp`` rows of circulation pattern classes."""
    records = []
    for line in _data_lines(lines):
        fields = _fields(line, 4, "cp")
        records.append(
            CirculationRecord(day=_make_date(*fields[:3], line), cp=_to_int(fields[3]))
        )
    return records


def read_cp(path: str) -> list[CirculationRecord]:
    """Read the circulation pattern file at ``path``."""
    return parse_cp(_open_lines(path, "cp data file"))


def format_hourly(record: HourlyRecord, params: GlobalParams, run: int) -> str:
    """Render the 24 output rows of one day; the run index leads when RUN > 1."""
    day = record.day
    rows = []
    for hour in range(HOURS_PER_DAY):
        values = ",".join(
            f"{record.hourly[s][hour]:.2f}" for s in range(params.n_station)
        )
        prefix = f"{day.year},{day.month},{day.day},{hour}"
        if params.run > 1:
            prefix = f"{run},{prefix}"
        rows.append(f"{prefix},{values}\n")
    return "".join(rows)


def write_hourly(
    stream: TextIO, record: HourlyRecord, params: GlobalParams, run: int
) -> None:
    """Write the 24 output rows of one day to ``stream``."""
    stream.write(format_hourly(record, params, run))