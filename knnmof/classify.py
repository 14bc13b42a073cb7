"""Assigning each day a circulation pattern, a season and a combined class."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol

from .models import CirculationRecord, GlobalParams

SEASON_CLASSES = 2
MONTH_CLASSES = 12


class ClassificationError(Exception):
    """Raised when the days cannot be classified as the parameters require."""


class _Classified(Protocol):
    day: date
    cp: int
    season: int
    category: int


def _format_day(day: date) -> str:
    return f"{day.year}-{day.month:02d}-{day.day:02d}"


def lookup_cp(day: date, cps: Iterable[CirculationRecord]) -> int:
    """Return the circulation pattern class recorded for ``day``."""
    cp = next((record.cp for record in cps if record.day == day), -1)
    if cp == -1:
        raise ClassificationError(
            f"cannot find the cp class for the date {_format_day(day)}"
        )
    return cp


def count_cp_classes(cps: Iterable[CirculationRecord]) -> int:
    """Return the number of circulation pattern classes: the largest class seen."""
    return max((record.cp for record in cps), default=0, key=int) if cps else 0


def _season_of(params: GlobalParams, day: date) -> int:
    return 1 if params.summer_from <= day.month <= params.summer_to else 0


def assign_classes(
    params: GlobalParams,
    records: Sequence[_Classified],
    cps: Sequence[CirculationRecord],
) -> None:
    """Set ``cp``, ``season`` and ``category`` of every record and ``params.class_n``.

    Days are classified by circulation pattern, by season (summer/winter) or by
    calendar month, alone or combined; only one of season and month may be used.
    """
    if params.conditions_on_month() and params.conditions_on_season():
        raise ClassificationError(
            "The disaggregation can only be conditioned on either MONTH or SEASON!"
        )

    if params.conditions_on_cp():
        n_cp = max(0, count_cp_classes(cps))
        for record in records:
            record.cp = lookup_cp(record.day, cps)
    else:
        n_cp = 0
        for record in records:
            record.cp = 0

    if params.conditions_on_season():
        n_sm = SEASON_CLASSES
        for record in records:
            record.season = _season_of(params, record.day)
    elif params.conditions_on_month():
        n_sm = MONTH_CLASSES
        for record in records:
            record.season = record.day.month - 1
    else:
        n_sm = 0
        for record in records:
            record.season = 0

    if n_sm > 0 and n_cp > 0:
        params.class_n = n_sm * n_cp
    else:
        params.class_n = max(n_sm, n_cp)

    for record in records:
        if n_cp > 0 and n_sm > 0:
            record.category = (record.cp - 1) + n_cp * record.season
        elif n_cp > 0:
            record.category = record.cp - 1
        elif n_sm > 0:
            record.category = record.season
        else:
            record.category = 0


def class_counts(records: Iterable[_Classified]) -> list[int]:
    """Return how many records fall in each class, from class 0 to the largest."""
    counter = Counter(record.category for record in records)
    n_classes = max([0, *counter]) + 1
    return [counter[category] for category in range(n_classes)]


def format_class_counts(records: Iterable[_Classified]) -> str:
    """Render the per-class counts as the two-line summary shown to the user."""
    counts = class_counts(records)
    labels = "".join(f"{t + 1:5d} " for t in range(len(counts)))
    values = "".join(f"{count:5d} " for count in counts)
    return f"* class-counts:\n   - class: {labels}\n   - count: {values}\n"