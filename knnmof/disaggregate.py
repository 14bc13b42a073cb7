"""k-nearest-neighbour method-of-fragments disaggregation of daily rainfall."""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence
from itertools import accumulate
from typing import TextIO

from .dataio import write_hourly
from .models import HOURS_PER_DAY, DailyRecord, GlobalParams, HourlyRecord


class DisaggregationError(Exception):
    """Raised when a target day cannot be disaggregated."""


class _RandomSource:
    def random(self) -> float: ...  # pragma: no cover - protocol only


def _skip(continuity: int) -> int:
    # Truncating division: CONTINUITY 1 -> 0, 3 -> 1.
    return int((continuity - 1) / 2)


def _format_day(record: DailyRecord) -> str:
    day = record.day
    return f"{day.year}-{day.month:02d}-{day.day:02d}"


def is_wet(rain: Sequence[float]) -> bool:
    """Return True when any station recorded rain."""
    return any(value > 0.0 for value in rain)


def filter_candidates(
    target: DailyRecord,
    hourly: Sequence[HourlyRecord],
    params: GlobalParams,
    wd: int,
) -> list[int]:
    """Return indices of observed days whose wet-dry pattern fits the target.

    ``wd == 1`` only requires every wet target station to be wet in the
    candidate; ``wd == 0`` requires the patterns to be identical. Days within
    the continuity window of either end of the record are never candidates.
    """
    skip = _skip(params.continuity)
    n = params.n_station

    def matches(record: HourlyRecord) -> bool:
        pairs = list(zip(target.rain[:n], record.daily[:n]))
        if wd == 1:
            return not any(t > 0.0 and c == 0.0 for t, c in pairs)
        if wd == 0:
            return all((t > 0.0) == (c > 0.0) for t, c in pairs)
        return True

    return [k for k in range(skip, len(hourly) - skip) if matches(hourly[k])]


def manhattan(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the sum of absolute differences between two rainfall vectors."""
    return sum(abs(x - y) for x, y in zip(a, b))


def sample_from_cdf(
    candidates: Sequence[int], cdf: Sequence[float], value: float
) -> int:
    """Return the candidate whose cumulative-weight interval holds ``value``."""
    if not candidates:
        raise DisaggregationError("no candidates to sample from")
    if value <= cdf[0]:
        return candidates[0]
    for candidate, low, high in zip(candidates[1:], cdf, cdf[1:]):
        if low < value <= high:
            return candidate
    return candidates[len(cdf) - 1]


def _exchange_sort(distances: list[float], candidates: list[int]) -> list[tuple[float, int]]:
    # The tie order of this exchange sort decides which equal-distance
    # candidate enters the pool first, so it is kept as is.
    pairs = list(zip(distances, candidates))
    for i in range(len(pairs) - 1):
        for j in range(i + 1, len(pairs)):
            if pairs[i][0] > pairs[j][0]:
                pairs[i], pairs[j] = pairs[j], pairs[i]
    return pairs


def knn_sample(
    daily: Sequence[DailyRecord],
    hourly: Sequence[HourlyRecord],
    params: GlobalParams,
    index_target: int,
    candidates: Sequence[int],
    skip: int,
    rng,
) -> list[int]:
    """Draw one fragment index per run from the nearest candidates.

    Distances are Manhattan distances summed over the window of ``skip`` days
    around the target; the ``floor(sqrt(n)) + 1`` nearest candidates are
    weighted by inverse distance.
    """
    if not candidates:
        raise DisaggregationError("no candidates to sample from")
    n = params.n_station
    distances = [
        sum(
            manhattan(daily[index_target + s].rain[:n], hourly[c + s].daily[:n])
            for s in range(-skip, skip + 1)
        )
        for c in candidates
    ]
    ordered = _exchange_sort(distances, list(candidates))
    size_pool = min(math.isqrt(len(ordered)) + 1, len(ordered))
    nearest = ordered[:size_pool]
    inverse = [1.0 / (d if d != 0.0 else 1.0) for d, _ in nearest]
    total = sum(inverse)
    cdf = list(accumulate(w / total for w in inverse))
    pool = [c for _, c in nearest]
    return [sample_from_cdf(pool, cdf, rng.random()) for _ in range(params.run)]


def assign_fragment(fragment: HourlyRecord, rain: Sequence[float]) -> list[list[float]]:
    """Spread each station's daily total over the hours like the fragment does."""
    result = []
    for station, total in enumerate(rain):
        if total > 0.0:
            day_sum = fragment.daily[station]
            if day_sum == 0.0:
                result.append([math.nan] * HOURS_PER_DAY)
            else:
                result.append(
                    [total * value / day_sum for value in fragment.hourly[station]]
                )
        else:
            result.append([0.0] * HOURS_PER_DAY)
    return result


def choose_fragments(
    daily: Sequence[DailyRecord],
    hourly: Sequence[HourlyRecord],
    params: GlobalParams,
    index_target: int,
    rng,
) -> list[int]:
    """Return the observed-day index used as fragment in each run."""
    target = daily[index_target]
    pool = filter_candidates(target, hourly, params, params.wd)
    if len(pool) < 2 and params.wd == 0:
        pool = filter_candidates(target, hourly, params, 1)
    if not pool:
        raise DisaggregationError(
            f"the target day {_format_day(target)} has no matching hourly candidate!"
        )
    if len(pool) == 1:
        return [pool[0]] * params.run

    same_class = [k for k in pool if hourly[k].category == target.category]
    if len(same_class) == 1:
        return [same_class[0]] * params.run
    if not same_class:
        same_class = pool

    skip = _skip(params.continuity)
    window = skip if skip <= index_target < len(daily) - skip else 0
    return knn_sample(daily, hourly, params, index_target, same_class, window, rng)


def disaggregate(
    daily: Sequence[DailyRecord],
    hourly: Sequence[HourlyRecord],
    params: GlobalParams,
    out: TextIO,
    rng=None,
    progress: Callable[[str], None] | None = None,
) -> None:
    """Disaggregate every daily record into hours and write the rows to ``out``."""
    rng = rng if rng is not None else random.Random()
    for index, target in enumerate(daily):
        record = HourlyRecord(
            day=target.day,
            hourly=[[0.0] * HOURS_PER_DAY for _ in range(params.n_station)],
            daily=list(target.rain),
        )
        if not is_wet(target.rain[: params.n_station]):
            for run in range(1, params.run + 1):
                write_hourly(out, record, params, run)
        else:
            fragments = choose_fragments(daily, hourly, params, index, rng)
            for run, fragment in enumerate(fragments, start=1):
                record.hourly = assign_fragment(
                    hourly[fragment], target.rain[: params.n_station]
                )
                write_hourly(out, record, params, run)
        if progress is not None:
            progress(f"{_format_day(target)}: Done!")