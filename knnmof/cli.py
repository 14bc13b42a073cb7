"""Command line entry point: read the inputs, classify the days, disaggregate."""

from __future__ import annotations

import argparse
import random
import sys
import time
from collections.abc import Callable, Sequence
from datetime import date
from typing import TextIO

from .classify import ClassificationError, assign_classes, format_class_counts
from .dataio import DataError, read_cp, read_daily, read_global, read_hourly
from .disaggregate import DisaggregationError, disaggregate
from .models import GlobalParams


def _format_day(day: date) -> str:
    return f"{day.year}-{day.month:02d}-{day.day:02d}"


def _stamp() -> str:
    return time.ctime() + "\n"


def run(
    params: GlobalParams,
    log: TextIO,
    echo: Callable[[str], object] | None = None,
) -> None:
    """Run a whole disaggregation with ``params``, reporting to ``echo`` and ``log``.

    Raises ``DataError`` when a file cannot be read or written,
    ``ClassificationError`` or ``DisaggregationError`` when the algorithm fails.
    """
    say = echo if echo is not None else sys.stdout.write

    def both(text: str) -> None:
        say(text)
        log.write(text)

    both(f"------ Global parameter import completed: {_stamp()}")
    both(
        f"FP_DAILY: {params.fp_daily}\nFP_HOULY: {params.fp_hourly}\n"
        f"FP_CP:    {params.fp_cp}\nFP_OUT:   {params.fp_out}\n"
        f"FP_LOG:   {params.fp_log}\n"
    )
    say(
        "------ Disaggregation parameters: -----\n"
        f"T_CP: {params.t_cp}\nMONTH: {params.month}\n"
        f"N_STATION: {params.n_station}\nCONTINUITY: {params.continuity}\n"
        f"WD: {params.wd}\nRUN: {params.run}\nSEASON: {params.season}\n"
    )
    log.write(
        "------ Disaggregation parameters: -----\n"
        f"T_CP: {params.t_cp}\n"
        f"N_STATION: {params.n_station}\nCONTINUITY: {params.continuity}\n"
        f"WD: {params.wd}\nRUN: {params.run}\nSEASON: {params.season}\n"
    )
    if params.conditions_on_season():
        both(f"SUMMER: {params.summer_from}-{params.summer_to}\n")

    cps = []
    if params.conditions_on_cp():
        cps = read_cp(params.fp_cp)
        both(f"------ Import CP data series (Done): {_stamp()}")
        both(f"* number of CP data rows: {len(cps)}\n")
        if cps:
            both(f"* the first day: {_format_day(cps[0].day)} \n")
            both(f"* the last day:  {_format_day(cps[-1].day)} \n")
    else:
        both(
            "------ Disaggregation conditioned only on seasonality (12 months): "
            f"{_stamp()}"
        )

    daily = read_daily(params.fp_daily, params.n_station)
    assign_classes(params, daily, cps)
    both(f"------ Import daily rr data (Done): {_stamp()}")
    both(f"* the total rows: {len(daily)}\n")
    if daily:
        both(f"* the first day: {_format_day(daily[0].day)}\n")
        both(f"* the last day:  {_format_day(daily[-1].day)}\n")
    both(format_class_counts(daily))

    hourly = read_hourly(params.fp_hourly, params.n_station)
    assign_classes(params, hourly, cps)
    both(f"------ Import hourly rr data (Done): {_stamp()}")
    both(f"* total hourly obs days: {len(hourly)}\n")
    if hourly:
        both(f"* the first day: {_format_day(hourly[0].day)}\n")
        both(f"* the last day:  {_format_day(hourly[-1].day)}\n")
    both(format_class_counts(hourly))

    say("------ Disaggregating: ... \n")
    try:
        out = open(params.fp_out, "w", encoding="utf-8")
    except OSError as exc:
        raise DataError("cannot create or open output file") from exc
    with out:
        disaggregate(
            daily,
            hourly,
            params,
            out,
            rng=random.Random(),
            progress=lambda message: say(message + "\n"),
        )
    both(f"------ Disaggregation daily2hourly (Done): {_stamp()}")


def main(argv: Sequence[str] | None = None) -> int:
    """Disaggregate daily rainfall as set up by a global parameter file."""
    parser = argparse.ArgumentParser(
        prog="knnmof",
        description="Disaggregate daily rainfall into hourly rainfall "
        "with k-nearest-neighbour method of fragments.",
    )
    parser.add_argument("global_file", help="path of the global parameter file")
    args = parser.parse_args(argv)

    try:
        params = read_global(args.global_file)
    except DataError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        log = open(params.fp_log, "a+", encoding="utf-8")
    except OSError:
        print("cannot create / open log file", file=sys.stderr)
        return 1

    with log:
        try:
            run(params, log, sys.stdout.write)
        except DataError as exc:
            print(f"Program terminated: {exc}", file=sys.stderr)
            return 1
        except (ClassificationError, DisaggregationError) as exc:
            print(f"Program terminated: {exc}", file=sys.stderr)
            return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())