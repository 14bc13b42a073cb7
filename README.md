# knnmof

knnmof turns daily rainfall totals from one or more rain gauges into hourly
series. It uses the k-nearest-neighbour method of fragments.

For each wet target day, the observed hourly days become candidates. A
candidate is kept when its wet-dry pattern across the gauges fits the target
day. Candidates within the continuity window of either end of the hourly
record are never used.

- If only one candidate is left, it is used directly.
- Otherwise the candidates are narrowed to those of the same class as the
  target. The class comes from the circulation pattern, the season or the
  month, alone or combined. If no candidate shares the class, the class filter
  is dropped.
- If more than one candidate remains, the tool takes the `floor(sqrt(n)) + 1`
  nearest ones by Manhattan distance. It then draws one of them, weighted by
  inverse distance.

The target day's totals are split up in the hourly proportions of the chosen
day. Dry days are written as zeros.

## Installation

```
pip install .
```

## Running

```
knnmof path/to/global_para.txt
```

The command reads the parameter file and loads the input series. It classifies
the days and writes the hourly output to `FP_OUT`.

- Progress messages go to standard output and are also appended to `FP_LOG`.
  The per-day `YYYY-MM-DD: Done!` lines are the exception: they go to standard
  output only.
- Each day is drawn with a freshly seeded random generator, so repeated runs
  differ.

The exit status tells how the run ended:

| Status | Meaning                                                                    |
|--------|----------------------------------------------------------------------------|
| `0`    | success                                                                    |
| `1`    | a parameter, input, log or output file could not be opened or parsed      |
| `2`    | a classification or disaggregation failure, such as a date without a circulation pattern or a wet day without a matching candidate |

## Parameter file

The file has one `KEY,VALUE` pair per line.

- Blank lines are skipped.
- Lines starting with `#` are comments, and anything after a `#` is ignored.
- A key is recognised when it starts with one of the names below.
- An unknown key, or a key without a value, is an error.

| Key           | Meaning                                                          | Default |
|---------------|------------------------------------------------------------------|---------|
| `FP_DAILY`    | daily rainfall to disaggregate: `y,m,d,r1,...,rN`                |         |
| `FP_HOURLY`   | hourly observations, 24 rows per day: `y,m,d,h,r1,...,rN`        |         |
| `FP_CP`       | circulation pattern series: `y,m,d,cp`                           |         |
| `FP_OUT`      | output file                                                      |         |
| `FP_LOG`      | log file (appended)                                              |         |
| `N_STATION`   | number of rain gauges                                            | `0`     |
| `T_CP`        | `TRUE` to condition on circulation patterns                      |         |
| `SEASON`      | `TRUE` to condition on summer/winter                             |         |
| `SUMMER_FROM` | first summer month                                               | `0`     |
| `SUMMER_TO`   | last summer month                                                | `0`     |
| `MONTH`       | `TRUE` to condition on the twelve months (not with `SEASON`)     |         |
| `CONTINUITY`  | window of days compared (1 = the day alone, 3 = ±1 day)          | `1`     |
| `WD`          | `0` strict wet-dry matching, `1` flexible                        | `1`     |
| `RUN`         | number of realisations, must be positive                         | `1`     |

About `WD`:

- With strict matching, fewer than two candidates makes the tool fall back to
  flexible matching.
- Flexible matching only requires every wet target gauge to be wet on the
  candidate day.

The number of circulation pattern classes is the largest class number in the
`FP_CP` series.

## Input and output files

Input files are comma-separated and have no header line.

- Blank lines are skipped.
- In the hourly file, the date of each day is taken from its first row. A
  trailing day with fewer than 24 rows is dropped.

The output file has no header line:

- With `RUN` equal to 1, each row is `y,m,d,h,r1,...,rN`.
- With more runs, each row starts with the run number.
- Values are written with two decimals.

## Library use

```python
import random
from knnmof.dataio import read_global, read_daily, read_hourly, read_cp
from knnmof.classify import assign_classes
from knnmof.disaggregate import disaggregate

params = read_global("global_para.txt")
cps = read_cp(params.fp_cp) if params.conditions_on_cp() else []
daily = read_daily(params.fp_daily, params.n_station)
hourly = read_hourly(params.fp_hourly, params.n_station)
assign_classes(params, daily, cps)
assign_classes(params, hourly, cps)

with open(params.fp_out, "w") as out:
    disaggregate(daily, hourly, params, out, random.Random(42), None)
```

The modules:

- `knnmof.models` holds the record types: `DailyRecord`, `HourlyRecord`,
  `CirculationRecord` and `GlobalParams`.
- `knnmof.dataio` has the readers. Each `read_*` function has a `parse_*`
  counterpart that takes an iterable of lines. It also has `format_hourly`
  and `write_hourly` for the output rows.
- `knnmof.classify` provides:
  - `lookup_cp` and `count_cp_classes`
  - `assign_classes`
  - `class_counts` and `format_class_counts`
- `knnmof.disaggregate` exposes the steps of the algorithm:
  - `is_wet`
  - `filter_candidates`
  - `manhattan`
  - `knn_sample`
  - `sample_from_cdf`
  - `assign_fragment`
  - `choose_fragments`
  - `disaggregate`
- `knnmof.cli.run` performs a whole run from a `GlobalParams` value. `main` is
  the command above.

Errors:

- Input and parameter problems raise `knnmof.dataio.DataError`.
- A date with no circulation pattern, or asking for both `MONTH` and `SEASON`,
  raises `knnmof.classify.ClassificationError`.
- A wet day with no matching candidate raises
  `knnmof.disaggregate.DisaggregationError`.