from datetime import date

import pytest

from knnmof.classify import (
    ClassificationError,
    assign_classes,
    class_counts,
    count_cp_classes,
    format_class_counts,
    lookup_cp,
)
from knnmof.models import CirculationRecord, DailyRecord, GlobalParams, HourlyRecord


def _days():
    return [date(2000, m, 1) for m in range(1, 13)]


def _cps(days):
    return [CirculationRecord(day=d, cp=(i % 3) + 1) for i, d in enumerate(days)]


def _daily(days):
    return [DailyRecord(day=d, rain=[0.0]) for d in days]


def test_lookup_cp_finds_first_match():
    cps = [
        CirculationRecord(date(2001, 1, 1), 4),
        CirculationRecord(date(2001, 1, 2), 7),
        CirculationRecord(date(2001, 1, 2), 9),
    ]
    assert lookup_cp(date(2001, 1, 2), cps) == 7


def test_lookup_cp_missing_date_raises():
    cps = [CirculationRecord(date(2001, 1, 1), 4)]
    with pytest.raises(ClassificationError, match="2001-01-05"):
        lookup_cp(date(2001, 1, 5), cps)


def test_count_cp_classes_is_maximum():
    cps = [CirculationRecord(date(2001, 1, d), c) for d, c in [(1, 2), (2, 5), (3, 1)]]
    assert count_cp_classes(cps) == 5
    assert count_cp_classes([]) == 0


def test_month_and_season_together_rejected():
    params = GlobalParams(month="TRUE", season="TRUE")
    with pytest.raises(ClassificationError):
        assign_classes(params, _daily(_days()), [])


def test_season_only():
    params = GlobalParams(season="TRUE", summer_from=5, summer_to=9)
    records = _daily(_days())
    assign_classes(params, records, [])
    assert params.class_n == 2
    for record in records:
        summer = 5 <= record.day.month <= 9
        assert record.season == int(summer)
        assert record.category == record.season
        assert record.cp == 0


def test_month_only():
    params = GlobalParams(month="TRUE")
    records = _daily(_days())
    assign_classes(params, records, [])
    assert params.class_n == 12
    assert [r.category for r in records] == [d.month - 1 for d in _days()]


def test_nothing_gives_single_class():
    params = GlobalParams()
    records = _daily(_days())
    assign_classes(params, records, [])
    assert params.class_n == 0
    assert all(r.category == 0 and r.season == 0 and r.cp == 0 for r in records)


def test_cp_only():
    days = _days()
    cps = _cps(days)
    params = GlobalParams(t_cp="TRUE")
    records = _daily(days)
    assign_classes(params, records, cps)
    assert params.class_n == count_cp_classes(cps)
    for record, cp in zip(records, cps):
        assert record.cp == cp.cp
        assert record.category == cp.cp - 1


def test_cp_and_month_categories_distinct_and_in_range():
    days = _days()
    cps = _cps(days)
    params = GlobalParams(t_cp="TRUE", month="TRUE")
    records = _daily(days)
    assign_classes(params, records, cps)
    assert params.class_n == 12 * count_cp_classes(cps)
    seen = {}
    for record in records:
        assert 0 <= record.category < params.class_n
        key = (record.cp, record.season)
        assert seen.setdefault(record.category, key) == key


def test_cp_missing_for_record_raises():
    days = _days()
    params = GlobalParams(t_cp="TRUE")
    with pytest.raises(ClassificationError):
        assign_classes(params, _daily(days), _cps(days[:5]))


def test_hourly_records_are_classified_too():
    days = _days()
    records = [HourlyRecord.from_hourly(d, [[0.0] * 24]) for d in days]
    params = GlobalParams(season="TRUE", summer_from=5, summer_to=9)
    assign_classes(params, records, [])
    assert [r.category for r in records] == [int(5 <= d.month <= 9) for d in days]


def test_class_counts_sum_and_indexing():
    params = GlobalParams(month="TRUE")
    records = _daily(_days() + _days()[:3])
    assign_classes(params, records, [])
    counts = class_counts(records)
    assert len(counts) == 12
    assert sum(counts) == len(records)
    assert counts[0] == 2
    assert counts[11] == 1


def test_class_counts_empty():
    assert class_counts([]) == [0]


def test_format_class_counts():
    records = _daily(_days()[:3])
    for record, category in zip(records, [0, 1, 0]):
        record.category = category
    text = format_class_counts(records)
    assert text == (
        "* class-counts:\n"
        "   - class:     1     2 \n"
        "   - count:     2     1 \n"
    )