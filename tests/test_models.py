from datetime import date

import pytest

from knnmof.models import CirculationRecord, DailyRecord, GlobalParams, HourlyRecord


def _station(values):
    return list(values) + [0.0] * (24 - len(values))


def test_from_hourly_sums_each_station():
    rec = HourlyRecord.from_hourly(
        date(2000, 1, 1), [_station([1.0, 2.0]), _station([0.5])]
    )
    assert rec.daily == [3.0, 0.5]
    assert rec.hourly[0][:2] == [1.0, 2.0]
    assert rec.category == 0


def test_from_hourly_copies_input():
    source = [_station([1.0])]
    rec = HourlyRecord.from_hourly(date(2000, 1, 1), source)
    source[0][0] = 9.0
    assert rec.hourly[0][0] == 1.0


def test_from_hourly_rejects_wrong_length():
    with pytest.raises(ValueError):
        HourlyRecord.from_hourly(date(2000, 1, 1), [[1.0, 2.0]])


@pytest.mark.parametrize(
    "flag,expected",
    [("TRUE", True), ("TRUEISH", True), ("FALSE", False), ("true", False), ("", False)],
)
def test_flags_match_prefix(flag, expected):
    params = GlobalParams(t_cp=flag, season=flag, month=flag)
    assert params.conditions_on_cp() is expected
    assert params.conditions_on_season() is expected
    assert params.conditions_on_month() is expected


def test_daily_record_defaults():
    rec = DailyRecord(day=date(2001, 5, 3), rain=[1.0])
    assert (rec.cp, rec.season, rec.category) == (0, 0, 0)


def test_circulation_record_holds_fields():
    rec = CirculationRecord(date(2000, 1, 1), 3)
    assert rec.day == date(2000, 1, 1)
    assert rec.cp == 3
    assert (rec == CirculationRecord(date(2000, 1, 1), 4)) is False