import dataclasses
from datetime import date

import pytest

from xsmb_predictor.preparer import prepare_history, prepare_record


def test_record_fields():
    rec = prepare_record(date(2024, 1, 15), ["12", "21", "33", "12", "67", "34", "12"])
    assert rec.day_of_week == 1  # Monday
    assert rec.numbers == ("12", "21", "33", "12", "67", "34", "12")
    assert rec.unique_numbers == ("12", "21", "33", "67", "34")
    assert rec.daily_counts["12"] == 3
    assert rec.two_hits == ("12",)
    assert rec.three_hits == ("12",)
    assert rec.doubles_landed == ("33",)
    assert rec.sat_doubles_landed == ("34",)
    assert set(rec.near_doubles_landed) == {"12", "21", "33", "67", "34"}
    assert rec.totals_landed == (3, 6, 13, 7)
    assert rec.total_counts[3] == 2
    assert rec.heads_landed == ("1", "2", "3", "6")
    assert rec.tails_landed == ("2", "1", "3", "7", "4")
    assert rec.head_counts["3"] == 2
    assert rec.reversed_pairs_landed == ("12", "21")
    assert rec.shadow_pairs_landed == ("12", "67")


def test_record_is_read_only():
    rec = prepare_record(date(2024, 1, 15), ["01"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.numbers = ("02",)
    with pytest.raises(TypeError):
        rec.daily_counts["01"] = 5


def test_empty_day_is_valid():
    rec = prepare_record(date(2024, 1, 14), [])
    assert rec.day_of_week == 0  # Sunday
    assert rec.numbers == ()
    assert rec.doubles_landed == ()
    assert rec.totals_landed == ()
    assert sum(rec.head_counts.values()) == 0


def test_prepare_history_keeps_order():
    organized = [
        {"date": date(2024, 1, 1), "numbers": ["01"]},
        {"date": date(2024, 1, 2), "numbers": ["02", "03"]},
    ]
    history = prepare_history(organized)
    assert [r.date for r in history] == [date(2024, 1, 1), date(2024, 1, 2)]
    assert history[1].unique_numbers == ("02", "03")


def test_prepare_history_empty_warns():
    with pytest.warns(UserWarning, match="No organized data"):
        assert prepare_history([]) == []
