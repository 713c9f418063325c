from datetime import date

import pytest

from utils.periods import Period, period_from_params


def test_previous_rolls_back_over_year_boundary():
    assert Period(2025, 1).previous() == Period(2024, 12)
    assert Period(2025, 7).previous() == Period(2025, 6)


def test_next_rolls_over_year_boundary():
    assert Period(2024, 12).next() == Period(2025, 1)


def test_parse_accepts_month_and_status_date():
    assert Period.parse("2025-03") == Period(2025, 3)
    assert Period.parse("2025-03-17") == Period(2025, 3)


@pytest.mark.parametrize("raw", ["", "2025-13", "March 2025", None, "2025/03"])
def test_parse_rejects_garbage(raw):
    with pytest.raises(ValueError):
        Period.parse(raw)


def test_month_out_of_range_rejected():
    with pytest.raises(ValueError):
        Period(2025, 0)


def test_range_is_half_open():
    p = Period(2024, 2)
    assert p.start == date(2024, 2, 1)
    assert p.end == date(2024, 3, 1)
    assert p.contains(date(2024, 2, 29))
    assert not p.contains(date(2024, 3, 1))
    assert not p.contains(date(2024, 1, 31))


def test_label_does_not_depend_on_locale():
    assert Period(2025, 1).label == "Jan 2025"
    assert Period(2025, 12).short_month == "Dec"
    assert Period(2025, 1).key == "2025-01"


def test_period_from_params_prefers_period_then_date():
    assert period_from_params({"period": "2025-02", "date": "2024-01-05"}) == Period(2025, 2)
    assert period_from_params({"date": "2024-01-05"}) == Period(2024, 1)
    assert period_from_params({}) == Period.current()


@pytest.mark.parametrize("raw", ["9999-12", "9999-01-05", "0000-01"])
def test_parse_rejects_years_without_a_month_end(raw):
    with pytest.raises(ValueError):
        Period.parse(raw)


def test_last_supported_month_has_an_end():
    assert Period(9998, 12).end == date(9999, 1, 1)
    with pytest.raises(ValueError):
        Period(9999, 1)
