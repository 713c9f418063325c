import itertools

import pytest

from utils.balance import (
    StockLevel,
    classify,
    closing_balance,
    production_outflow,
    to_number,
)


def test_closing_balance_formula_over_mixed_inputs():
    openings = [0, 12.5, 1000]
    inflows = [0, 0.1, 250]
    outflows = [0, 0.2, 99.999]
    adjustments = [-9999, -3.3, 0, 7.25]
    for o, i, u, a in itertools.product(openings, inflows, outflows, adjustments):
        assert closing_balance(o, i, u, a) == pytest.approx(o + i - u + a, abs=1e-9)


def test_closing_balance_treats_missing_values_as_zero():
    assert closing_balance(None, 10, None) == 10.0
    assert closing_balance(5, None, 2, None) == 3.0


def test_flour_january_closing():
    assert closing_balance(0, 100, 20, 0) == 80.0


def test_production_outflow_excludes_pending():
    assert production_outflow(10, 5, 1.5) == 16.5
    assert production_outflow(None, 0, None) == 0.0


@pytest.mark.parametrize(
    "closing, min_level, expected",
    [
        (0, 5, StockLevel.OUT),
        (-4, 5, StockLevel.OUT),
        (0.01, 5, StockLevel.LOW),
        (4.999, 5, StockLevel.LOW),
        (5, 5, StockLevel.NORMAL),
        (80, 5, StockLevel.NORMAL),
        (3, 0, StockLevel.NORMAL),
        (3, None, StockLevel.NORMAL),
    ],
)
def test_classify_boundaries(closing, min_level, expected):
    assert classify(closing, min_level) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.5", 12.5),
        (" -3 ", -3.0),
        ("1,200", 1200.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        ("nan", 0.0),
        (7, 7.0),
    ],
)
def test_to_number_is_lenient(raw, expected):
    assert to_number(raw) == expected
