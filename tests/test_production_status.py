import pytest
from sqlalchemy.exc import OperationalError

from dao import production_status as ps_dao
from db.models.production_status import ProductionStatus
from utils.periods import Period

JAN = Period(2025, 1)
FEB = Period(2025, 2)


def _row(rows, key):
    return next(r for r in rows if r["key"] == key)


def test_one_row_per_material_and_process(make_material, make_process):
    flour = make_material("Flour")
    sugar = make_material("Sugar")
    baking = make_process("Baking")
    mixing = make_process("Mixing")

    rows = ps_dao.build_production_status(JAN)
    assert {r["key"] for r in rows} == {
        (flour, baking),
        (flour, mixing),
        (sugar, baking),
        (sugar, mixing),
    }

    only_mixing = ps_dao.build_production_status(JAN, process_id=mixing)
    assert {r["process"] for r in only_mixing} == {"Mixing"}


def test_search_matches_process_name(make_material, make_process):
    make_material("Flour")
    make_process("Baking")
    make_process("Packing")

    rows = ps_dao.build_production_status(JAN, search="pack")
    assert [r["process"] for r in rows] == ["Packing"]


def test_outflow_is_assigned_completed_wastage(make_material, make_process, add_purchase):
    flour = make_material("Flour")
    baking = make_process("Baking")
    add_purchase(flour, 100, "2025-01-04")

    entries = {
        (flour, baking): {
            "assigned": 30,
            "completed": 20,
            "wastage": 5,
            "pending": 12,
            "adjustment": 2,
        }
    }
    row = _row(ps_dao.build_production_status(JAN, entries=entries), (flour, baking))
    # 0 + 100 - (30 + 20 + 5) + 2; pending is not subtracted
    assert row["closing_balance"] == pytest.approx(47.0)

    result = ps_dao.save_production_status(JAN, entries=entries)
    assert result.ok
    stored = ps_dao.get_production_status(flour, baking, JAN)
    assert stored.closing_balance == pytest.approx(47.0)
    assert stored.pending == 12.0


def test_adjustment_is_applied_once_on_resubmit(make_material, make_process, add_purchase):
    flour = make_material("Flour")
    baking = make_process("Baking")
    add_purchase(flour, 10, "2025-01-04")

    for _ in range(2):
        ps_dao.save_production_status(JAN, entries={"%d:%d" % (flour, baking): {"adjustment": 4}})

    stored = ps_dao.get_production_status(flour, baking, JAN)
    assert stored.adjustment == 4.0
    assert stored.closing_balance == 14.0
    assert ProductionStatus.query.count() == 1


def test_opening_carries_per_material_and_process(make_material, make_process, add_purchase):
    flour = make_material("Flour")
    baking = make_process("Baking")
    mixing = make_process("Mixing")
    add_purchase(flour, 50, "2025-01-04")

    ps_dao.save_production_status(
        JAN,
        entries={
            (flour, baking): {"assigned": 10},
            (flour, mixing): {"assigned": 45},
        },
    )

    rows = ps_dao.build_production_status(FEB)
    assert _row(rows, (flour, baking))["opening_balance"] == 40.0
    assert _row(rows, (flour, mixing))["opening_balance"] == 5.0
    assert ps_dao.previous_closing(flour, baking, FEB) == 40.0
    assert ps_dao.previous_closing(flour, baking, JAN) == 0.0


def test_failed_record_reported_by_key(make_material, make_process, monkeypatch):
    a = make_material("A")
    b = make_material("B")
    c = make_material("C")
    baking = make_process("Baking")

    original = ps_dao._write_row

    def flaky(row):
        if row["raw_material_id"] == b:
            raise OperationalError("UPDATE production_status", {}, Exception("timeout"))
        return original(row)

    monkeypatch.setattr(ps_dao, "_write_row", flaky)

    result = ps_dao.save_production_status(JAN)

    assert result.updated == [(a, baking), (c, baking)]
    assert result.failed_keys == [(b, baking)]
    assert result.failed[0].label == "B / Baking"
    assert ps_dao.get_production_status(b, baking, JAN) is None
    assert ps_dao.get_production_status(c, baking, JAN) is not None


@pytest.mark.parametrize("raw", ["3", "a:b", "1:2:3", None])
def test_parse_key_rejects_malformed(raw):
    with pytest.raises(ValueError):
        ps_dao.parse_key(raw)


def test_parse_key_accepts_string_and_pair():
    assert ps_dao.parse_key("3:5") == (3, 5)
    assert ps_dao.parse_key([3, 5]) == (3, 5)
    assert ps_dao.format_key((3, 5)) == "3:5"


def test_resaving_a_month_refreshes_later_saved_months(make_material, make_process, add_purchase):
    flour = make_material("Flour")
    baking = make_process("Baking")
    add_purchase(flour, 60, "2025-01-04")
    ps_dao.save_production_status(JAN)
    ps_dao.save_production_status(FEB, entries={(flour, baking): {"wastage": 5}})

    ps_dao.save_production_status(JAN, entries={(flour, baking): {"assigned": 20}})

    feb = ps_dao.get_production_status(flour, baking, FEB)
    assert feb.opening_balance == 40.0
    assert feb.closing_balance == 35.0
    rows = ps_dao.build_production_status(Period(2025, 3))
    assert _row(rows, (flour, baking))["opening_balance"] == 35.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"only": 5},
        {"entries": [1, 2]},
        {"entries": {"1:1": [3]}},
    ],
)
def test_malformed_arguments_are_validation_errors(make_material, make_process, kwargs):
    make_material("Flour")
    make_process("Baking")
    with pytest.raises(ValueError):
        ps_dao.save_production_status(JAN, **kwargs)
    assert ProductionStatus.query.count() == 0
