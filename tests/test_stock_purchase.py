from datetime import date

import pytest

from dao import stock_purchase as purchase_dao
from db.models.stock_purchase import StockPurchase
from utils.periods import Period


def test_create_purchase_stores_row(make_material):
    flour = make_material("Flour")

    p = purchase_dao.create_purchase("Binh An Flour Co.", str(flour), "25.5", "2025-01-09")

    assert p.id is not None
    assert p.raw_material_id == flour
    assert p.quantity == 25.5
    assert p.date == date(2025, 1, 9)


@pytest.mark.parametrize(
    "vendor, material, quantity, on, message",
    [
        ("", "MAT", 5, "2025-01-09", "All fields are required."),
        ("Vendor", None, 5, "2025-01-09", "All fields are required."),
        ("Vendor", "MAT", "", "2025-01-09", "All fields are required."),
        ("Vendor", "MAT", 5, "", "All fields are required."),
        ("Vendor", "999", 5, "2025-01-09", "Unknown raw material."),
        ("Vendor", "abc", 5, "2025-01-09", "Unknown raw material."),
        ("Vendor", "MAT", 0, "2025-01-09", "Quantity must be greater than 0."),
        ("Vendor", "MAT", "-3", "2025-01-09", "Quantity must be greater than 0."),
        ("Vendor", "MAT", 5, "09/01/2025", "Date must be in YYYY-MM-DD format."),
    ],
)
def test_invalid_purchase_is_rejected_before_any_write(
    make_material, vendor, material, quantity, on, message
):
    flour = make_material("Flour")
    if material == "MAT":
        material = flour

    with pytest.raises(ValueError) as exc:
        purchase_dao.create_purchase(vendor, material, quantity, on)

    assert str(exc.value) == message
    assert StockPurchase.query.count() == 0


def test_list_purchases_ordered_by_date_with_search(make_material, add_purchase):
    flour = make_material("Flour")
    sugar = make_material("Sugar")
    add_purchase(sugar, 3, "2025-01-20", vendor="Bien Hoa Sugar")
    add_purchase(flour, 5, "2025-01-02", vendor="Binh An Flour Co.")

    assert [p.vendor for p in purchase_dao.list_purchases()] == [
        "Binh An Flour Co.",
        "Bien Hoa Sugar",
    ]
    assert [p.raw_material_id for p in purchase_dao.list_purchases("sugar")] == [sugar]


def test_purchase_totals_group_by_material(make_material, add_purchase):
    flour = make_material("Flour")
    sugar = make_material("Sugar")
    add_purchase(flour, 5, "2025-01-02")
    add_purchase(flour, 7.5, "2025-01-30")
    add_purchase(sugar, 2, "2025-02-01")

    assert purchase_dao.purchase_totals(Period(2025, 1)) == {flour: 12.5}
    assert purchase_dao.purchase_totals(Period(2025, 2)) == {sugar: 2.0}
