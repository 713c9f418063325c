# dao/stock_purchase.py
import logging
from datetime import date, datetime
from typing import Dict, List
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from dao import material as material_dao
from db.models.material import RawMaterial
from db.models.stock_purchase import StockPurchase
from utils.balance import EPS, to_number
from utils.periods import Period

logger = logging.getLogger(__name__)


def list_purchases(search: str | None = None) -> List[StockPurchase]:
    q = StockPurchase.query.join(
        RawMaterial, RawMaterial.id == StockPurchase.raw_material_id
    )
    s = (search or "").strip()
    if s:
        like = f"%{s}%"
        q = q.filter(or_(StockPurchase.vendor.ilike(like), RawMaterial.name.ilike(like)))
    return q.order_by(StockPurchase.date.asc(), StockPurchase.id.asc()).all()


def create_purchase(vendor, raw_material_id, quantity, date) -> StockPurchase:
    """
    Validate everything before touching the session; a rejected purchase
    leaves no partial row behind.
    """
    vendor = str(vendor or "").strip()
    if not vendor or not raw_material_id or quantity in (None, "") or not date:
        raise ValueError("All fields are required.")

    try:
        material_id = int(raw_material_id)
    except (TypeError, ValueError):
        raise ValueError("Unknown raw material.")
    if material_dao.get_material(material_id) is None:
        raise ValueError("Unknown raw material.")

    qty = to_number(quantity, default=0.0)
    if qty <= EPS:
        raise ValueError("Quantity must be greater than 0.")

    purchase_date = _to_date(date)

    p = StockPurchase(
        vendor=vendor,
        raw_material_id=material_id,
        quantity=qty,
        date=purchase_date,
    )
    db.session.add(p)
    _commit()
    logger.info(
        "Stock purchase #%s recorded: material=%s qty=%s date=%s",
        p.id,
        material_id,
        qty,
        purchase_date.isoformat(),
    )
    return p


def purchase_totals(period: Period) -> Dict[int, float]:
    """{raw_material_id: total quantity} for purchases dated inside the period."""
    rows = (
        db.session.query(
            StockPurchase.raw_material_id, func.sum(StockPurchase.quantity)
        )
        .filter(StockPurchase.date >= period.start, StockPurchase.date < period.end)
        .group_by(StockPurchase.raw_material_id)
        .all()
    )
    return {int(mid): float(total or 0) for (mid, total) in rows}


# ---------- helpers ----------
def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError("Date must be in YYYY-MM-DD format.")


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
