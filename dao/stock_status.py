# dao/stock_status.py
import logging
from typing import Callable, Dict, Iterable, List, Optional
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.material import RawMaterial
from db.models.stock_status import StockStatus
from dao import material as material_dao, stock_purchase as purchase_dao
from utils.balance import EPS, classify, closing_balance, to_number
from utils.batch import BatchResult, RecordFailure
from utils.periods import Period

logger = logging.getLogger(__name__)

UtilizationSource = Callable[[int, Period], float]


def no_utilization(material_id: int, period: Period) -> float:
    """Consumption feed for stock status. Nothing records usage yet, so 0."""
    return 0.0


# ---------- public APIs ----------
def get_stock_status(material_id: int, period: Period) -> Optional[StockStatus]:
    return StockStatus.query.filter_by(
        raw_material_id=int(material_id), year=period.year, month=period.month
    ).one_or_none()


def previous_closing(material_id: int, period: Period) -> float:
    """Closing balance stored for the month before ``period``; 0 if none."""
    prev = get_stock_status(material_id, period.previous())
    return float(prev.closing_balance or 0) if prev else 0.0


def build_stock_status(
    period: Period,
    search: str | None = None,
    classify_levels: bool = True,
    utilization: UtilizationSource = no_utilization,
    adjustments: Dict[int, object] | None = None,
    opening_balances: Dict[int, object] | None = None,
) -> List[dict]:
    """
    One row per raw material for ``period``.

    ``adjustments`` / ``opening_balances`` are request-scoped edits keyed by
    raw_material_id; rows without an edit keep the stored values. Nothing
    is written here.
    """
    # every dependency is loaded before any balance is derived
    materials = material_dao.list_materials(search)
    totals = purchase_dao.purchase_totals(period)
    stored = _rows_by_material(period)
    carried = {
        mid: float(r.closing_balance or 0)
        for mid, r in _rows_by_material(period.previous()).items()
    }

    adjustments = _normalize_edits(adjustments)
    opening_balances = _normalize_edits(opening_balances)

    rows = []
    for m in materials:
        rows.append(
            _compose_row(
                m,
                period,
                stored=stored.get(m.id),
                carried=carried.get(m.id, 0.0),
                purchases=totals.get(m.id, 0.0),
                utilized=float(utilization(m.id, period) or 0),
                adjustment=adjustments.get(m.id),
                opening=opening_balances.get(m.id),
                classify_levels=classify_levels,
            )
        )
    return rows


def preview_stock_status(
    period: Period,
    adjustments: Dict[int, object] | None = None,
    opening_balances: Dict[int, object] | None = None,
    search: str | None = None,
    classify_levels: bool = True,
    utilization: UtilizationSource = no_utilization,
) -> List[dict]:
    """Live recompute for unsaved edits; same math as ``save_stock_status``."""
    return build_stock_status(
        period,
        search=search,
        classify_levels=classify_levels,
        utilization=utilization,
        adjustments=adjustments,
        opening_balances=opening_balances,
    )


def save_stock_status(
    period: Period,
    adjustments: Dict[int, object] | None = None,
    opening_balances: Dict[int, object] | None = None,
    only: Iterable[int] | None = None,
    utilization: UtilizationSource = no_utilization,
) -> BatchResult:
    """
    Upsert every row of the period (or just ``only``), one commit per row.
    A failing row is reported and skipped; rows already committed stay.
    """
    rows = build_stock_status(
        period,
        classify_levels=False,
        utilization=utilization,
        adjustments=adjustments,
        opening_balances=opening_balances,
    )
    if only is not None:
        wanted = _normalize_only(only)
        rows = [r for r in rows if r["raw_material_id"] in wanted]

    result = BatchResult()
    for row in rows:
        key = row["raw_material_id"]
        try:
            _write_row(row)
            result.updated.append(key)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning(
                "Stock status %s for material #%s failed: %s", period, key, e
            )
            result.failed.append(
                RecordFailure(key=key, label=row["raw_material_name"], error=_error_text(e))
            )

    logger.info(
        "Stock status %s saved: %d updated, %d failed",
        period,
        len(result.updated),
        len(result.failed),
    )
    return result


# ---------- helpers ----------
def _rows_by_material(period: Period) -> Dict[int, StockStatus]:
    rows = StockStatus.query.filter_by(year=period.year, month=period.month).all()
    return {int(r.raw_material_id): r for r in rows}


def _normalize_edits(edits: Dict[int, object] | None) -> Dict[int, float]:
    if edits is not None and not isinstance(edits, dict):
        raise ValueError("Edits must be an object keyed by raw material id.")
    out = {}
    for k, v in (edits or {}).items():
        try:
            mid = int(k)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid raw material id: {k!r}")
        if v is None or str(v).strip() == "":
            continue  # blank keeps the stored value
        out[mid] = to_number(v)
    return out


def _normalize_only(only) -> set:
    if isinstance(only, (str, bytes)) or not isinstance(only, (list, tuple, set)):
        raise ValueError("'only' must be a list of raw material ids.")
    try:
        return {int(k) for k in only}
    except (TypeError, ValueError):
        raise ValueError(f"Invalid raw material id in 'only': {only!r}")


def _compose_row(
    m: RawMaterial,
    period: Period,
    stored: Optional[StockStatus],
    carried: float,
    purchases: float,
    utilized: float,
    adjustment: Optional[float],
    opening: Optional[float],
    classify_levels: bool,
) -> dict:
    # opening: manual override > previous month's closing > 0
    if opening is not None:
        opening_manual = abs(opening - carried) > EPS
    elif stored is not None and stored.opening_manual:
        opening = float(stored.opening_balance or 0)
        opening_manual = True
    else:
        opening = carried
        opening_manual = False

    if adjustment is None:
        adjustment = float(stored.adjustment or 0) if stored else 0.0

    closing = closing_balance(opening, purchases, utilized, adjustment)
    min_level = float(m.min_stock or 0)

    row = {
        "key": m.id,
        "id": stored.id if stored else None,
        "raw_material_id": m.id,
        "raw_material_name": m.name,
        "raw_material_category": m.category or "",
        "raw_material_unit": m.unit or "",
        "year": period.year,
        "month": period.month,
        "period": period.key,
        "period_label": period.label,
        "opening_balance": opening,
        "opening_manual": opening_manual,
        "purchases": purchases,
        "utilized": utilized,
        "adjustment": adjustment,
        "closing_balance": closing,
        "min_level": min_level,
    }
    if classify_levels:
        row["status"] = classify(closing, min_level).value
    return row


def _write_row(row: dict) -> StockStatus:
    rec = StockStatus.query.filter_by(
        raw_material_id=row["raw_material_id"], year=row["year"], month=row["month"]
    ).one_or_none()
    if rec is None:
        rec = StockStatus(
            raw_material_id=row["raw_material_id"], year=row["year"], month=row["month"]
        )
        db.session.add(rec)

    rec.opening_balance = row["opening_balance"]
    rec.opening_manual = row["opening_manual"]
    rec.purchases = row["purchases"]
    rec.utilized = row["utilized"]
    rec.adjustment = row["adjustment"]
    rec.closing_balance = row["closing_balance"]
    rec.min_level = row["min_level"]
    _carry_forward(rec)
    _commit()
    return rec


def _carry_forward(rec: StockStatus) -> int:
    """
    Re-derive later saved months that opened on ``rec``'s closing. Stops at
    a missing month or a manual opening; those do not depend on ``rec``.
    """
    last = Period(rec.year, rec.month)
    closing = float(rec.closing_balance or 0)
    later = (
        StockStatus.query.filter(
            StockStatus.raw_material_id == rec.raw_material_id,
            or_(
                StockStatus.year > last.year,
                and_(StockStatus.year == last.year, StockStatus.month > last.month),
            ),
        )
        .order_by(StockStatus.year.asc(), StockStatus.month.asc())
        .all()
    )

    refreshed = 0
    for nxt in later:
        here = Period(nxt.year, nxt.month)
        if here.previous() != last or nxt.opening_manual:
            break
        nxt.opening_balance = closing
        nxt.closing_balance = closing_balance(
            closing, nxt.purchases, nxt.utilized, nxt.adjustment
        )
        closing, last = float(nxt.closing_balance), here
        refreshed += 1

    if refreshed:
        logger.info(
            "Stock status for material #%s: %d later month(s) re-derived from %s",
            rec.raw_material_id,
            refreshed,
            Period(rec.year, rec.month),
        )
    return refreshed


def _error_text(e: SQLAlchemyError) -> str:
    text = str(getattr(e, "orig", None) or e)
    return text.splitlines()[0] if text else e.__class__.__name__


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
