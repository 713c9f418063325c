# dao/production_status.py
import logging
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.material import RawMaterial
from db.models.process import Process
from db.models.production_status import ProductionStatus
from dao import (
    material as material_dao,
    process as process_dao,
    stock_purchase as purchase_dao,
)
from utils.balance import closing_balance, production_outflow, to_number
from utils.batch import BatchResult, RecordFailure
from utils.periods import Period

logger = logging.getLogger(__name__)

Key = Tuple[int, int]  # (raw_material_id, process_id)

ACTIVITY_FIELDS = ("assigned", "completed", "wastage", "pending")
EDITABLE_FIELDS = ACTIVITY_FIELDS + ("adjustment",)


def parse_key(value) -> Key:
    """'3:5' / (3, 5) / [3, 5] -> (3, 5)"""
    if isinstance(value, str):
        parts = value.split(":")
    else:
        parts = list(value or [])
    if len(parts) != 2:
        raise ValueError(f"Invalid production status key: {value!r}")
    try:
        return int(parts[0]), int(parts[1])
    except (TypeError, ValueError):
        raise ValueError(f"Invalid production status key: {value!r}")


def format_key(key: Key) -> str:
    return f"{key[0]}:{key[1]}"


# ---------- public APIs ----------
def get_production_status(
    material_id: int, process_id: int, period: Period
) -> Optional[ProductionStatus]:
    return ProductionStatus.query.filter_by(
        raw_material_id=int(material_id),
        process_id=int(process_id),
        year=period.year,
        month=period.month,
    ).one_or_none()


def previous_closing(material_id: int, process_id: int, period: Period) -> float:
    prev = get_production_status(material_id, process_id, period.previous())
    return float(prev.closing_balance or 0) if prev else 0.0


def build_production_status(
    period: Period,
    process_id: int | None = None,
    search: str | None = None,
    entries: Dict[Key, dict] | None = None,
) -> List[dict]:
    """
    One row per (raw material, process). ``entries`` holds unsaved edits
    keyed by (raw_material_id, process_id).
    """
    materials = material_dao.list_materials()
    processes = process_dao.list_processes()
    if process_id is not None:
        processes = [p for p in processes if p.id == int(process_id)]
    totals = purchase_dao.purchase_totals(period)
    stored = _rows_by_key(period)
    carried = {
        k: float(r.closing_balance or 0)
        for k, r in _rows_by_key(period.previous()).items()
    }
    entries = _normalize_entries(entries)

    s = (search or "").strip().lower()
    rows = []
    for m in materials:
        for p in processes:
            if s and not _matches(s, m, p):
                continue
            key = (m.id, p.id)
            rows.append(
                _compose_row(
                    m,
                    p,
                    period,
                    stored=stored.get(key),
                    opening=carried.get(key, 0.0),
                    purchases=totals.get(m.id, 0.0),
                    edits=entries.get(key, {}),
                )
            )
    return rows


def save_production_status(
    period: Period,
    entries: Dict[Key, dict] | None = None,
    process_id: int | None = None,
    only: Iterable[Key] | None = None,
) -> BatchResult:
    rows = build_production_status(period, process_id=process_id, entries=entries)
    if only is not None:
        if isinstance(only, (str, bytes)) or not isinstance(only, (list, tuple, set)):
            raise ValueError("'only' must be a list of production status keys.")
        wanted = {parse_key(k) for k in only}
        rows = [r for r in rows if r["key"] in wanted]

    result = BatchResult()
    for row in rows:
        key = row["key"]
        try:
            _write_row(row)
            result.updated.append(key)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning(
                "Production status %s for %s failed: %s", period, format_key(key), e
            )
            result.failed.append(
                RecordFailure(
                    key=key,
                    label=f"{row['raw_material_name']} / {row['process']}",
                    error=_error_text(e),
                )
            )

    logger.info(
        "Production status %s saved: %d updated, %d failed",
        period,
        len(result.updated),
        len(result.failed),
    )
    return result


# ---------- helpers ----------
def _rows_by_key(period: Period) -> Dict[Key, ProductionStatus]:
    rows = ProductionStatus.query.filter_by(year=period.year, month=period.month).all()
    return {(int(r.raw_material_id), int(r.process_id)): r for r in rows}


def _matches(s: str, m: RawMaterial, p: Process) -> bool:
    return (
        s in (m.name or "").lower()
        or s in (m.category or "").lower()
        or s in (p.name or "").lower()
    )


def _normalize_entries(entries: Dict[Key, dict] | None) -> Dict[Key, dict]:
    if entries is not None and not isinstance(entries, dict):
        raise ValueError("Entries must be keyed by (raw_material_id, process_id).")
    out = {}
    for k, fields in (entries or {}).items():
        key = parse_key(k)
        fields = fields or {}
        if not isinstance(fields, dict):
            raise ValueError(f"Entry {format_key(key)} must be an object of fields.")
        out[key] = {
            f: to_number(fields[f])
            for f in EDITABLE_FIELDS
            if fields.get(f) is not None and str(fields[f]).strip() != ""
        }
    return out


def _compose_row(
    m: RawMaterial,
    p: Process,
    period: Period,
    stored: Optional[ProductionStatus],
    opening: float,
    purchases: float,
    edits: dict,
) -> dict:
    values = {}
    for f in EDITABLE_FIELDS:
        if f in edits:
            values[f] = edits[f]
        else:
            values[f] = float(getattr(stored, f) or 0) if stored else 0.0

    outflow = production_outflow(
        values["assigned"], values["completed"], values["wastage"]
    )
    closing = closing_balance(opening, purchases, outflow, values["adjustment"])

    return {
        "key": (m.id, p.id),
        "key_str": format_key((m.id, p.id)),
        "id": stored.id if stored else None,
        "raw_material_id": m.id,
        "raw_material_name": m.name,
        "raw_material_category": m.category or "",
        "raw_material_unit": m.unit or "",
        "process_id": p.id,
        "process": p.name,
        "year": period.year,
        "month": period.month,
        "period": period.key,
        "period_label": period.label,
        "opening_balance": opening,
        "purchases": purchases,
        **values,
        "closing_balance": closing,
        "min_level": float(m.min_stock or 0),
    }


def _write_row(row: dict) -> ProductionStatus:
    rec = ProductionStatus.query.filter_by(
        raw_material_id=row["raw_material_id"],
        process_id=row["process_id"],
        year=row["year"],
        month=row["month"],
    ).one_or_none()
    if rec is None:
        rec = ProductionStatus(
            raw_material_id=row["raw_material_id"],
            process_id=row["process_id"],
            year=row["year"],
            month=row["month"],
        )
        db.session.add(rec)

    rec.opening_balance = row["opening_balance"]
    rec.purchases = row["purchases"]
    for f in EDITABLE_FIELDS:
        setattr(rec, f, row[f])
    rec.closing_balance = row["closing_balance"]
    rec.min_level = row["min_level"]
    _carry_forward(rec)
    _commit()
    return rec


def _carry_forward(rec: ProductionStatus) -> int:
    """Re-derive the unbroken run of later saved months for the same key."""
    last = Period(rec.year, rec.month)
    closing = float(rec.closing_balance or 0)
    later = (
        ProductionStatus.query.filter(
            ProductionStatus.raw_material_id == rec.raw_material_id,
            ProductionStatus.process_id == rec.process_id,
            or_(
                ProductionStatus.year > last.year,
                and_(
                    ProductionStatus.year == last.year,
                    ProductionStatus.month > last.month,
                ),
            ),
        )
        .order_by(ProductionStatus.year.asc(), ProductionStatus.month.asc())
        .all()
    )

    refreshed = 0
    for nxt in later:
        here = Period(nxt.year, nxt.month)
        if here.previous() != last:
            break
        outflow = production_outflow(nxt.assigned, nxt.completed, nxt.wastage)
        nxt.opening_balance = closing
        nxt.closing_balance = closing_balance(
            closing, nxt.purchases, outflow, nxt.adjustment
        )
        closing, last = float(nxt.closing_balance), here
        refreshed += 1

    if refreshed:
        logger.info(
            "Production status %s: %d later month(s) re-derived from %s",
            format_key((rec.raw_material_id, rec.process_id)),
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
