# utils/balance.py
"""
Balance reconciliation rules shared by every status page.

closing = opening + inflow - outflow + adjustment

``closing_balance`` is the only place this is computed; page rendering,
live preview and bulk update all call it.
"""
import enum
import math
from typing import Optional

EPS = 1e-9


class StockLevel(enum.Enum):
    OUT = "out"
    LOW = "low"
    NORMAL = "normal"


def to_number(value, default: float = 0.0) -> float:
    """Lenient parse of a user-entered quantity; blank or junk -> default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        f = float(value)
    else:
        s = str(value).strip().replace(",", "")
        if not s:
            return default
        try:
            f = float(s)
        except ValueError:
            return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def closing_balance(opening, inflow, outflow, adjustment=0.0) -> float:
    return (
        float(opening or 0)
        + float(inflow or 0)
        - float(outflow or 0)
        + float(adjustment or 0)
    )


def production_outflow(assigned, completed, wastage) -> float:
    """Pending is shown next to these but never consumes stock."""
    return float(assigned or 0) + float(completed or 0) + float(wastage or 0)


def classify(closing, min_level: Optional[float]) -> StockLevel:
    c = float(closing or 0)
    if c <= 0:
        return StockLevel.OUT
    if c < float(min_level or 0):
        return StockLevel.LOW
    return StockLevel.NORMAL
