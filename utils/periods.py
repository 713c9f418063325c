# utils/periods.py
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

# Fixed table so labels never depend on the server locale.
MONTH_ABBR = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(frozen=True, order=True)
class Period:
    """One reconciliation cycle: a calendar month of a year."""

    year: int
    month: int  # 1..12

    def __post_init__(self):
        if not 1 <= int(self.month) <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        # date() stops at 9999-12-31 and the range end needs the month after
        if not 1 <= int(self.year) < 9999:
            raise ValueError(f"Invalid year: {self.year}")

    @classmethod
    def of(cls, d: date) -> "Period":
        return cls(d.year, d.month)

    @classmethod
    def current(cls) -> "Period":
        return cls.of(date.today())

    @classmethod
    def parse(cls, text: Optional[str]) -> "Period":
        """Accepts ``YYYY-MM`` or a ``YYYY-MM-DD`` status date."""
        s = str(text or "").strip()
        for fmt in ("%Y-%m-%d", "%Y-%m"):
            try:
                return cls.of(datetime.strptime(s, fmt).date())
            except ValueError:
                continue
        raise ValueError(f"Invalid period '{s}', expected YYYY-MM or YYYY-MM-DD.")

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    def next(self) -> "Period":
        if self.month == 12:
            return Period(self.year + 1, 1)
        return Period(self.year, self.month + 1)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        """Exclusive upper bound (first day of the next month)."""
        if self.month == 12:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    def contains(self, d: date) -> bool:
        return self.start <= d < self.end

    @property
    def short_month(self) -> str:
        return MONTH_ABBR[self.month - 1]

    @property
    def label(self) -> str:
        return f"{self.short_month} {self.year}"

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self):
        return self.key


def period_from_params(params) -> Period:
    """
    Resolve the period of a request from ``period`` (YYYY-MM) or ``date``
    (YYYY-MM-DD, the status date picker). Falls back to the current month.
    """
    raw = params.get("period") or params.get("date")
    if not raw:
        return Period.current()
    return Period.parse(raw)
