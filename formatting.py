# formatting.py
import math
import re
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

NA = "N/A"

CENTS = Decimal("0.01")
WHOLE = Decimal("1")


def _as_float(x):
    try:
        val = float(x)
    except (TypeError, ValueError):
        return None
    return val if math.isfinite(val) else None


def _round(val: float, step: Decimal = CENTS) -> Decimal:
    # halves round away from zero, as the web app's toFixed/Intl output does
    return Decimal(str(val)).quantize(step, rounding=ROUND_HALF_UP)


def fixed(x) -> str:
    val = _as_float(x)
    return f"{_round(val):.2f}" if val is not None else f"{x}"


def number(x) -> str:
    val = _as_float(x)
    return f"{_round(val):,.2f}" if val is not None else f"{x}"


def quantity(x) -> str:
    val = _as_float(x)
    if val is None:
        return "0"
    return f"{val:g}" if val != int(val) else str(int(val))


def money(x, currency: str = "PKR") -> str:
    if x is None or x == "":
        return NA
    val = _as_float(x)
    if val is None:
        return NA
    amount = _round(val)
    code = (currency or "").strip().upper()
    if code in ("USD", "$"):
        sign = "-" if amount < 0 else ""
        return f"{sign}${abs(amount):,.2f}"
    return f"{code or currency} {amount:,.2f}"


def percent(rate) -> str:
    val = _as_float(rate) or 0.0
    return f"{_round(val * 100, WHOLE):.0f}%"


def parse_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    s = str(value).strip()
    if not s:
        return None

    # API timestamps: 2025-01-05, 2025-01-05T10:00:00.000Z, ...
    m = re.match(r"^(\d{4})-(\d{2})-(\d{2})", s)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    for fmt in ("%m/%d/%Y", "%m-%d-%Y", "%d/%m/%Y", "%B %d, %Y", "%b %d, %Y"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            pass
    return None


def short_date(value) -> str:
    d = parse_date(value)
    if d is None:
        return NA
    return f"{d.month}/{d.day}/{d.year}"


def long_date(value) -> str:
    d = parse_date(value)
    if d is None:
        return NA
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def add_days(value, days: int) -> date | None:
    d = parse_date(value)
    if d is None:
        return None
    return d + timedelta(days=int(days or 0))


def safe_filename(name: str, fallback: str = "Document") -> str:
    # strip characters not allowed on Windows/mac paths
    return re.sub(r'[\\/*?:"<>|]', "", (name or "")).strip() or fallback
