# gsm_pos/utils/helpers.py
from __future__ import annotations

from datetime import date, datetime, time
import logging
import uuid
from typing import Union, Optional

NumberLike = Union[float, int, str]
DateLike = Union[date, datetime, str]

_log = logging.getLogger(__name__)


def new_id() -> str:
    """Opaque record id (uuid4 hex)."""
    return uuid.uuid4().hex


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def now_iso(now: Optional[datetime] = None) -> str:
    """Timestamp used for receipt_date / credit_paid_date (local, seconds precision)."""
    return (now or datetime.now()).replace(microsecond=0).isoformat()


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = float(v)
    except Exception as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"


def fmt_amount(v: NumberLike) -> str:
    """Receipt style amount: thousands separators, decimals only when present (15,000 / 99.5)."""
    try:
        x = float(v)
    except (TypeError, ValueError):
        return str(v)
    if x.is_integer():
        return f"{int(x):,}"
    return f"{x:,.2f}".rstrip("0")


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def parse_timestamp(value: DateLike) -> datetime:
    """
    Parse a stored date/timestamp into a naive local datetime.

    Accepts 'YYYY-MM-DD', ISO timestamps with or without offset (a trailing
    'Z' is UTC), date and datetime objects. Aware values are converted to
    local time so every comparison happens on one clock.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        text = str(value or "").strip()
        if not text:
            raise ValueError("Empty date value.")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"Could not parse {value!r} as a date.") from e
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(parse_timestamp(value).date(), time.min)


def end_of_day(value: DateLike) -> datetime:
    """23:59:59.999 of the given day (millisecond resolution, as the shop UI uses)."""
    return datetime.combine(parse_timestamp(value).date(), time(23, 59, 59, 999000))


def _ordinal_suffix(day: int) -> str:
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def fmt_standard_date(value: DateLike) -> str:
    """e.g. '26 Oct 2023'"""
    d = parse_timestamp(value)
    return f"{d.day} {d:%b %Y}"


def fmt_print_date(value: DateLike) -> str:
    """e.g. '26th October 2023'"""
    d = parse_timestamp(value)
    return f"{d.day}{_ordinal_suffix(d.day)} {d:%B %Y}"


def fmt_full_datetime(value: DateLike) -> str:
    """e.g. '26 Oct 2023, 10:00 AM'"""
    d = parse_timestamp(value)
    return f"{d.day} {d:%b %Y}, {d:%I:%M %p}"
