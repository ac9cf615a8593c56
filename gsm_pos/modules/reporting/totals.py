# gsm_pos/modules/reporting/totals.py
"""
Sales totals for the Totals tab and the dashboard list.

All functions are pure: they take a list of Sale records and return plain
values / dataclasses. `price` is the only amount summed; Return sales are
summed as stored.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field as dc_field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from ...constants import TURNOVER_TAX_RATE, VAT_RATE
from ...utils.helpers import DateLike, end_of_day, parse_timestamp, start_of_day
from ...utils.loggers import get_logger
from ..sales.record import PaymentMethod, Sale, SaleType, Status

_log = get_logger(__name__)

FIELD_RECEIPT_DATE = "receipt_date"
FIELD_DATE_BOOKED = "date_booked"


class Granularity(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class TaxBreakdown:
    grand_total: float
    net_total: float
    vat: float
    turnover_tax: float


@dataclass(frozen=True)
class Bucket:
    label: str
    amount: float


@dataclass(frozen=True)
class MethodShare:
    method: PaymentMethod
    amount: float
    share: float  # fraction of the grand total, 0..1


@dataclass
class SalesSummary:
    start: Optional[date]
    end: Optional[date]
    granularity: Granularity
    sales: list[Sale] = dc_field(default_factory=list)
    taxes: TaxBreakdown = dc_field(default_factory=lambda: tax_breakdown(0.0))
    buckets: list[Bucket] = dc_field(default_factory=list)
    methods: list[MethodShare] = dc_field(default_factory=list)

    @property
    def grand_total(self) -> float:
        return self.taxes.grand_total

    @property
    def count(self) -> int:
        return len(self.sales)


# --------------------------- Date helpers ---------------------------

def _sale_moment(sale: Sale, field_name: str) -> Optional[datetime]:
    value = getattr(sale, field_name)
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        _log.warning("Sale %s has an unreadable %s: %r", sale.receipt_number, field_name, value)
        return None


def filter_by_date_range(
    sales: Iterable[Sale],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    *,
    field: str = FIELD_RECEIPT_DATE,
) -> list[Sale]:
    """
    Sales whose `field` falls within [start 00:00, end 23:59:59.999].
    A missing bound is open on that side.
    """
    lo = start_of_day(start) if start else None
    hi = end_of_day(end) if end else None
    if lo is None and hi is None:
        return list(sales)
    out = []
    for s in sales:
        moment = _sale_moment(s, field)
        if moment is None:
            continue
        if lo is not None and moment < lo:
            continue
        if hi is not None and moment > hi:
            continue
        out.append(s)
    return out


def date_range_preset(key: str, today: Optional[date] = None) -> tuple[date, date]:
    """Resolve today / thisweek / thismonth / thisyear to (start, end) dates."""
    today = today or date.today()
    k = (key or "today").lower()
    if k == "today":
        return today, today
    if k == "thisweek":
        # Sunday .. Saturday
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if k == "thismonth":
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    if k == "thisyear":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    raise ValueError(f"Unknown date range preset: {key!r}")


# --------------------------- Totals ---------------------------

def grand_total(sales: Iterable[Sale]) -> float:
    return sum(float(s.price or 0.0) for s in sales)


def tax_breakdown(total: float) -> TaxBreakdown:
    """VAT-inclusive split of the grand total plus 1% turnover tax."""
    net = total / (1 + VAT_RATE)
    return TaxBreakdown(
        grand_total=total,
        net_total=net,
        vat=total - net,
        turnover_tax=total * TURNOVER_TAX_RATE,
    )


def _bucket_key(moment: datetime, granularity: Granularity) -> tuple[tuple, str]:
    if granularity == Granularity.DAILY:
        return (moment.year, moment.month, moment.day), f"{moment.day} {moment:%b %Y}"
    if granularity == Granularity.MONTHLY:
        return (moment.year, moment.month), f"{moment:%b %Y}"
    if granularity == Granularity.QUARTERLY:
        q = (moment.month - 1) // 3 + 1
        return (moment.year, q), f"Q{q} {moment.year}"
    return (moment.year,), str(moment.year)


def time_breakdown(
    sales: Iterable[Sale],
    granularity: Granularity | str = Granularity.DAILY,
    *,
    field: str = FIELD_RECEIPT_DATE,
) -> list[Bucket]:
    """Per-period totals in chronological order."""
    granularity = Granularity(granularity)
    amounts: dict[tuple, float] = defaultdict(float)
    labels: dict[tuple, str] = {}
    for s in sales:
        moment = _sale_moment(s, field)
        if moment is None:
            continue
        key, label = _bucket_key(moment, granularity)
        amounts[key] += float(s.price or 0.0)
        labels[key] = label
    return [Bucket(labels[k], amounts[k]) for k in sorted(amounts)]


def payment_method_breakdown(sales: Iterable[Sale]) -> list[MethodShare]:
    """Per-method totals, largest first, with each method's share of the total."""
    sales = list(sales)
    total = grand_total(sales)
    amounts: dict[PaymentMethod, float] = defaultdict(float)
    for s in sales:
        amounts[s.payment_method] += float(s.price or 0.0)
    rows = [
        MethodShare(method=m, amount=a, share=(a / total) if total else 0.0)
        for m, a in amounts.items()
    ]
    rows.sort(key=lambda r: r.amount, reverse=True)
    return rows


def summarize(
    sales: Iterable[Sale],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    granularity: Granularity | str = Granularity.DAILY,
) -> SalesSummary:
    """Everything the Totals tab shows for one date range."""
    # undated sales fall in no bucket, so they stay out of the totals too
    in_range = [
        s for s in filter_by_date_range(sales, start, end, field=FIELD_RECEIPT_DATE)
        if _sale_moment(s, FIELD_RECEIPT_DATE) is not None
    ]
    return SalesSummary(
        start=start_of_day(start).date() if start else None,
        end=end_of_day(end).date() if end else None,
        granularity=Granularity(granularity),
        sales=in_range,
        taxes=tax_breakdown(grand_total(in_range)),
        buckets=time_breakdown(in_range, granularity),
        methods=payment_method_breakdown(in_range),
    )


# --------------------------- Dashboard list ---------------------------

def filter_sales(
    sales: Iterable[Sale],
    *,
    status: Optional[Status] = None,
    sale_type: Optional[SaleType] = None,
    query: str = "",
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> list[Sale]:
    """
    The dashboard's sale list. `status` only narrows the list while the type
    filter is Repair. Search matches customer name, receipt number or item.
    Newest booking first.
    """
    q = (query or "").strip()
    rows = filter_by_date_range(sales, start, end, field=FIELD_DATE_BOOKED)
    out = []
    for s in rows:
        if sale_type is not None and s.sale_type != sale_type:
            continue
        if sale_type == SaleType.REPAIR and status is not None and s.status != status:
            continue
        if q and not (
            q.lower() in (s.customer_name or "").lower()
            or q in (s.receipt_number or "")
            or q.lower() in (s.phone_type or "").lower()
        ):
            continue
        out.append(s)
    out.sort(key=lambda s: _sale_moment(s, FIELD_DATE_BOOKED) or datetime.min, reverse=True)
    return out
