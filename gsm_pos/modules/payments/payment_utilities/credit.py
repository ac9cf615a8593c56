"""
payment_utilities/credit.py

Pure helpers for credit sales: partial payments, settlement, overdue
detection and per-customer debt.

Do not import repos or open DB connections here.
Only compute numbers and text; persistence belongs to CreditLedger.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from ....utils.errors import PaymentRejected
from ....utils.helpers import end_of_day, fmt_amount, now_iso, parse_timestamp
from ...sales.record import PaymentMethod, Sale

__all__ = [
    "clamp_non_negative",
    "remaining_credit",
    "apply_credit_payment",
    "is_open_debt",
    "is_overdue",
    "days_overdue",
    "outstanding_for_customer",
    "open_debts",
    "total_debt",
    "overdue_debts",
    "overdue_reminder",
]


# -----------------------------
# Core utilities
# -----------------------------

def clamp_non_negative(x: float) -> float:
    """Return x if x > 0, else 0.0."""
    return x if x > 0.0 else 0.0


def _paid(sale: Sale) -> float:
    return float(sale.credit_amount_paid or 0.0)


def remaining_credit(sale: Sale) -> float:
    """price - credit_amount_paid, clamped at >= 0."""
    return clamp_non_negative(float(sale.price or 0.0) - _paid(sale))


def is_open_debt(sale: Sale) -> bool:
    return sale.payment_method == PaymentMethod.CREDIT and not sale.credit_paid


# -----------------------------
# Payments
# -----------------------------

def apply_credit_payment(sale: Sale, amount: float, *, now: Optional[datetime] = None) -> Sale:
    """
    Returns the sale with `amount` added to credit_amount_paid.

    Rejected (PaymentRejected, nothing changed) when the sale is not a
    credit sale, amount <= 0, or amount exceeds what is still owed.
    Reaching the price marks the sale paid and stamps credit_paid_date the
    first time only.
    """
    if sale.payment_method != PaymentMethod.CREDIT:
        raise PaymentRejected(f"Sale {sale.receipt_number or sale.id} is not a credit sale.")
    try:
        amount = float(amount)
    except (TypeError, ValueError) as e:
        raise PaymentRejected(f"Payment amount {amount!r} is not a number.") from e
    remaining = remaining_credit(sale)
    if amount <= 0 or amount > remaining:
        raise PaymentRejected(
            f"Please enter a valid amount between 0 and {fmt_amount(remaining)}."
        )

    paid = _paid(sale) + amount
    settled = paid >= float(sale.price or 0.0)
    paid_date = sale.credit_paid_date
    if settled and not paid_date:
        paid_date = now_iso(now)
    return replace(sale, credit_amount_paid=paid, credit_paid=settled, credit_paid_date=paid_date)


# -----------------------------
# Overdue
# -----------------------------

def _due_end(sale: Sale) -> Optional[datetime]:
    if not sale.credit_due_date:
        return None
    try:
        return end_of_day(sale.credit_due_date)
    except ValueError:
        return None


def is_overdue(sale: Sale, now: Optional[datetime] = None) -> bool:
    """Unpaid credit whose due date (end of that day) has passed."""
    if not is_open_debt(sale):
        return False
    due = _due_end(sale)
    return due is not None and due < (now or datetime.now())


def days_overdue(sale: Sale, now: Optional[datetime] = None) -> int:
    """Whole days since the due date's end of day; 0 when not overdue."""
    due = _due_end(sale)
    if due is None or not is_open_debt(sale):
        return 0
    delta = (now or datetime.now()) - due
    return max(delta.days, 0)


# -----------------------------
# Collections
# -----------------------------

def outstanding_for_customer(sales: Iterable[Sale], customer_name: str) -> float:
    """Total still owed by `customer_name` across all their unpaid credit sales."""
    return sum(
        remaining_credit(s)
        for s in sales
        if is_open_debt(s) and s.customer_name == customer_name
    )


def _due_sort_key(sale: Sale) -> datetime:
    if sale.credit_due_date:
        try:
            return parse_timestamp(sale.credit_due_date)
        except ValueError:
            pass
    return datetime.min


def open_debts(sales: Iterable[Sale], query: str = "") -> list[Sale]:
    """
    Unpaid credit sales matching `query` (customer name, phone number or ID
    number), earliest due first; sales without a due date lead.
    """
    q = (query or "").strip()
    out = []
    for s in sales:
        if not is_open_debt(s):
            continue
        if q and not (
            q.lower() in (s.customer_name or "").lower()
            or q in (s.customer_number or "")
            or q in (s.customer_id_number or "")
        ):
            continue
        out.append(s)
    out.sort(key=_due_sort_key)
    return out


def total_debt(sales: Iterable[Sale]) -> float:
    return sum(remaining_credit(s) for s in sales if is_open_debt(s))


def overdue_debts(sales: Iterable[Sale], now: Optional[datetime] = None) -> list[Sale]:
    now = now or datetime.now()
    return [s for s in open_debts(sales) if is_overdue(s, now)]


def overdue_reminder(sales: Iterable[Sale], now: Optional[datetime] = None) -> Optional[str]:
    """Reminder text naming every customer with an overdue debt, or None."""
    overdue = overdue_debts(sales, now)
    if not overdue:
        return None
    names = ", ".join(f"{s.customer_name} ({s.customer_number or 'N/A'})" for s in overdue)
    return f"Payment Reminder: The following customers have overdue payments: {names}. Please follow up."
