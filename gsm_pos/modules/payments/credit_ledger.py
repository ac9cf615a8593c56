from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...database.repositories.sales_repo import SalesRepo
from ...utils.errors import PaymentRejected
from ...utils.loggers import get_logger
from ..sales.record import Sale
from .payment_utilities import credit

_log = get_logger(__name__)


class CreditLedger:
    """
    Records repayments against credit sales and answers debt questions.

    The sales collection is only written when a payment is accepted.
    """

    def __init__(self, sales_repo: SalesRepo):
        self.sales_repo = sales_repo
        self.last_error_message: Optional[str] = None

    def record_payment(self, sale_id: str, amount: float, *, now: Optional[datetime] = None) -> Sale:
        self.last_error_message = None
        sale = self.sales_repo.get(sale_id)
        if sale is None:
            self.last_error_message = f"Sale with ID {sale_id} not found."
            _log.warning("Payment of %r on unknown sale %s rejected", amount, sale_id)
            raise PaymentRejected(self.last_error_message)
        try:
            updated = credit.apply_credit_payment(sale, amount, now=now)
        except PaymentRejected as e:
            self.last_error_message = str(e)
            _log.warning("Payment of %r on %s rejected: %s", amount, sale.receipt_number, e)
            raise
        self.sales_repo.save(updated)
        _log.info(
            "Recorded payment of %s on %s (paid %s of %s)",
            amount, updated.receipt_number, updated.credit_amount_paid, updated.price,
        )
        return updated

    def outstanding_for_customer(self, customer_name: str) -> float:
        return credit.outstanding_for_customer(self.sales_repo.list(), customer_name)

    def open_debts(self, query: str = "") -> list[Sale]:
        return credit.open_debts(self.sales_repo.list(), query)

    def total_debt(self) -> float:
        return credit.total_debt(self.sales_repo.list())

    def overdue_reminder(self, now: Optional[datetime] = None) -> Optional[str]:
        return credit.overdue_reminder(self.sales_repo.list(), now)


class ReminderGate:
    """Lets the overdue reminder through once per session."""

    def __init__(self):
        self.shown = False

    def take(self, message: Optional[str]) -> Optional[str]:
        """Return `message` the first time a non-empty one arrives, None afterwards."""
        if self.shown or not message:
            return None
        self.shown = True
        return message

    def reset(self) -> None:
        self.shown = False
