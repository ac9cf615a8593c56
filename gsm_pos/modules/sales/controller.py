# gsm_pos/modules/sales/controller.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from ...app_state import AppState
from ...utils.errors import DomainError, PermissionDenied
from ...utils.loggers import get_logger
from ..login.model import User
from . import receipt
from .record import Sale, Status, set_status
from .validation import finalize_sale, validate_sale

_log = get_logger(__name__)


class SalesController:
    """
    Save / edit / status / delete / scan lookup for sales.

    Public attrs (set after each call):
      - last_errors: dict[str, str]    field-keyed validation errors from save()
      - last_error_message: str | None
    Failed calls never change the stored collection.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self.last_errors: dict[str, str] = {}
        self.last_error_message: Optional[str] = None

    @property
    def repo(self):
        return self.state.sales

    # ----------------------------- Public API -----------------------------

    def save(
        self,
        sale: Sale,
        *,
        other_item_name: str = "",
        other_repair: str = "",
        now: Optional[datetime] = None,
    ) -> Optional[Sale]:
        """
        Validate and store a draft. New drafts (no id, or an id not yet
        stored) get a receipt number; edits keep theirs.
        """
        self._reset()
        errors = validate_sale(sale, other_item_name=other_item_name, other_repair=other_repair)
        if errors:
            self.last_errors = errors
            self.last_error_message = "Please fill in all required fields."
            return None

        sales = self.repo.list()
        existing = next((s for s in sales if sale.id and s.id == sale.id), None)
        try:
            final = finalize_sale(
                sale, existing, sales,
                now=now, other_item_name=other_item_name, other_repair=other_repair,
            )
        except DomainError as e:
            self.last_error_message = str(e)
            return None

        self.repo.save(final)
        _log.info("%s sale %s (%s)", "Updated" if existing else "Created", final.receipt_number, final.sale_type.value)
        return final

    def edit(self, sale_id: str, user: Optional[User] = None) -> Optional[Sale]:
        """The stored sale, for editing; Admin only."""
        self._reset()
        try:
            self.state.login.require_sale_editor(user)
        except PermissionDenied as e:
            self.last_error_message = str(e)
            return None
        sale = self.repo.get(sale_id)
        if sale is None:
            self.last_error_message = f"Sale with ID {sale_id} not found."
        return sale

    def update_status(self, sale_id: str, status: Status) -> Optional[Sale]:
        self._reset()
        sale = self.repo.get(sale_id)
        if sale is None:
            self.last_error_message = f"Sale with ID {sale_id} not found."
            return None
        try:
            updated = set_status(sale, status)
        except DomainError as e:
            self.last_error_message = str(e)
            return None
        self.repo.save(updated)
        _log.info("Sale %s is now %s", updated.receipt_number, updated.status.value)
        return updated

    def delete(self, sale_id: str, *, confirmed: bool = False) -> bool:
        self._reset()
        return self.repo.delete(sale_id, confirmed=confirmed)

    def lookup_scanned(self, payload: str) -> Optional[Sale]:
        """A receipt's QR code carries the bare sale id."""
        self._reset()
        sale_id = (payload or "").strip()
        sale = self.repo.get(sale_id) if sale_id else None
        if sale is None:
            self.last_error_message = f"Sale with ID {sale_id} not found."
            _log.warning("Scanned code %r matched no sale", sale_id)
        return sale

    def technician_name(self, sale: Sale) -> str:
        return self.state.technicians.name_for(sale.assigned_technician)

    # ----------------------------- Receipts -----------------------------

    def _receipt_args(self, sale: Sale) -> dict:
        return {
            "technicians": self.state.technicians.list(),
            "outstanding": self.state.ledger.outstanding_for_customer(sale.customer_name),
        }

    def receipt_text(self, sale: Sale) -> str:
        return receipt.receipt_text(sale, **self._receipt_args(sale))

    def share_urls(self, sale: Sale) -> list[str]:
        return receipt.share_urls(sale, self.receipt_text(sale))

    def export_pdf(self, sale: Sale, directory: Path | str) -> Path:
        html = receipt.receipt_html(sale, **self._receipt_args(sale))
        name = receipt.safe_filename(sale.receipt_number or sale.id or "")
        return receipt.export_receipt_pdf(html, Path(directory) / f"{name}.pdf")

    # ----------------------------- Internals -----------------------------

    def _reset(self) -> None:
        self.last_errors = {}
        self.last_error_message = None
