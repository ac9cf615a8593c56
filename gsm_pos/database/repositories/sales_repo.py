from __future__ import annotations

from typing import Iterable, Optional

from ...constants import KEY_SALES, RECEIPT_PREFIX
from ...modules.sales.record import Sale, next_receipt_number
from ...utils.errors import DomainError
from ...utils.loggers import get_logger
from .store_repo import KeyValueStore

_log = get_logger(__name__)


class SalesRepo:
    """
    The gsm-sales collection. Newest sales are kept at the front, as the
    register shows them.
    """

    def __init__(self, store: KeyValueStore, key: str = KEY_SALES):
        self.store = store
        self.key = key

    # ------------------------------- reads -------------------------------

    def list(self) -> list[Sale]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            _log.warning("Collection %r is not a list; treating it as empty.", self.key)
            return []
        sales: list[Sale] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                sales.append(Sale.from_dict(item))
            except DomainError as e:
                _log.warning("Skipping unreadable sale %r: %s", item.get("id"), e)
        return sales

    def get(self, sale_id: str) -> Optional[Sale]:
        for s in self.list():
            if s.id == sale_id:
                return s
        return None

    def next_receipt_number(self, prefix: str = RECEIPT_PREFIX) -> str:
        return next_receipt_number(self.list(), prefix)

    # ------------------------------ writes -------------------------------

    def replace_all(self, sales: Iterable[Sale]) -> None:
        self.store.save(self.key, [s.to_dict() for s in sales])

    def save(self, sale: Sale) -> Sale:
        """Replace the sale with the same id, or insert it at the front."""
        if not sale.id:
            raise DomainError("Sale has no id; finalize it before saving.")
        sales = self.list()
        for i, s in enumerate(sales):
            if s.id == sale.id:
                sales[i] = sale
                break
        else:
            sales.insert(0, sale)
        self.replace_all(sales)
        return sale

    def delete(self, sale_id: str, *, confirmed: bool = False) -> bool:
        """Remove a sale permanently. Nothing happens unless `confirmed`."""
        if not confirmed:
            return False
        sales = self.list()
        kept = [s for s in sales if s.id != sale_id]
        if len(kept) == len(sales):
            return False
        self.replace_all(kept)
        _log.info("Deleted sale %s", sale_id)
        return True
