from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...constants import KEY_PURCHASES
from ...utils.errors import DomainError
from ...utils.helpers import new_id, parse_timestamp, today_str
from ...utils.validators import is_strictly_positive_number, is_whole_number_at_least, non_empty
from .store_repo import KeyValueStore

ORDER_NEWEST = "newest"
ORDER_OLDEST = "oldest"


@dataclass
class Purchase:
    id: str
    supplier_id: str
    product: str
    cost: float          # unit cost
    quantity: int
    total_cost: float
    date: str
    receipt_url: str | None = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "supplierId": self.supplier_id,
            "product": self.product,
            "cost": self.cost,
            "quantity": self.quantity,
            "totalCost": self.total_cost,
            "date": self.date,
        }
        if self.receipt_url:
            d["receiptUrl"] = self.receipt_url
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Purchase":
        cost = float(d.get("cost") or 0)
        quantity = int(float(d.get("quantity") or 0))
        return cls(
            id=str(d["id"]),
            supplier_id=str(d.get("supplierId") or ""),
            product=str(d.get("product") or ""),
            cost=cost,
            quantity=quantity,
            total_cost=float(d.get("totalCost", cost * quantity) or 0),
            date=str(d.get("date") or ""),
            receipt_url=d.get("receiptUrl"),
        )


def _date_key(p: Purchase) -> datetime:
    try:
        return parse_timestamp(p.date)
    except ValueError:
        return datetime.min


class PurchasesRepo:
    """
    Stock purchases from suppliers. Recording a purchase does not touch any
    stock level; the product names double as the spare-part catalogue for
    repairs.
    """

    def __init__(self, store: KeyValueStore, key: str = KEY_PURCHASES):
        self.store = store
        self.key = key

    def _load(self) -> list[Purchase]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            return []
        out = []
        for r in raw:
            if not isinstance(r, dict) or r.get("id") is None:
                continue
            try:
                out.append(Purchase.from_dict(r))
            except (TypeError, ValueError):
                continue
        return out

    def _save(self, rows: list[Purchase]) -> None:
        self.store.save(self.key, [p.to_dict() for p in rows])

    @staticmethod
    def _normalize_and_validate(p: Purchase) -> Purchase:
        if not non_empty(p.product):
            raise DomainError("Product is required.")
        if not non_empty(p.supplier_id):
            raise DomainError("Supplier is required.")
        if not is_strictly_positive_number(p.cost):
            raise DomainError("Unit cost must be greater than zero.")
        if not is_whole_number_at_least(p.quantity, 1):
            raise DomainError("Quantity must be a whole number of at least 1.")
        p.product = p.product.strip()
        p.cost = float(p.cost)
        p.quantity = int(float(p.quantity))
        p.total_cost = p.cost * p.quantity
        p.date = p.date or today_str()
        return p

    # ------------------------------- reads -------------------------------

    def list(self, supplier_id: Optional[str] = None, order: str = ORDER_NEWEST) -> list[Purchase]:
        rows = [p for p in self._load() if supplier_id is None or p.supplier_id == supplier_id]
        rows.sort(key=_date_key, reverse=(order == ORDER_NEWEST))
        return rows

    def get(self, purchase_id: str) -> Purchase | None:
        return next((p for p in self._load() if p.id == purchase_id), None)

    def spare_parts(self) -> list[str]:
        """Unique product names, sorted."""
        return sorted({p.product for p in self._load() if p.product}, key=str.casefold)

    def last_unit_cost(self, product: str) -> float | None:
        matching = self.list(order=ORDER_NEWEST)
        for p in matching:
            if p.product == product:
                return p.cost
        return None

    # ------------------------------ writes -------------------------------

    def upsert(self, purchase: Purchase) -> Purchase:
        purchase = self._normalize_and_validate(purchase)
        rows = self._load()
        for i, p in enumerate(rows):
            if p.id == purchase.id:
                rows[i] = purchase
                break
        else:
            rows.insert(0, purchase)
        self._save(rows)
        return purchase

    def create(self, supplier_id: str, product: str, cost: float, quantity: int,
               date: str | None = None, receipt_url: str | None = None) -> Purchase:
        return self.upsert(Purchase(
            id=new_id(), supplier_id=supplier_id, product=product, cost=cost,
            quantity=quantity, total_cost=0.0, date=date or "", receipt_url=receipt_url,
        ))

    def delete(self, purchase_id: str) -> bool:
        rows = self._load()
        kept = [p for p in rows if p.id != purchase_id]
        if len(kept) == len(rows):
            return False
        self._save(kept)
        return True
