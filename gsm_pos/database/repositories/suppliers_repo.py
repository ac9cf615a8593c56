from dataclasses import dataclass
from typing import Optional

from ...constants import KEY_SUPPLIERS
from ...utils.errors import DomainError
from ...utils.validators import non_empty
from ...utils.helpers import new_id
from .staff_repo import UNKNOWN_NAME
from .store_repo import KeyValueStore


@dataclass
class Supplier:
    id: str
    name: str
    contact: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "contact": self.contact}


class SuppliersRepo:
    def __init__(self, store: KeyValueStore, key: str = KEY_SUPPLIERS):
        self.store = store
        self.key = key

    def list(self) -> list[Supplier]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            return []
        return [
            Supplier(id=str(r["id"]), name=str(r.get("name") or ""), contact=str(r.get("contact") or ""))
            for r in raw
            if isinstance(r, dict) and r.get("id") is not None
        ]

    def get(self, supplier_id: str) -> Supplier | None:
        return next((s for s in self.list() if s.id == supplier_id), None)

    def name_for(self, supplier_id: Optional[str]) -> str:
        s = self.get(supplier_id) if supplier_id else None
        return s.name if s else UNKNOWN_NAME

    def upsert(self, supplier: Supplier) -> Supplier:
        if not non_empty(supplier.name):
            raise DomainError("Supplier name is required.")
        supplier.name = supplier.name.strip()
        rows = self.list()
        for i, s in enumerate(rows):
            if s.id == supplier.id:
                rows[i] = supplier
                break
        else:
            rows.append(supplier)
        self.store.save(self.key, [s.to_dict() for s in rows])
        return supplier

    def create(self, name: str, contact: str = "") -> Supplier:
        return self.upsert(Supplier(id=new_id(), name=name or "", contact=contact or ""))

    def update(self, supplier_id: str, name: str, contact: str = "") -> Supplier:
        if self.get(supplier_id) is None:
            raise DomainError(f"Supplier {supplier_id} not found.")
        return self.upsert(Supplier(id=supplier_id, name=name or "", contact=contact or ""))

    def delete(self, supplier_id: str) -> bool:
        """Past purchases keep their supplierId."""
        rows = self.list()
        kept = [s for s in rows if s.id != supplier_id]
        if len(kept) == len(rows):
            return False
        self.store.save(self.key, [s.to_dict() for s in kept])
        return True
