# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from gsm_pos.database.repositories import (
        KeyValueStore,
        SalesRepo,
        StaffRepo, StaffMember, technicians_repo, csrs_repo,
        SuppliersRepo, Supplier,
        PurchasesRepo, Purchase,
        UsersRepo,
    )
"""

from .store_repo import KeyValueStore

# ------------------ Sales ------------------
from .sales_repo import SalesRepo

# ------------- Technicians / CSRs ----------
from .staff_repo import StaffMember, StaffRepo, csrs_repo, technicians_repo

# ---------- Suppliers / Purchases ----------
from .suppliers_repo import Supplier, SuppliersRepo
from .purchases_repo import Purchase, PurchasesRepo

# ------------------ Users ------------------
from .users_repo import UsersRepo

__all__ = [
    "KeyValueStore",
    "SalesRepo",
    "StaffMember",
    "StaffRepo",
    "csrs_repo",
    "technicians_repo",
    "Supplier",
    "SuppliersRepo",
    "Purchase",
    "PurchasesRepo",
    "UsersRepo",
]
