from functools import lru_cache

from ...constants import (
    DEFAULT_THEME,
    KEY_CSRS,
    KEY_PURCHASES,
    KEY_SALES,
    KEY_SUPPLIERS,
    KEY_TECHNICIANS,
    KEY_THEME,
    KEY_USERS,
)
from ...utils.auth import hash_password
from ...utils.loggers import get_logger
from ..repositories.store_repo import KeyValueStore

_log = get_logger(__name__)

TECHNICIANS = [
    {"id": "1", "name": "Harrison"},
    {"id": "2", "name": "Amon"},
    {"id": "3", "name": "KamJay"},
    {"id": "4", "name": "Saidy"},
    {"id": "5", "name": "John"},
    {"id": "6", "name": "Charles"},
    {"id": "7", "name": "Njoro"},
]

CSRS = [
    {"id": "csr-a1b2", "name": "Alice"},
    {"id": "csr-c3d4", "name": "Bob"},
]

SUPPLIERS = [
    {"id": "sup1", "name": "Phone Parts Inc", "contact": "0712345678"},
    {"id": "sup2", "name": "Accessory World", "contact": "0787654321"},
]

PURCHASES = [
    {"id": "pur1", "supplierId": "sup1", "product": "iPhone 13 Screens",
     "cost": 12000, "quantity": 5, "totalCost": 60000, "date": "2023-10-20"},
    {"id": "pur2", "supplierId": "sup2", "product": "Samsung Chargers",
     "cost": 500, "quantity": 20, "totalCost": 10000, "date": "2023-10-22"},
]

SALES = [
    {
        "id": "1", "receiptNumber": "GSM-0001", "customerName": "John Doe",
        "phoneType": "iPhone 13 Pro", "saleType": "Repair",
        "repairType": "Screen Replacement", "price": 15000, "assignedTechnician": "1",
        "storageLocation": "A1", "notes": "Customer waiting.",
        "dateBooked": "2023-10-26T10:00:00Z", "receiptDate": "2023-10-26T10:00:00Z",
        "status": "Completed", "paymentMethod": "M-Pesa", "mpesaNumber": "254712345678",
    },
    {
        "id": "2", "receiptNumber": "GSM-0002", "customerName": "Jane Smith",
        "phoneType": "Samsung S22 Ultra", "saleType": "Repair",
        "repairType": "Battery Replacement", "price": 8500, "assignedTechnician": "2",
        "storageLocation": "A2", "notes": "",
        "dateBooked": "2023-10-27T11:30:00Z", "receiptDate": "2023-10-27T11:30:00Z",
        "status": "In Progress", "paymentMethod": "Cash",
    },
    {
        "id": "3", "receiptNumber": "GSM-0003", "customerName": "Peter Jones",
        "phoneType": "Type-C Cable", "saleType": "Accessory",
        "price": 800, "notes": "Fast charging model",
        "dateBooked": "2023-10-28T14:00:00Z", "receiptDate": "2023-10-28T14:00:00Z",
        "status": "Completed", "paymentMethod": "Cash",
    },
]

# username, password, role
DEMO_USERS = (
    ("user-1", "Admin", "Admin123", "Admin"),
    ("user-2", "Cashier", "Cashier123", "Cashier"),
)


@lru_cache(maxsize=None)
def _demo_hash(password: str) -> str:
    return hash_password(password)


def demo_users() -> list[dict]:
    return [
        {"id": uid, "username": username, "password": _demo_hash(password), "role": role}
        for uid, username, password, role in DEMO_USERS
    ]


def seed(conn):
    # each collection is only written when its key has never been stored
    store = KeyValueStore(conn)
    defaults = (
        (KEY_SALES, lambda: SALES),
        (KEY_TECHNICIANS, lambda: TECHNICIANS),
        (KEY_CSRS, lambda: CSRS),
        (KEY_SUPPLIERS, lambda: SUPPLIERS),
        (KEY_PURCHASES, lambda: PURCHASES),
        (KEY_USERS, demo_users),
        (KEY_THEME, lambda: DEFAULT_THEME),
    )
    for key, make in defaults:
        if not store.has(key):
            store.save(key, make())
            _log.debug("Seeded %s", key)
