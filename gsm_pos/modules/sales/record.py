# gsm_pos/modules/sales/record.py
"""
The Sale record: one dataclass for every sale type plus the tables that say
which optional fields belong to which sale type / payment method.

Persisted form is a flat JSON object with the camelCase keys the shop's
browser build stored; absent optional fields are simply omitted. Pricing
is float money throughout (``price`` is the source of truth for totals).
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ...constants import RECEIPT_DIGITS, RECEIPT_PREFIX
from ...utils.errors import DomainError


class SaleType(str, Enum):
    ACCESSORY = "Accessory"
    REPAIR = "Repair"
    PHONE_SALE = "Phone Sale"
    B2B = "B2B/Fundi Shop Sale"
    RETURN = "Return"


class Status(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    COLLECTED = "Collected"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    MPESA = "M-Pesa"
    LIPA_MDOGO_MDOGO = "Lipa Mdogo Mdogo"
    ONFONE = "Onfone"
    CREDIT = "Credit"


QUANTITY_BASED_TYPES = frozenset({SaleType.ACCESSORY, SaleType.B2B, SaleType.RETURN})
PHONE_BASED_TYPES = frozenset({SaleType.REPAIR, SaleType.PHONE_SALE})

PAYMENT_OPTIONS: dict[SaleType, tuple[PaymentMethod, ...]] = {
    SaleType.ACCESSORY: (PaymentMethod.CASH, PaymentMethod.MPESA),
    SaleType.RETURN: (PaymentMethod.CASH, PaymentMethod.MPESA),
    SaleType.REPAIR: (PaymentMethod.CASH, PaymentMethod.MPESA, PaymentMethod.CREDIT),
    SaleType.B2B: (PaymentMethod.CASH, PaymentMethod.MPESA, PaymentMethod.CREDIT),
    SaleType.PHONE_SALE: tuple(PaymentMethod),
}

# ---- conditional field groups (attribute names) ----
REPAIR_FIELDS = (
    "repair_type",
    "assigned_technician",
    "estimated_repair_time",
    "storage_location",
    "device_photo",
    "received_in_shop",
)
PHONE_SALE_FIELDS = ("imei_photo", "date_collection")
PHONE_FIELDS = ("phone_model",)
QUANTITY_FIELDS = ("unit_price", "quantity", "discount")

PAYMENT_FIELDS: dict[PaymentMethod, tuple[str, ...]] = {
    PaymentMethod.CASH: (),
    PaymentMethod.MPESA: ("mpesa_number",),
    PaymentMethod.LIPA_MDOGO_MDOGO: ("lipa_mdogo_mdogo_plan", "lipa_mdogo_mdogo_amount"),
    PaymentMethod.ONFONE: ("onfone_transaction_id",),
    PaymentMethod.CREDIT: (
        "customer_id_number",
        "credit_due_date",
        "credit_amount_paid",
        "credit_paid",
        "credit_paid_date",
    ),
}


@dataclass
class Sale:
    # identity (minted at save time)
    id: Optional[str] = None
    receipt_number: Optional[str] = None

    # classification
    sale_type: SaleType = SaleType.ACCESSORY
    status: Status = Status.COMPLETED
    payment_method: PaymentMethod = PaymentMethod.CASH

    # customer / item
    customer_name: str = ""
    customer_number: Optional[str] = None
    phone_type: str = ""
    phone_model: Optional[str] = None
    notes: str = ""

    # pricing
    price: float = 0.0
    unit_price: Optional[float] = None
    quantity: Optional[int] = None
    discount: Optional[float] = None

    # repair
    repair_type: Optional[str] = None
    assigned_technician: Optional[str] = None
    estimated_repair_time: Optional[str] = None
    storage_location: Optional[str] = None
    device_photo: Optional[str] = None
    received_in_shop: Optional[bool] = None

    # phone sale
    imei_photo: Optional[str] = None

    # payment specific
    mpesa_number: Optional[str] = None
    lipa_mdogo_mdogo_plan: Optional[str] = None
    lipa_mdogo_mdogo_amount: Optional[float] = None
    onfone_transaction_id: Optional[str] = None
    customer_id_number: Optional[str] = None
    credit_due_date: Optional[str] = None
    credit_amount_paid: Optional[float] = None
    credit_paid: Optional[bool] = None
    credit_paid_date: Optional[str] = None

    # timestamps
    date_booked: Optional[str] = None
    receipt_date: Optional[str] = None
    date_collection: Optional[str] = None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON object; None fields are left out."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            out[_CAMEL[f.name]] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Sale":
        """
        Build a Sale from its stored form. Accepts camelCase (stored) or
        snake_case keys; unknown keys are ignored.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _SNAKE.get(key) or (key if key in _CAMEL else None)
            if name is None or value is None:
                continue
            kwargs[name] = value

        for name, enum_cls in (("sale_type", SaleType), ("status", Status), ("payment_method", PaymentMethod)):
            if name in kwargs:
                kwargs[name] = coerce_enum(enum_cls, kwargs[name])
        for name in ("price", "unit_price", "discount", "lipa_mdogo_mdogo_amount", "credit_amount_paid"):
            if name in kwargs:
                kwargs[name] = _coerce_float(name, kwargs[name])
        if "quantity" in kwargs:
            q = _coerce_float("quantity", kwargs["quantity"])
            kwargs["quantity"] = int(q) if q.is_integer() else q
        for name in _TEXT_FIELDS:
            if name in kwargs:
                kwargs[name] = _coerce_text(kwargs[name])
        for name in ("received_in_shop", "credit_paid"):
            if name in kwargs:
                kwargs[name] = _coerce_bool(kwargs[name])
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    @property
    def is_credit(self) -> bool:
        return self.payment_method == PaymentMethod.CREDIT

    @property
    def is_quantity_based(self) -> bool:
        return is_quantity_based(self.sale_type)

    @property
    def is_phone_based(self) -> bool:
        return is_phone_based(self.sale_type)


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


_CAMEL: dict[str, str] = {f.name: _to_camel(f.name) for f in fields(Sale)}
_SNAKE: dict[str, str] = {v: k for k, v in _CAMEL.items()}
_TEXT_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Sale) if f.type in ("str", "Optional[str]"))


def coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError as e:
        raise DomainError(f"Unknown {enum_cls.__name__} value: {value!r}") from e


def _coerce_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DomainError(f"{name} must be a number, got {value!r}") from e


def _coerce_text(value) -> str:
    # spreadsheets hand phone / ID numbers back as numbers
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _coerce_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


# ---------------------------------------------------------------------------
# Sale type rules
# ---------------------------------------------------------------------------

def is_quantity_based(sale_type: SaleType) -> bool:
    return sale_type in QUANTITY_BASED_TYPES


def is_phone_based(sale_type: SaleType) -> bool:
    return sale_type in PHONE_BASED_TYPES


def payment_options(sale_type: SaleType) -> tuple[PaymentMethod, ...]:
    """Payment methods the shop accepts for a sale type."""
    return PAYMENT_OPTIONS[sale_type]


def default_status(sale_type: SaleType) -> Status:
    return Status.PENDING if sale_type == SaleType.REPAIR else Status.COMPLETED


def default_payment_method(sale_type: SaleType, current: Optional[PaymentMethod] = None) -> PaymentMethod:
    """Cash, except Phone Sale keeps whatever was chosen (every method is legal there)."""
    if sale_type == SaleType.PHONE_SALE and current is not None:
        return current
    return PaymentMethod.CASH


def applicable_fields(sale_type: SaleType, payment_method: PaymentMethod) -> frozenset[str]:
    """Optional fields a sale of this type / method may carry."""
    allowed: set[str] = set()
    if sale_type == SaleType.REPAIR:
        allowed.update(REPAIR_FIELDS)
    if sale_type == SaleType.PHONE_SALE:
        allowed.update(PHONE_SALE_FIELDS)
    if is_phone_based(sale_type):
        allowed.update(PHONE_FIELDS)
    if is_quantity_based(sale_type):
        allowed.update(QUANTITY_FIELDS)
    allowed.update(PAYMENT_FIELDS[payment_method])
    return frozenset(allowed)


CONDITIONAL_FIELDS = frozenset(
    REPAIR_FIELDS + PHONE_SALE_FIELDS + PHONE_FIELDS + QUANTITY_FIELDS
    + tuple(f for group in PAYMENT_FIELDS.values() for f in group)
)


def derive_price(unit_price: Optional[float], quantity: Optional[float], discount: Optional[float] = None) -> float:
    """unit_price × quantity − discount."""
    return float(unit_price or 0.0) * float(quantity or 0) - float(discount or 0.0)


def set_status(sale: Sale, status: Status) -> Sale:
    """
    Move a sale to `status`. Only repairs have a workflow; other sale types
    stay Completed.
    """
    status = coerce_enum(Status, status)
    if sale.sale_type != SaleType.REPAIR and status != Status.COMPLETED:
        raise DomainError(f"Only repairs track status; {sale.sale_type.value} sales stay Completed.")
    return replace(sale, status=status)


# ---------------------------------------------------------------------------
# Receipt numbers
# ---------------------------------------------------------------------------

def receipt_suffix(receipt_number: Optional[str]) -> Optional[int]:
    """Numeric part after the last '-' (GSM-0042 -> 42); None if it doesn't parse."""
    if not receipt_number:
        return None
    tail = str(receipt_number).rsplit("-", 1)[-1].strip()
    try:
        return int(tail)
    except ValueError:
        return None


def next_receipt_number(sales: Iterable[Sale], prefix: str = RECEIPT_PREFIX) -> str:
    """
    max(existing suffixes) + 1, zero padded: GSM-0001 on an empty collection.
    """
    suffixes = [n for n in (receipt_suffix(s.receipt_number) for s in sales) if n is not None]
    last = max(suffixes, default=0)
    return f"{prefix}-{last + 1:0{RECEIPT_DIGITS}d}"
