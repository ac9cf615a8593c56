# gsm_pos/modules/sales/validation.py
"""
Submit-readiness checks for a draft sale, and the finishing touches applied
when a valid draft is saved.

`validate_sale` is pure and cheap; the form re-runs it on every field
change and keeps the Save button disabled while the map is non-empty.
Keys are the camelCase field names the form binds to.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from ...constants import LIPA_MDOGO_MDOGO_PLANS, OTHER_OPTION, RECEIPT_PREFIX
from ...utils.errors import DomainError
from ...utils.helpers import new_id, now_iso
from ...utils.validators import (
    is_non_negative_number,
    is_strictly_positive_number,
    is_whole_number_at_least,
    non_empty,
    try_parse_float,
)
from .record import (
    PaymentMethod,
    Sale,
    SaleType,
    derive_price,
    is_phone_based,
    is_quantity_based,
    next_receipt_number,
)
from .reducer import clear_inapplicable_fields


def validate_sale(sale: Sale, *, other_item_name: str = "", other_repair: str = "") -> dict[str, str]:
    errors: dict[str, str] = {}

    if not non_empty(sale.customer_name):
        errors["customerName"] = "Customer name is required."

    if is_phone_based(sale.sale_type):
        if not non_empty(sale.phone_type):
            errors["phoneType"] = "Select the phone brand."
        if not non_empty(sale.phone_model):
            errors["phoneModel"] = "Select the phone model."
    elif is_quantity_based(sale.sale_type):
        if not non_empty(sale.phone_type):
            errors["phoneType"] = "Select the item."
        elif sale.phone_type == OTHER_OPTION and not non_empty(other_item_name):
            errors["otherItemName"] = 'Please specify the product name in the "Other" field.'

    if sale.sale_type == SaleType.REPAIR:
        if not non_empty(sale.repair_type):
            errors["repairType"] = "Select the repair type."
        elif sale.repair_type == OTHER_OPTION and not non_empty(other_repair):
            errors["otherRepair"] = 'Please specify the repair type in the "Other" field.'

    if is_quantity_based(sale.sale_type):
        if not is_strictly_positive_number(sale.unit_price):
            errors["unitPrice"] = "Unit price must be greater than zero."
        if not is_whole_number_at_least(sale.quantity, 1):
            errors["quantity"] = "Quantity must be at least 1."
    elif not is_strictly_positive_number(sale.price):
        errors["price"] = "Price must be greater than zero."

    if sale.payment_method == PaymentMethod.CREDIT:
        if not non_empty(sale.customer_id_number):
            errors["customerIdNumber"] = "Customer ID number is required for credit sales."
        if sale.credit_amount_paid is not None and not is_non_negative_number(sale.credit_amount_paid):
            errors["creditAmountPaid"] = "Amount paid cannot be negative."

    if sale.payment_method == PaymentMethod.LIPA_MDOGO_MDOGO:
        plan = sale.lipa_mdogo_mdogo_plan
        if non_empty(plan) and plan not in LIPA_MDOGO_MDOGO_PLANS:
            errors["lipaMdogoMdogoPlan"] = "Choose a Daily, Weekly or Monthly plan."

    return errors


def is_submittable(sale: Sale, *, other_item_name: str = "", other_repair: str = "") -> bool:
    return not validate_sale(sale, other_item_name=other_item_name, other_repair=other_repair)


def finalize_sale(
    sale: Sale,
    existing: Optional[Sale],
    sales: Iterable[Sale],
    *,
    now: Optional[datetime] = None,
    other_item_name: str = "",
    other_repair: str = "",
    prefix: str = RECEIPT_PREFIX,
) -> Sale:
    """
    Turn a validated draft into the record that gets stored.

    - "Other" selections are replaced by their free-text values.
    - Quantity-based prices are re-derived from unit price, quantity and discount.
    - New sales get an id and the next receipt number; edits keep both.
    - receipt_date is stamped on every save; date_booked defaults to today.
    - Credit settlement flags are recomputed from the amount paid.
    """
    now = now or datetime.now()
    draft = clear_inapplicable_fields(sale)
    changes: dict = {}

    if is_quantity_based(draft.sale_type) and draft.phone_type == OTHER_OPTION:
        changes["phone_type"] = other_item_name.strip()
    if draft.sale_type == SaleType.REPAIR and draft.repair_type == OTHER_OPTION:
        changes["repair_type"] = other_repair.strip()

    if is_quantity_based(draft.sale_type):
        quantity = float(draft.quantity or 0)
        changes["quantity"] = int(quantity) if quantity.is_integer() else quantity
        changes["price"] = derive_price(draft.unit_price, quantity, draft.discount)

    if existing is None:
        changes["id"] = draft.id or new_id()
        changes["receipt_number"] = next_receipt_number(sales, prefix)
    else:
        changes["id"] = existing.id
        changes["receipt_number"] = existing.receipt_number

    changes["receipt_date"] = now_iso(now)
    changes["date_booked"] = draft.date_booked or now.date().isoformat()
    changes["notes"] = draft.notes or ""

    draft = replace(draft, **changes)

    if draft.payment_method == PaymentMethod.CREDIT:
        draft = _settle_credit_flags(draft, existing, now)

    return draft


def _settle_credit_flags(sale: Sale, existing: Optional[Sale], now: datetime) -> Sale:
    ok, paid = try_parse_float(sale.credit_amount_paid)
    paid = paid if ok else 0.0
    previous = existing.credit_amount_paid if existing is not None and existing.is_credit else None
    if previous is not None and paid < previous:
        raise DomainError("The amount already paid on a credit sale cannot be reduced.")

    settled = paid >= float(sale.price or 0)
    paid_date = sale.credit_paid_date
    if existing is not None and existing.is_credit and existing.credit_paid_date:
        paid_date = existing.credit_paid_date
    if settled and not paid_date:
        paid_date = now_iso(now)
    return replace(
        sale,
        credit_amount_paid=paid,
        credit_paid=settled,
        credit_paid_date=paid_date,
    )
