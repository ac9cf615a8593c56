# gsm_pos/modules/sales/reducer.py
"""
Draft-sale transitions driven by the sale form.

Every function takes a Sale and returns a new one; none of them touch
storage. After any change the draft carries no field that belongs to an
unselected sale type or payment method, and repeating a change gives the
same draft.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from ...utils.errors import DomainError
from ...utils.validators import try_parse_float
from .record import (
    CONDITIONAL_FIELDS,
    PaymentMethod,
    Sale,
    SaleType,
    coerce_enum,
    applicable_fields,
    default_payment_method,
    default_status,
    derive_price,
    is_quantity_based,
    payment_options,
    set_status,
)

PRICE_INPUTS = ("unit_price", "quantity", "discount")


def new_draft(sale_type: SaleType = SaleType.ACCESSORY) -> Sale:
    """Blank form state for a sale type, with its default status and method."""
    sale_type = coerce_enum(SaleType, sale_type)
    return clear_inapplicable_fields(Sale(
        sale_type=sale_type,
        status=default_status(sale_type),
        payment_method=PaymentMethod.CASH,
        phone_model="" if sale_type in (SaleType.REPAIR, SaleType.PHONE_SALE) else None,
    ))


def clear_inapplicable_fields(sale: Sale) -> Sale:
    """
    Drop every conditional field the current type / method does not use.
    Only repairs keep a status other than Completed.
    """
    method = sale.payment_method
    if method not in payment_options(sale.sale_type):
        method = PaymentMethod.CASH
    allowed = applicable_fields(sale.sale_type, method)
    cleared = {name: None for name in CONDITIONAL_FIELDS if name not in allowed}
    status = sale.status if sale.sale_type == SaleType.REPAIR else default_status(sale.sale_type)
    return replace(sale, payment_method=method, status=status, **cleared)


def change_sale_type(sale: Sale, new_type: SaleType) -> Sale:
    new_type = coerce_enum(SaleType, new_type)
    draft = replace(
        sale,
        sale_type=new_type,
        phone_type="",
        phone_model="",
        storage_location=None,
        status=default_status(new_type),
        payment_method=default_payment_method(new_type, sale.payment_method),
    )
    return clear_inapplicable_fields(draft)


def change_payment_method(sale: Sale, method: PaymentMethod) -> Sale:
    method = coerce_enum(PaymentMethod, method)
    if method not in payment_options(sale.sale_type):
        raise DomainError(f"{method.value} is not accepted for {sale.sale_type.value} sales.")
    return clear_inapplicable_fields(replace(sale, payment_method=method))


def _technician_name(technician_id, technicians: Iterable) -> str:
    if not technician_id:
        return ""
    for t in technicians:
        if t.id == technician_id:
            return t.name
    return ""


def change_field(sale: Sale, name: str, value: Any, technicians: Iterable = ()) -> Sale:
    """
    Set one form field and apply its knock-on rules.

    `technicians` is the technician register (objects with `id` / `name`),
    used to mirror the assignee into storage_location on repairs.
    """
    if name == "sale_type":
        return change_sale_type(sale, value)
    if name == "payment_method":
        return change_payment_method(sale, value)
    if name == "status":
        return clear_inapplicable_fields(set_status(sale, value))
    if not hasattr(sale, name) or name == "id":
        raise DomainError(f"Unknown sale field: {name}")

    changes: dict[str, Any] = {name: value}

    if name == "phone_type":
        changes["phone_model"] = ""

    if name == "assigned_technician" and sale.sale_type == SaleType.REPAIR:
        changes["storage_location"] = _technician_name(value, list(technicians))

    draft = replace(sale, **changes)

    if name in PRICE_INPUTS and is_quantity_based(draft.sale_type):
        ok_q, q = try_parse_float(draft.quantity)
        ok_u, u = try_parse_float(draft.unit_price)
        if ok_q and ok_u:
            ok_d, d = try_parse_float(draft.discount)
            draft = replace(draft, price=derive_price(u, q, d if ok_d else 0.0))

    return clear_inapplicable_fields(draft)
