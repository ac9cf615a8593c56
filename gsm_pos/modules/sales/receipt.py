# gsm_pos/modules/sales/receipt.py
"""
Receipt rendering: WhatsApp text, printable HTML and PDF export.

Templates live in gsm_pos/resources/templates/receipts and are rendered
with Jinja2; PDFs are produced with WeasyPrint.
"""
from __future__ import annotations

import logging
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote

from jinja2 import Template

from ...constants import CURRENCY, STORE_NAME, STORE_TAGLINE, STORE_WHATSAPP_NUMBER
from ...utils.helpers import fmt_amount, fmt_full_datetime, fmt_print_date, fmt_standard_date
from .record import PaymentMethod, Sale, SaleType

_log = logging.getLogger(__name__)

_TEMPLATE_PACKAGE = "gsm_pos.resources.templates.receipts"
NOT_AVAILABLE = "N/A"


def _load_template(name: str, *, autoescape: bool) -> Template:
    tpl_str = importlib_resources.files(_TEMPLATE_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    return Template(tpl_str, autoescape=autoescape, trim_blocks=True, lstrip_blocks=True)


def qr_payload(sale: Sale) -> str:
    """What the receipt's QR code encodes: the bare sale id."""
    return sale.id or ""


def _safe_date(value, formatter) -> str:
    if not value:
        return NOT_AVAILABLE
    try:
        return formatter(value)
    except ValueError:
        return str(value)


def _technician_name(technician_id: Optional[str], technicians: Iterable) -> str:
    if not technician_id:
        return NOT_AVAILABLE
    for t in technicians:
        if t.id == technician_id:
            return t.name
    return "Unknown"


def _payment_details(sale: Sale) -> list[tuple[str, str]]:
    m = sale.payment_method
    if m == PaymentMethod.MPESA and sale.mpesa_number:
        return [("M-Pesa No", sale.mpesa_number)]
    if m == PaymentMethod.LIPA_MDOGO_MDOGO:
        rows = []
        if sale.lipa_mdogo_mdogo_plan:
            rows.append(("Plan", sale.lipa_mdogo_mdogo_plan))
        if sale.lipa_mdogo_mdogo_amount is not None:
            rows.append(("Installment", f"{CURRENCY} {fmt_amount(sale.lipa_mdogo_mdogo_amount)}"))
        return rows
    if m == PaymentMethod.ONFONE and sale.onfone_transaction_id:
        return [("Trans. ID", sale.onfone_transaction_id)]
    if m == PaymentMethod.CREDIT and sale.customer_id_number:
        return [("ID No", sale.customer_id_number)]
    return []


def _context(sale: Sale, technicians: Iterable, outstanding: float, store_name: str) -> dict:
    item = sale.phone_type or ""
    if sale.phone_model:
        item = f"{item} {sale.phone_model}".strip()

    credit = None
    if sale.payment_method == PaymentMethod.CREDIT:
        paid = float(sale.credit_amount_paid or 0.0)
        credit = {
            "paid": bool(sale.credit_paid),
            "paid_date": _safe_date(sale.credit_paid_date, fmt_standard_date) if sale.credit_paid_date else "",
            "amount_paid": fmt_amount(paid),
            "balance": fmt_amount(max(float(sale.price or 0.0) - paid, 0.0)),
            "due_date": _safe_date(sale.credit_due_date, fmt_standard_date),
        }

    return {
        "store_name": store_name,
        "store_tagline": STORE_TAGLINE,
        "currency": CURRENCY,
        "qr_payload": qr_payload(sale),
        "receipt_number": sale.receipt_number or "",
        "receipt_date": _safe_date(sale.receipt_date, fmt_full_datetime),
        "customer_name": sale.customer_name,
        "item": item,
        "item_label": "Accessory" if sale.sale_type == SaleType.ACCESSORY else "Item",
        "sale_type": sale.sale_type.value,
        "is_repair": sale.sale_type == SaleType.REPAIR,
        "repair_type": sale.repair_type or "",
        "technician": _technician_name(sale.assigned_technician, list(technicians)),
        "storage_location": sale.storage_location or NOT_AVAILABLE,
        "status": sale.status.value,
        "quantity": sale.quantity if sale.is_quantity_based else None,
        "unit_price": fmt_amount(sale.unit_price or 0),
        "discount": fmt_amount(sale.discount) if sale.discount else "",
        "date_booked": _safe_date(sale.date_booked, fmt_standard_date),
        "date_booked_print": _safe_date(sale.date_booked, fmt_print_date),
        "date_collection": _safe_date(sale.date_collection, fmt_standard_date),
        "total": fmt_amount(sale.price),
        "payment_method": sale.payment_method.value,
        "payment_details": _payment_details(sale),
        "credit": credit,
        "outstanding": fmt_amount(outstanding) if outstanding and outstanding > 0 else "",
    }


def receipt_text(
    sale: Sale,
    *,
    technicians: Iterable = (),
    outstanding: float = 0.0,
    store_name: str = STORE_NAME,
) -> str:
    """
    Plain-text receipt for WhatsApp. `outstanding` is the customer's total
    unpaid credit across all sales and is only printed when positive.
    """
    tpl = _load_template("receipt.txt", autoescape=False)
    return tpl.render(**_context(sale, technicians, outstanding, store_name))


def receipt_html(
    sale: Sale,
    *,
    technicians: Iterable = (),
    outstanding: float = 0.0,
    store_name: str = STORE_NAME,
) -> str:
    tpl = _load_template("receipt.html", autoescape=True)
    return tpl.render(**_context(sale, technicians, outstanding, store_name))


def export_receipt_pdf(html: str, path: Path | str) -> Path:
    """Render receipt HTML to a PDF file and return its path."""
    from weasyprint import HTML

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    HTML(string=html).write_pdf(str(path))
    _log.info("Receipt PDF written to %s", path)
    return path


def safe_filename(name: str, max_length: int = 100) -> str:
    """Receipt number or id reduced to characters safe in a file name."""
    cleaned = "".join(c if c.isalnum() or c in "-_" else "_" for c in (name or "receipt"))
    return cleaned[:max_length] or "receipt"


# --------------------------- WhatsApp ---------------------------

def whatsapp_url(phone: str, text: str) -> str:
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(text, safe='')}"


def share_urls(sale: Sale, text: str, *, store_number: str = STORE_WHATSAPP_NUMBER) -> list[str]:
    """
    Links for sharing a receipt: the customer's number first (when known),
    then the shop's own WhatsApp for its records.
    """
    urls = []
    customer_phone = sale.customer_number or sale.mpesa_number
    if customer_phone:
        urls.append(whatsapp_url(customer_phone, text))
    else:
        _log.info("No customer phone on %s; sharing to the shop number only", sale.receipt_number)
    urls.append(whatsapp_url(store_number, text))
    return urls
