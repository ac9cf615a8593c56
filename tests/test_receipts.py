# tests/test_receipts.py
from urllib.parse import unquote

import pytest

from gsm_pos.database.repositories import StaffMember
from gsm_pos.modules.sales import receipt
from gsm_pos.modules.sales.record import PaymentMethod, SaleType, Status


def test_repair_receipt_text(make_sale):
    sale = make_sale(
        sale_type=SaleType.REPAIR, status=Status.IN_PROGRESS, phone_type="Samsung",
        phone_model="Galaxy A54", repair_type="Battery Replacement", assigned_technician="2",
        unit_price=None, quantity=None, price=8500.0, date_booked="2023-10-27",
    )
    text = receipt.receipt_text(sale, technicians=[StaffMember("2", "Amon")])
    assert f"*Receipt #: {sale.receipt_number}*" in text
    assert "Item: Samsung Galaxy A54" in text
    assert "Technician: Amon" in text
    assert "Status: *In Progress*" in text
    assert "Date Booked: 27 Oct 2023" in text
    assert "*Total: Kshs 8,500*" in text
    assert "Total Outstanding Debt" not in text
    assert text.rstrip().endswith("Thank you for your business!")


def test_dangling_technician_prints_unknown(make_sale):
    sale = make_sale(sale_type=SaleType.REPAIR, assigned_technician="gone", repair_type="x")
    assert "Technician: Unknown" in receipt.receipt_text(sale, technicians=[])


def test_open_credit_block(credit_sale):
    text = receipt.receipt_text(credit_sale(price=1000.0, credit_amount_paid=400.0), outstanding=600.0)
    assert "Paid So Far: Kshs 400" in text
    assert "Balance: Kshs 600" in text
    assert "Due Date: 20 Mar 2024" in text
    assert "Total Outstanding Debt: Kshs 600" in text


def test_paid_credit_block(credit_sale):
    text = receipt.receipt_text(credit_sale(
        price=1000.0, credit_amount_paid=1000.0, credit_paid=True, credit_paid_date="2024-03-18T10:00:00",
    ))
    assert "Credit Status: PAID on 18 Mar 2024" in text
    assert "Balance:" not in text


def test_html_escapes_customer_name(make_sale):
    html = receipt.receipt_html(make_sale(customer_name="<b>Bob</b>"))
    assert "&lt;b&gt;Bob&lt;/b&gt;" in html
    assert "Sale ID: " in html


def test_whatsapp_url_encodes_text():
    url = receipt.whatsapp_url("+254 712-345 678", "Total: Kshs 1,000\nThanks & bye")
    assert url.startswith("https://wa.me/254712345678?text=")
    assert unquote(url.split("text=", 1)[1]) == "Total: Kshs 1,000\nThanks & bye"


def test_share_urls_customer_first(make_sale):
    with_phone = make_sale(payment_method=PaymentMethod.MPESA, mpesa_number="254711000111")
    urls = receipt.share_urls(with_phone, "hi", store_number="254700000000")
    assert urls[0].startswith("https://wa.me/254711000111")
    assert urls[1].startswith("https://wa.me/254700000000")
    assert len(receipt.share_urls(make_sale(), "hi")) == 1


def test_safe_filename():
    assert receipt.safe_filename("GSM-0001") == "GSM-0001"
    assert receipt.safe_filename("a/b c") == "a_b_c"


def test_pdf_export(state, tmp_path):
    pytest.importorskip("weasyprint")
    from gsm_pos.modules.sales.controller import SalesController

    path = SalesController(state).export_pdf(state.sales.get("1"), tmp_path)
    assert path.name == "GSM-0001.pdf"
    assert path.read_bytes().startswith(b"%PDF")
