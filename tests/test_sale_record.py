# tests/test_sale_record.py
import pytest

from gsm_pos.modules.sales.record import (
    PaymentMethod,
    Sale,
    SaleType,
    Status,
    applicable_fields,
    default_payment_method,
    default_status,
    derive_price,
    next_receipt_number,
    payment_options,
    receipt_suffix,
    set_status,
)
from gsm_pos.utils.errors import DomainError


def test_next_receipt_number_on_empty_collection():
    assert next_receipt_number([]) == "GSM-0001"


def test_next_receipt_number_uses_highest_suffix(make_sale):
    sales = [make_sale(receipt_number=r) for r in ("GSM-0001", "GSM-0003", "GSM-0002")]
    assert next_receipt_number(sales) == "GSM-0004"


def test_next_receipt_number_ignores_unparseable(make_sale):
    sales = [make_sale(receipt_number="GSM-abc"), make_sale(receipt_number=None), make_sale(receipt_number="GSM-0009")]
    assert next_receipt_number(sales) == "GSM-0010"


def test_receipt_suffix():
    assert receipt_suffix("GSM-0042") == 42
    assert receipt_suffix("X-Y-7") == 7
    assert receipt_suffix("") is None
    assert receipt_suffix("GSM-") is None


def test_derive_price_with_discount():
    assert derive_price(500, 3, 100) == 1400
    assert derive_price(250.5, 2) == 501.0


def test_payment_options_per_type():
    assert payment_options(SaleType.ACCESSORY) == (PaymentMethod.CASH, PaymentMethod.MPESA)
    assert PaymentMethod.CREDIT in payment_options(SaleType.REPAIR)
    assert PaymentMethod.CREDIT in payment_options(SaleType.B2B)
    assert PaymentMethod.CREDIT not in payment_options(SaleType.RETURN)
    assert set(payment_options(SaleType.PHONE_SALE)) == set(PaymentMethod)


def test_default_status_and_method():
    assert default_status(SaleType.REPAIR) == Status.PENDING
    assert default_status(SaleType.ACCESSORY) == Status.COMPLETED
    assert default_payment_method(SaleType.REPAIR, PaymentMethod.CREDIT) == PaymentMethod.CASH
    assert default_payment_method(SaleType.PHONE_SALE, PaymentMethod.ONFONE) == PaymentMethod.ONFONE


def test_applicable_fields_repair_credit():
    allowed = applicable_fields(SaleType.REPAIR, PaymentMethod.CREDIT)
    assert {"assigned_technician", "storage_location", "phone_model", "customer_id_number"} <= allowed
    assert "unit_price" not in allowed
    assert "mpesa_number" not in allowed


def test_to_dict_is_camel_case_and_omits_none(make_sale):
    d = make_sale(mpesa_number=None, payment_method=PaymentMethod.CASH).to_dict()
    assert d["customerName"] == "Test Customer"
    assert d["saleType"] == "Accessory"
    assert d["receiptNumber"].startswith("GSM-")
    assert "mpesaNumber" not in d
    assert "customer_name" not in d


def test_from_dict_accepts_stored_form():
    s = Sale.from_dict({
        "id": "7", "saleType": "B2B/Fundi Shop Sale", "paymentMethod": "M-Pesa",
        "price": "1200", "quantity": 3.0, "receivedInShop": "true", "unknownKey": 1,
    })
    assert s.sale_type == SaleType.B2B
    assert s.payment_method == PaymentMethod.MPESA
    assert s.price == 1200.0
    assert s.quantity == 3 and isinstance(s.quantity, int)
    assert s.received_in_shop is True


def test_from_dict_rejects_unknown_enum():
    with pytest.raises(DomainError):
        Sale.from_dict({"saleType": "Lease"})


def test_set_status_only_for_repairs(make_sale):
    repair = make_sale(sale_type=SaleType.REPAIR, status=Status.PENDING)
    assert set_status(repair, Status.COLLECTED).status == Status.COLLECTED
    assert repair.status == Status.PENDING

    with pytest.raises(DomainError):
        set_status(make_sale(), Status.IN_PROGRESS)
    assert set_status(make_sale(), "Completed").status == Status.COMPLETED


def test_from_dict_turns_numeric_text_fields_into_strings():
    s = Sale.from_dict({
        "customerName": 4411, "customerNumber": 711222333, "customerIdNumber": 12345678.0,
        "mpesaNumber": " 254711000111 ", "receiptNumber": "GSM-0010",
    })
    assert s.customer_name == "4411"
    assert s.customer_number == "711222333"
    assert s.customer_id_number == "12345678"
    assert s.mpesa_number == "254711000111"
