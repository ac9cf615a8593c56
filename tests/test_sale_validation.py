# tests/test_sale_validation.py
from datetime import datetime

import pytest

from gsm_pos.modules.sales.record import PaymentMethod, SaleType, Status
from gsm_pos.modules.sales.validation import finalize_sale, is_submittable, validate_sale
from gsm_pos.utils.errors import DomainError


# ---------------------------- validate_sale ----------------------------

def test_blank_accessory_reports_each_missing_field(make_sale):
    s = make_sale(customer_name=" ", phone_type="", unit_price=0, quantity=0)
    errors = validate_sale(s)
    assert set(errors) == {"customerName", "phoneType", "unitPrice", "quantity"}


def test_other_item_needs_a_name(make_sale):
    s = make_sale(phone_type="Other")
    assert "otherItemName" in validate_sale(s)
    assert is_submittable(s, other_item_name="Ring light")


def test_repair_needs_brand_model_and_repair_type(credit_sale):
    s = credit_sale(phone_type="", phone_model="", repair_type=None, price=0)
    errors = validate_sale(s)
    assert {"phoneType", "phoneModel", "repairType", "price"} <= set(errors)


def test_other_repair_needs_description(credit_sale):
    s = credit_sale(repair_type="Other")
    assert "otherRepair" in validate_sale(s)
    assert "otherRepair" not in validate_sale(s, other_repair="Camera lens")


def test_credit_needs_id_number(credit_sale):
    assert "customerIdNumber" in validate_sale(credit_sale(customer_id_number=""))
    assert "creditAmountPaid" in validate_sale(credit_sale(credit_amount_paid=-5))


def test_valid_credit_repair_is_submittable(credit_sale):
    assert validate_sale(credit_sale()) == {}


def test_lipa_mdogo_mdogo_plan_must_be_known(make_sale):
    s = make_sale(
        sale_type=SaleType.PHONE_SALE, phone_type="Tecno", phone_model="Pova 5",
        payment_method=PaymentMethod.LIPA_MDOGO_MDOGO, lipa_mdogo_mdogo_plan="Hourly",
        unit_price=None, quantity=None, price=20000,
    )
    assert "lipaMdogoMdogoPlan" in validate_sale(s)


# ---------------------------- finalize_sale ----------------------------

def test_new_sale_gets_id_and_next_receipt(make_sale, now):
    existing = [make_sale(receipt_number="GSM-0005")]
    draft = make_sale(id=None, receipt_number=None, unit_price=500, quantity=3, discount=100, date_booked=None)
    final = finalize_sale(draft, None, existing, now=now)
    assert final.id
    assert final.receipt_number == "GSM-0006"
    assert final.price == 1400
    assert final.receipt_date == "2024-03-15T09:30:00"
    assert final.date_booked == "2024-03-15"


def test_edit_keeps_receipt_number(make_sale, now):
    stored = make_sale(receipt_number="GSM-0002")
    edited = finalize_sale(
        make_sale(id=stored.id, receipt_number=None, customer_name="Renamed"),
        stored, [stored], now=now,
    )
    assert edited.id == stored.id
    assert edited.receipt_number == "GSM-0002"
    assert edited.customer_name == "Renamed"


def test_other_overrides_are_applied(make_sale, now):
    final = finalize_sale(make_sale(phone_type="Other"), None, [], now=now, other_item_name="  Ring light ")
    assert final.phone_type == "Ring light"


def test_credit_settlement_stamps_paid_date(credit_sale, now):
    final = finalize_sale(credit_sale(credit_amount_paid=10000), None, [], now=now)
    assert final.credit_paid is True
    assert final.credit_paid_date == "2024-03-15T09:30:00"

    open_one = finalize_sale(credit_sale(credit_amount_paid=2000), None, [], now=now)
    assert open_one.credit_paid is False
    assert open_one.credit_paid_date is None


def test_credit_paid_cannot_go_down_on_edit(credit_sale, now):
    stored = credit_sale(credit_amount_paid=4000)
    with pytest.raises(DomainError):
        finalize_sale(credit_sale(id=stored.id, credit_amount_paid=1000), stored, [stored], now=now)


def test_first_paid_date_survives_edits(credit_sale):
    stored = credit_sale(credit_amount_paid=10000, credit_paid=True, credit_paid_date="2024-03-01T08:00:00")
    again = finalize_sale(credit_sale(id=stored.id, credit_amount_paid=10000), stored, [stored],
                          now=datetime(2024, 4, 1))
    assert again.credit_paid_date == "2024-03-01T08:00:00"
    assert again.status == Status.PENDING


def test_saved_accessory_is_always_completed(make_sale, now):
    final = finalize_sale(make_sale(status=Status.COLLECTED), None, [], now=now)
    assert final.status == Status.COMPLETED
