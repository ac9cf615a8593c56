# tests/test_sales_controller.py
from gsm_pos.modules.sales.controller import SalesController
from gsm_pos.modules.sales.record import PaymentMethod, SaleType, Status
from gsm_pos.modules.sales.reducer import change_field, new_draft


def _accessory_draft():
    d = new_draft(SaleType.ACCESSORY)
    d = change_field(d, "customer_name", "Walk-in")
    d = change_field(d, "phone_type", "Car Charger")
    d = change_field(d, "unit_price", 500)
    d = change_field(d, "quantity", 3)
    d = change_field(d, "discount", 100)
    return d


def test_save_new_sale(state, now):
    ctl = SalesController(state)
    saved = ctl.save(_accessory_draft(), now=now)
    assert saved is not None
    assert saved.receipt_number == "GSM-0004"
    assert saved.price == 1400
    assert state.sales.list()[0].id == saved.id
    assert ctl.last_errors == {}


def test_invalid_draft_is_not_stored(state):
    ctl = SalesController(state)
    before = state.sales.list()
    assert ctl.save(new_draft(SaleType.REPAIR)) is None
    assert "customerName" in ctl.last_errors
    assert "repairType" in ctl.last_errors
    assert state.sales.list() == before


def test_edit_requires_admin(state):
    ctl = SalesController(state)
    state.login.login("Cashier", "Cashier123")
    assert ctl.edit("1") is None
    assert ctl.last_error_message == "Only an Admin can edit sales."

    state.login.login("Admin", "Admin123")
    sale = ctl.edit("1")
    assert sale is not None and sale.receipt_number == "GSM-0001"


def test_edit_keeps_receipt_number(state, now):
    ctl = SalesController(state)
    state.login.login("Admin", "Admin123")
    sale = ctl.edit("3")
    sale = change_field(sale, "unit_price", 800)
    sale = change_field(sale, "quantity", 2)
    saved = ctl.save(sale, now=now)
    assert saved.receipt_number == "GSM-0003"
    assert saved.price == 1600
    assert len(state.sales.list()) == 3


def test_status_updates(state):
    ctl = SalesController(state)
    assert ctl.update_status("2", Status.COMPLETED).status == Status.COMPLETED
    assert ctl.update_status("3", Status.PENDING) is None
    assert ctl.last_error_message
    assert state.sales.get("3").status == Status.COMPLETED
    assert ctl.update_status("missing", Status.PENDING) is None


def test_delete_only_when_confirmed(state):
    ctl = SalesController(state)
    assert ctl.delete("2") is False
    assert ctl.delete("2", confirmed=True) is True
    assert state.sales.get("2") is None


def test_scan_lookup(state):
    ctl = SalesController(state)
    assert ctl.lookup_scanned(" 2 ").customer_name == "Jane Smith"
    assert ctl.lookup_scanned("zzz") is None
    assert ctl.last_error_message == "Sale with ID zzz not found."


def test_technician_name(state):
    ctl = SalesController(state)
    assert ctl.technician_name(state.sales.get("2")) == "Amon"
    assert ctl.technician_name(state.sales.get("3")) == "N/A"


def test_credit_receipt_shows_outstanding(state, credit_sale):
    ctl = SalesController(state)
    state.sales.save(credit_sale(customer_name="Ann", price=3000.0, credit_amount_paid=1000.0))
    sale = state.sales.save(credit_sale(customer_name="Ann", price=1000.0))
    text = ctl.receipt_text(sale)
    assert "Total Outstanding Debt: Kshs 3,000" in text
    assert sale.payment_method == PaymentMethod.CREDIT
