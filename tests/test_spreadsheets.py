# tests/test_spreadsheets.py
from datetime import datetime

import openpyxl
import pytest

from gsm_pos.modules.payments.payment_utilities.credit import open_debts
from gsm_pos.modules.reporting.totals import summarize
from gsm_pos.modules.spreadsheets.service import NOTHING_TO_EXPORT, SpreadsheetService
from gsm_pos.utils.errors import DomainError, ImportFailed


def _write_book(path, sheets: dict[str, list[list]]):
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for r in rows:
            ws.append(r)
    wb.save(path)
    return path


def test_export_then_import_into_fresh_store(state, empty_state, tmp_path):
    out = tmp_path / "sales.xlsx"
    assert SpreadsheetService(state).export_collection("Sales", out) is True

    ws = openpyxl.load_workbook(out).active
    assert ws.title == "Sales"
    headers = [c.value for c in ws[1]]
    assert "receiptNumber" in headers and "customerName" in headers
    assert ws[1][0].font.bold

    report = SpreadsheetService(empty_state).import_workbook(out)
    assert report.applied == {"Sales": 3}
    assert report.skipped == {"Sales": 0}
    assert {s.receipt_number for s in empty_state.sales.list()} == {"GSM-0001", "GSM-0002", "GSM-0003"}


def test_export_of_empty_collection(empty_state, tmp_path):
    svc = SpreadsheetService(empty_state)
    assert svc.export_collection("Suppliers", tmp_path / "s.xlsx") is False
    assert svc.last_notice == NOTHING_TO_EXPORT
    assert not (tmp_path / "s.xlsx").exists()


def test_export_unknown_collection(state, tmp_path):
    with pytest.raises(DomainError):
        SpreadsheetService(state).export_collection("Expenses", tmp_path / "x.xlsx")


def test_import_skips_rows_missing_required_values(state, tmp_path):
    path = _write_book(tmp_path / "in.xlsx", {
        "Suppliers": [["id", "name", "contact"], ["sup1", "Phone Parts Kenya", "0711"], ["sup9", None, "0722"]],
        "Technicians": [["id", "name"], [None, "Wanjiku"]],
        "Sales": [
            ["id", "customerName", "saleType", "price", "phoneType"],
            [None, "Mary", "Accessory", 250, "Car Charger"],
            ["bad", "Tom", "Lease", 100, "x"],
            ["x2", "", "Repair", 100, "x"],
        ],
    })
    report = SpreadsheetService(state).import_workbook(path)

    assert report.applied == {"Sales": 1, "Suppliers": 1, "Technicians": 1}
    assert report.skipped == {"Sales": 2, "Suppliers": 1, "Technicians": 0}
    assert state.suppliers.get("sup1").name == "Phone Parts Kenya"
    assert state.suppliers.get("sup9") is None
    assert "Wanjiku" in [t.name for t in state.technicians.list()]

    mary = next(s for s in state.sales.list() if s.customer_name == "Mary")
    assert mary.id
    assert mary.receipt_number == "GSM-0004"


def test_import_purchases_recomputes_total(state, tmp_path):
    path = _write_book(tmp_path / "p.xlsx", {
        "Purchases": [["id", "supplierId", "product", "cost", "quantity", "date"],
                      ["p9", "sup1", "A54 Screen", 3000, 2, "2024-02-02"]],
    })
    SpreadsheetService(state).import_workbook(path)
    assert state.purchases.get("p9").total_cost == 6000.0


def test_corrupt_file_raises_import_failed(state, tmp_path):
    bad = tmp_path / "bad.xlsx"
    bad.write_bytes(b"this is not a workbook")
    before = state.sales.list()
    with pytest.raises(ImportFailed, match="corrupted or in an unexpected format"):
        SpreadsheetService(state).import_workbook(bad)
    assert state.sales.list() == before


def test_workbook_without_known_sheets(state, tmp_path):
    path = _write_book(tmp_path / "other.xlsx", {"Notes": [["a"], [1]]})
    with pytest.raises(ImportFailed):
        SpreadsheetService(state).import_workbook(path)


def test_numeric_phone_and_id_cells_come_back_as_text(empty_state, tmp_path):
    path = _write_book(tmp_path / "credit.xlsx", {
        "Sales": [
            ["id", "customerName", "customerNumber", "customerIdNumber", "saleType", "status",
             "paymentMethod", "phoneType", "phoneModel", "repairType", "price", "creditDueDate",
             "receiptDate", "dateBooked"],
            ["c1", "Ann", 711222333, 12345678, "Repair", "Pending", "Credit", "Samsung",
             "Galaxy A54", "Screen Replacement", 8000, "2024-03-20", "2024-03-10T12:00:00", "2024-03-10"],
        ],
    })
    SpreadsheetService(empty_state).import_workbook(path)

    sale = empty_state.sales.get("c1")
    assert sale.customer_number == "711222333"
    assert sale.customer_id_number == "12345678"
    assert open_debts(empty_state.sales.list(), "222") == [sale]


def test_imported_sales_without_dates_are_stamped(empty_state, tmp_path):
    path = _write_book(tmp_path / "undated.xlsx", {
        "Sales": [["id", "customerName", "saleType", "price", "phoneType"],
                  ["u1", "Mary", "Accessory", 250, "Car Charger"]],
    })
    SpreadsheetService(empty_state).import_workbook(path, now=datetime(2024, 3, 15, 9, 30))

    sale = empty_state.sales.get("u1")
    assert sale.receipt_date == "2024-03-15T09:30:00"
    assert sale.date_booked == "2024-03-15"
    summary = summarize(empty_state.sales.list())
    assert summary.grand_total == 250.0
    assert sum(b.amount for b in summary.buckets) == 250.0
