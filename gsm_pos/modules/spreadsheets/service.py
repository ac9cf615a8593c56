"""
Spreadsheet backup / restore with openpyxl.

Import reads any of the sheets Sales, Purchases, Suppliers, Technicians and
CSRs (first row = headers, camelCase keys as stored) and upserts rows by
id. Rows missing a required column value are skipped. Sheets are applied
one by one, so a bad sheet does not undo a good one.

Export writes one collection, as stored, to a single-sheet workbook.
"""
from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Optional

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils.exceptions import InvalidFileException

from ...app_state import AppState
from ...constants import (
    IMPORT_SHEETS,
    KEY_CSRS,
    KEY_PURCHASES,
    KEY_SALES,
    KEY_SUPPLIERS,
    KEY_TECHNICIANS,
)
from ...database.repositories import Purchase, StaffMember, Supplier
from ...utils.errors import DomainError, ImportFailed
from ...utils.helpers import new_id, now_iso
from ...utils.loggers import get_logger
from ..sales.record import Sale, next_receipt_number

_log = get_logger(__name__)

REQUIRED_FIELDS: dict[str, frozenset[str]] = {
    "Sales": frozenset({"customerName", "saleType", "price"}),
    "Purchases": frozenset({"supplierId", "product", "cost", "quantity"}),
    "Suppliers": frozenset({"name"}),
    "Technicians": frozenset({"name"}),
    "CSRs": frozenset({"name"}),
}

SHEET_KEYS: dict[str, str] = {
    "Sales": KEY_SALES,
    "Purchases": KEY_PURCHASES,
    "Suppliers": KEY_SUPPLIERS,
    "Technicians": KEY_TECHNICIANS,
    "CSRs": KEY_CSRS,
}

NOTHING_TO_EXPORT = "No data to export."


@dataclass
class ImportReport:
    applied: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)

    @property
    def sheets(self) -> list[str]:
        return list(self.applied)

    @property
    def total_applied(self) -> int:
        return sum(self.applied.values())


def _cell(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


def _present(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


def _read_rows(ws) -> list[dict]:
    rows = ws.iter_rows(values_only=True)
    try:
        header = next(rows)
    except StopIteration:
        return []
    keys = [str(h).strip() if h is not None else "" for h in header]
    out = []
    for values in rows:
        record = {}
        for k, v in zip(keys, values):
            v = _cell(v)
            if k and _present(v):
                record[k] = v
        if record:
            out.append(record)
    return out


class SpreadsheetService:
    """
    Public attrs:
      - last_notice: str | None  (set when an export had nothing to write)
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self.last_notice: Optional[str] = None

    # ----------------------------- Import -----------------------------

    def import_workbook(self, path: Path | str, *, now: Optional[datetime] = None) -> ImportReport:
        """
        Apply every known sheet in the workbook at `path`. Sales rows without
        dates are stamped with `now`, as a save from the form would be.
        """
        try:
            workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
            _log.warning("Could not open workbook %s: %s", path, e)
            raise ImportFailed() from e

        try:
            found = [name for name in IMPORT_SHEETS if name in workbook.sheetnames]
            if not found:
                raise ImportFailed()

            report = ImportReport()
            appliers: dict[str, Callable[[list[dict]], tuple[int, int]]] = {
                "Sales": lambda rows: self._apply_sales(rows, now or datetime.now()),
                "Purchases": self._apply_purchases,
                "Suppliers": self._apply_suppliers,
                "Technicians": lambda rows: self._apply_staff(self.state.technicians, rows),
                "CSRs": lambda rows: self._apply_staff(self.state.csrs, rows),
            }
            for name in found:
                rows = _read_rows(workbook[name])
                required = REQUIRED_FIELDS[name]
                complete = [r for r in rows if all(_present(r.get(k)) for k in required)]
                missing = len(rows) - len(complete)
                applied, rejected = appliers[name](complete)
                report.applied[name] = applied
                report.skipped[name] = missing + rejected
                _log.info("Imported %s: %d rows applied, %d skipped", name, applied, missing + rejected)
            return report
        finally:
            workbook.close()

    def _apply_sales(self, rows: list[dict], now: datetime) -> tuple[int, int]:
        sales = self.state.sales.list()
        index = {s.id: i for i, s in enumerate(sales)}
        applied = rejected = 0
        for row in rows:
            try:
                sale = Sale.from_dict(row)
            except DomainError as e:
                _log.warning("Skipping sale row %r: %s", row.get("id"), e)
                rejected += 1
                continue
            if not sale.id:
                sale.id = new_id()
            if not sale.receipt_number:
                sale.receipt_number = next_receipt_number(sales)
            if not sale.receipt_date:
                sale.receipt_date = now_iso(now)
            if not sale.date_booked:
                sale.date_booked = now.date().isoformat()
            if sale.id in index:
                sales[index[sale.id]] = sale
            else:
                index[sale.id] = len(sales)
                sales.append(sale)
            applied += 1
        self.state.sales.replace_all(sales)
        return applied, rejected

    def _apply_purchases(self, rows: list[dict]) -> tuple[int, int]:
        applied = rejected = 0
        for row in rows:
            try:
                purchase = Purchase.from_dict({**row, "id": row.get("id") or new_id()})
                self.state.purchases.upsert(purchase)
            except (DomainError, TypeError, ValueError) as e:
                _log.warning("Skipping purchase row %r: %s", row.get("id"), e)
                rejected += 1
                continue
            applied += 1
        return applied, rejected

    def _apply_suppliers(self, rows: list[dict]) -> tuple[int, int]:
        applied = rejected = 0
        for row in rows:
            supplier = Supplier(
                id=str(row.get("id") or new_id()),
                name=str(row["name"]),
                contact=str(row.get("contact") or ""),
            )
            try:
                self.state.suppliers.upsert(supplier)
            except DomainError as e:
                _log.warning("Skipping supplier row %r: %s", row.get("id"), e)
                rejected += 1
                continue
            applied += 1
        return applied, rejected

    @staticmethod
    def _apply_staff(repo, rows: list[dict]) -> tuple[int, int]:
        applied = rejected = 0
        for row in rows:
            member = StaffMember(id=str(row.get("id") or new_id()), name=str(row["name"]).strip())
            try:
                repo.upsert(member)
            except DomainError as e:
                _log.warning("Skipping %s row %r: %s", repo.key, row.get("id"), e)
                rejected += 1
                continue
            applied += 1
        return applied, rejected

    # ----------------------------- Export -----------------------------

    def export_collection(self, sheet_name: str, path: Path | str) -> bool:
        """
        Write the named collection (one of IMPORT_SHEETS) to `path`.
        Returns False, with `last_notice` set, when there is nothing to write.
        """
        self.last_notice = None
        if sheet_name not in SHEET_KEYS:
            raise DomainError(f"Unknown collection: {sheet_name}")
        data = self.state.store.load(SHEET_KEYS[sheet_name], [])
        rows = [r for r in data if isinstance(r, dict)] if isinstance(data, list) else []
        if not rows:
            self.last_notice = NOTHING_TO_EXPORT
            _log.info("Export of %s skipped: %s", sheet_name, NOTHING_TO_EXPORT)
            return False

        headers: list[str] = []
        for r in rows:
            for k in r:
                if k not in headers:
                    headers.append(k)

        workbook = openpyxl.Workbook()
        worksheet = workbook.active
        worksheet.title = sheet_name
        for col, header in enumerate(headers, 1):
            cell = worksheet.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True)
            cell.fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")
        for row_idx, row in enumerate(rows, 2):
            for col_idx, header in enumerate(headers, 1):
                worksheet.cell(row=row_idx, column=col_idx, value=row.get(header))

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(path)
        _log.info("Exported %d %s rows to %s", len(rows), sheet_name, path)
        return True
