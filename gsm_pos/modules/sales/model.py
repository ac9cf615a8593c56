# gsm_pos/modules/sales/model.py
from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...utils.helpers import fmt_money, fmt_standard_date
from .record import Sale, SaleType


class SalesTableModel(QAbstractTableModel):
    HEADERS = ["Receipt #", "Date", "Customer", "Item", "Type", "Status", "Total"]

    def __init__(self, rows: Optional[List[Sale]] = None, parent=None):
        super().__init__(parent)
        self._rows: List[Sale] = rows or []

    def set_rows(self, rows: List[Sale]) -> None:
        self.beginResetModel()
        self._rows = rows or []
        self.endResetModel()

    def at(self, row: int) -> Sale:
        return self._rows[row]

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.HEADERS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):  # type: ignore[override]
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.HEADERS[section]
        return str(section + 1)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        s = self._rows[index.row()]
        c = index.column()

        if role == Qt.DisplayRole:
            if c == 0:
                return s.receipt_number or ""
            if c == 1:
                try:
                    return fmt_standard_date(s.date_booked) if s.date_booked else ""
                except ValueError:
                    return str(s.date_booked)
            if c == 2:
                return s.customer_name
            if c == 3:
                return " ".join(p for p in (s.phone_type, s.phone_model) if p)
            if c == 4:
                return s.sale_type.value
            if c == 5:
                # only repairs have a workflow worth showing
                return s.status.value if s.sale_type == SaleType.REPAIR else ""
            if c == 6:
                return fmt_money(s.price)
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c == 6 else (Qt.AlignLeft | Qt.AlignVCenter)
        if role == Qt.UserRole:
            return s.id
        return None
