# gsm_pos/modules/payments/model.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor

from ...utils.helpers import fmt_money, fmt_standard_date
from ..sales.record import Sale
from .payment_utilities.credit import days_overdue, is_overdue, remaining_credit


class DebtTableModel(QAbstractTableModel):
    """Debt register: one row per unpaid credit sale."""

    HEADERS = ("Customer", "Item", "Paid", "Total", "Remaining", "Due", "Overdue")

    def __init__(self, rows: Optional[List[Sale]] = None, parent=None, *, now: Optional[datetime] = None) -> None:
        super().__init__(parent)
        self._rows: List[Sale] = rows or []
        self._now = now

    def set_rows(self, rows: List[Sale], *, now: Optional[datetime] = None) -> None:
        self.beginResetModel()
        self._rows = rows or []
        self._now = now
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
        now = self._now or datetime.now()

        if role == Qt.DisplayRole:
            if c == 0:
                return s.customer_name
            if c == 1:
                return " ".join(p for p in (s.phone_type, s.phone_model) if p)
            if c == 2:
                return fmt_money(s.credit_amount_paid or 0.0)
            if c == 3:
                return fmt_money(s.price)
            if c == 4:
                return fmt_money(remaining_credit(s))
            if c == 5:
                if not s.credit_due_date:
                    return "N/A"
                try:
                    return fmt_standard_date(s.credit_due_date)
                except ValueError:
                    return s.credit_due_date
            if c == 6:
                n = days_overdue(s, now)
                return f"{n} day{'s' if n != 1 else ''}" if is_overdue(s, now) else ""
        if role == Qt.ForegroundRole and c == 6 and is_overdue(s, now):
            return QColor("#c62828")
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c in (2, 3, 4) else (Qt.AlignLeft | Qt.AlignVCenter)
        return None
