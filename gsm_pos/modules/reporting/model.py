# gsm_pos/modules/reporting/model.py
from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...utils.helpers import fmt_money
from .totals import Bucket, MethodShare


class _ReadOnlyTableModel(QAbstractTableModel):
    HEADERS: tuple = ()

    def __init__(self, rows: Optional[list] = None, parent=None) -> None:
        super().__init__(parent)
        self._rows: list = rows or []

    def set_rows(self, rows: list) -> None:
        self.beginResetModel()
        self._rows = rows or []
        self.endResetModel()

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


# ------------------------------ A) Time breakdown -----------------------------

class TimeBreakdownTableModel(_ReadOnlyTableModel):
    HEADERS = ("Period", "Amount")

    def __init__(self, rows: Optional[List[Bucket]] = None, parent=None, *, period_label: str = "Period") -> None:
        super().__init__(rows, parent)
        self.HEADERS = (period_label, "Amount")

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        b: Bucket = self._rows[index.row()]
        c = index.column()
        if role == Qt.DisplayRole:
            return b.label if c == 0 else fmt_money(b.amount)
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c == 1 else (Qt.AlignLeft | Qt.AlignVCenter)
        return None


# ------------------------------ B) Payment methods ----------------------------

class PaymentMethodTableModel(_ReadOnlyTableModel):
    HEADERS = ("Method", "Amount", "Share")

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        m: MethodShare = self._rows[index.row()]
        c = index.column()
        if role == Qt.DisplayRole:
            if c == 0:
                return m.method.value
            if c == 1:
                return fmt_money(m.amount)
            if c == 2:
                return f"{m.share * 100:.1f}%"
        if role == Qt.TextAlignmentRole:
            return (Qt.AlignRight | Qt.AlignVCenter) if c != 0 else (Qt.AlignLeft | Qt.AlignVCenter)
        return None
