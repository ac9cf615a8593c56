# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every test gets its own in-memory store, seeded with the demo data
# - `now` is pinned so overdue / receipt dates are deterministic
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import re
from datetime import datetime

import pytest

# Run Qt headless unless a platform is explicitly configured.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6 import QtCore

from gsm_pos.app_state import AppState
from gsm_pos.modules.sales.record import PaymentMethod, Sale, SaleType, Status


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):
    return qapp


# ---------- Silence benign Qt warnings ----------
_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
]


@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    original = QtCore.qInstallMessageHandler(None)
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]

    def handler(msg_type, context, message):
        text = str(message)
        for r in rx:
            if r.search(text):
                return
        QtCore.qInstallMessageHandler(None)
        try:
            QtCore.qDebug(message)
        finally:
            QtCore.qInstallMessageHandler(handler)

    QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(original)


# ---------- Store ----------
@pytest.fixture()
def state():
    st = AppState.open(":memory:")
    try:
        yield st
    finally:
        st.close()


@pytest.fixture()
def empty_state():
    """Schema only; no demo data."""
    st = AppState.open(":memory:", seed=False)
    try:
        yield st
    finally:
        st.close()


@pytest.fixture()
def now():
    return datetime(2024, 3, 15, 9, 30, 0)


# ---------- Sale factories ----------
@pytest.fixture()
def make_sale():
    counter = {"n": 100}

    def _make(**overrides) -> Sale:
        counter["n"] += 1
        n = counter["n"]
        base = dict(
            id=f"s{n}",
            receipt_number=f"GSM-{n:04d}",
            sale_type=SaleType.ACCESSORY,
            status=Status.COMPLETED,
            payment_method=PaymentMethod.CASH,
            customer_name="Test Customer",
            phone_type="Type-C Cable",
            price=500.0,
            unit_price=500.0,
            quantity=1,
            date_booked="2024-03-10",
            receipt_date="2024-03-10T12:00:00",
        )
        base.update(overrides)
        return Sale(**base)

    return _make


@pytest.fixture()
def credit_sale(make_sale):
    def _make(**overrides) -> Sale:
        base = dict(
            sale_type=SaleType.REPAIR,
            status=Status.PENDING,
            payment_method=PaymentMethod.CREDIT,
            phone_type="Samsung",
            phone_model="Galaxy A54",
            repair_type="Screen Replacement",
            unit_price=None,
            quantity=None,
            price=10000.0,
            customer_id_number="12345678",
            credit_amount_paid=0.0,
            credit_paid=False,
            credit_due_date="2024-03-20",
        )
        base.update(overrides)
        return make_sale(**base)

    return _make
