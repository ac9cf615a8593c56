# gsm_pos/app_state.py
"""
Application state container.

One AppState is built at start-up and handed to every controller; nothing
reaches for module-level globals. Repositories read and write through to
the key-value store on every call.
"""
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .database import get_connection
from .database.repositories import (
    KeyValueStore,
    PurchasesRepo,
    SalesRepo,
    StaffRepo,
    SuppliersRepo,
    UsersRepo,
    csrs_repo,
    technicians_repo,
)
from .modules.login.controller import LoginController
from .modules.login.model import User
from .modules.login.verifiers import CredentialVerifier
from .modules.payments.credit_ledger import CreditLedger, ReminderGate


@dataclass
class AppState:
    conn: sqlite3.Connection
    store: KeyValueStore = field(init=False)
    sales: SalesRepo = field(init=False)
    technicians: StaffRepo = field(init=False)
    csrs: StaffRepo = field(init=False)
    suppliers: SuppliersRepo = field(init=False)
    purchases: PurchasesRepo = field(init=False)
    users: UsersRepo = field(init=False)
    ledger: CreditLedger = field(init=False)
    login: LoginController = field(init=False)
    reminder: ReminderGate = field(init=False, default_factory=ReminderGate)
    verifier: Optional[CredentialVerifier] = None

    def __post_init__(self) -> None:
        self.store = KeyValueStore(self.conn)
        self.sales = SalesRepo(self.store)
        self.technicians = technicians_repo(self.store)
        self.csrs = csrs_repo(self.store)
        self.suppliers = SuppliersRepo(self.store)
        self.purchases = PurchasesRepo(self.store)
        self.users = UsersRepo(self.store)
        self.ledger = CreditLedger(self.sales)
        self.login = LoginController(self.users, self.verifier)

    @classmethod
    def open(cls, db_path: Path | str | None = None, *, seed: bool = True,
             verifier: Optional[CredentialVerifier] = None) -> "AppState":
        return cls(conn=get_connection(db_path, seed=seed), verifier=verifier)

    # ---- session ----

    @property
    def current_user(self) -> Optional[User]:
        return self.login.current_user

    @property
    def theme(self) -> str:
        return self.users.get_theme()

    @theme.setter
    def theme(self, value: str) -> None:
        self.users.set_theme(value)

    def pending_overdue_reminder(self) -> Optional[str]:
        """The overdue-debt reminder, once per session."""
        return self.reminder.take(self.ledger.overdue_reminder())

    def close(self) -> None:
        self.conn.close()
