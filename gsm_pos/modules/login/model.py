# gsm_pos/modules/login/model.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


class Role(str, Enum):
    ADMIN = "Admin"
    CASHIER = "Cashier"


@dataclass(frozen=True)
class User:
    """
    App-facing user object (no secrets).

    This is what gets stored under gsm-pos-user while someone is signed in.
    """
    id: str
    username: str
    role: Role

    @property
    def can_edit_sales(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_mapping(cls, m: Mapping[str, Any]) -> "User":
        """Build from a stored user dict; any password key is ignored."""
        return cls(id=str(m["id"]), username=str(m["username"]), role=Role(m.get("role") or Role.CASHIER))

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role.value}


@dataclass(frozen=True)
class AuthFailure:
    """
    A refused login. `reason` is for logs only; users always see the
    generic `message`.
    """
    reason: str
    message: str = INVALID_CREDENTIALS_MESSAGE
