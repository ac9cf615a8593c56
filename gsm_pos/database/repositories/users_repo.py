from __future__ import annotations

from typing import Optional

from ...constants import DEFAULT_THEME, KEY_CURRENT_USER, KEY_THEME, KEY_USERS, THEMES
from ...utils.errors import DomainError
from .store_repo import KeyValueStore


class UsersRepo:
    """
    Thin data-access layer for login.

    gsm-users holds [{id, username, password, role}], where `password` is
    whatever the active credential verifier understands (a bcrypt hash for
    the default verifier). gsm-pos-user holds the signed-in user without
    secrets, or null. gsm-pos-theme holds "light" or "dark".

    This repo does NOT verify passwords; see modules.login.verifiers.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def _norm_username(username: str) -> str:
        return (username or "").strip()

    # ------------------------------- reads -------------------------------

    def list_users(self) -> list[dict]:
        raw = self.store.load(KEY_USERS, [])
        return [dict(u) for u in raw if isinstance(u, dict)] if isinstance(raw, list) else []

    def get_user_by_username(self, username: str) -> Optional[dict]:
        """Exact (case-sensitive) username match, as a plain dict."""
        uname = self._norm_username(username)
        return next((u for u in self.list_users() if u.get("username") == uname), None)

    def get_current_user(self) -> Optional[dict]:
        value = self.store.load(KEY_CURRENT_USER, None)
        return value if isinstance(value, dict) else None

    def get_theme(self) -> str:
        theme = self.store.load(KEY_THEME, DEFAULT_THEME)
        return theme if theme in THEMES else DEFAULT_THEME

    # ------------------------------ writes -------------------------------

    def set_password(self, username: str, password_value: str) -> None:
        users = self.list_users()
        for u in users:
            if u.get("username") == self._norm_username(username):
                u["password"] = password_value
                break
        else:
            raise DomainError(f"No such user: {username}")
        self.store.save(KEY_USERS, users)

    def set_current_user(self, user: Optional[dict]) -> None:
        self.store.save(KEY_CURRENT_USER, user)

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise DomainError(f"Unknown theme: {theme}")
        self.store.save(KEY_THEME, theme)

