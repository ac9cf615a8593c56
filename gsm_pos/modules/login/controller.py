# gsm_pos/modules/login/controller.py
from __future__ import annotations

from typing import Optional

from ...database.repositories.users_repo import UsersRepo
from ...utils.errors import PermissionDenied
from ...utils.loggers import get_logger
from .model import AuthFailure, User
from .verifiers import CredentialVerifier, HashedVerifier

_log = get_logger(__name__)


class LoginController:
    """
    Login flow over UsersRepo and a CredentialVerifier.

    Public attrs (set after each login()):
      - last_error_code: str | None     (for logs; never shown)
      - last_error_message: str | None  (always the generic message)
      - last_username: str | None
    """

    def __init__(self, repo: UsersRepo, verifier: Optional[CredentialVerifier] = None) -> None:
        self.repo = repo
        self.verifier = verifier or HashedVerifier(repo)

        self.last_error_code: Optional[str] = None
        self.last_error_message: Optional[str] = None
        self.last_username: Optional[str] = None

    # ----------------------------- Public API -----------------------------

    @property
    def current_user(self) -> Optional[User]:
        stored = self.repo.get_current_user()
        if not stored:
            return None
        try:
            return User.from_mapping(stored)
        except (KeyError, ValueError):
            _log.warning("Stored current user is unreadable; signing out.")
            self.repo.set_current_user(None)
            return None

    def login(self, username: str, password: str) -> Optional[User]:
        """
        Returns the signed-in User, or None. On failure last_error_* are set
        and nothing is stored.
        """
        self._reset_last_error()
        self.last_username = (username or "").strip()

        result = self.verifier.verify(username, password)
        if isinstance(result, AuthFailure):
            self.last_error_code = result.reason
            self.last_error_message = result.message
            _log.info("Login failed for %r (%s)", self.last_username, result.reason)
            return None

        self.repo.set_current_user(result.to_dict())
        _log.info("%s signed in as %s", result.username, result.role.value)
        return result

    def logout(self) -> None:
        self.repo.set_current_user(None)
        self._reset_last_error()

    def require_sale_editor(self, user: Optional[User] = None) -> User:
        """The signed-in (or given) user, if allowed to edit sales."""
        user = user or self.current_user
        if user is None or not user.can_edit_sales:
            raise PermissionDenied("Only an Admin can edit sales.")
        return user

    # ----------------------------- Internals -----------------------------

    def _reset_last_error(self) -> None:
        self.last_error_code = None
        self.last_error_message = None
        self.last_username = None
