# tests/test_login.py
import pytest

from gsm_pos.constants import KEY_USERS
from gsm_pos.modules.login.controller import LoginController
from gsm_pos.modules.login.model import AuthFailure, Role
from gsm_pos.modules.login.verifiers import HashedVerifier, PlaintextVerifier
from gsm_pos.utils.auth import is_password_hash
from gsm_pos.utils.errors import PermissionDenied


def test_admin_login_and_logout(state):
    user = state.login.login("Admin", "Admin123")
    assert user is not None
    assert user.role == Role.ADMIN
    assert state.current_user == user
    stored = state.users.get_current_user()
    assert "password" not in stored

    state.login.logout()
    assert state.current_user is None


@pytest.mark.parametrize("username, password, reason", [
    ("Admin", "wrong", "wrong_password"),
    ("Nobody", "Admin123", "unknown_user"),
    ("", "", "empty_fields"),
])
def test_failures_share_one_message(state, username, password, reason):
    assert state.login.login(username, password) is None
    assert state.login.last_error_message == "Invalid username or password."
    assert state.login.last_error_code == reason
    assert state.current_user is None


def test_usernames_are_case_sensitive(state):
    assert state.login.login("admin", "Admin123") is None


def test_plaintext_entries_are_upgraded_on_login(empty_state):
    empty_state.store.save(KEY_USERS, [{"id": "u9", "username": "Till", "password": "pw9", "role": "Cashier"}])
    ctl = LoginController(empty_state.users, HashedVerifier(empty_state.users))
    assert ctl.login("Till", "pw9").role == Role.CASHIER
    stored = empty_state.users.get_user_by_username("Till")["password"]
    assert is_password_hash(stored)
    # the upgraded hash still verifies
    assert ctl.login("Till", "pw9") is not None


def test_plaintext_verifier(empty_state):
    empty_state.store.save(KEY_USERS, [{"id": "u1", "username": "Admin", "password": "Admin123", "role": "Admin"}])
    v = PlaintextVerifier(empty_state.users)
    assert v.verify("Admin", "Admin123").username == "Admin"
    assert isinstance(v.verify("Admin", "admin123"), AuthFailure)


def test_only_admin_may_edit_sales(state):
    cashier = state.login.login("Cashier", "Cashier123")
    with pytest.raises(PermissionDenied):
        state.login.require_sale_editor()
    assert not cashier.can_edit_sales

    admin = state.login.login("Admin", "Admin123")
    assert state.login.require_sale_editor() == admin


def test_nobody_signed_in_may_not_edit(state):
    with pytest.raises(PermissionDenied):
        state.login.require_sale_editor()
