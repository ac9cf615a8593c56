# gsm_pos/modules/login/verifiers.py
"""
Credential checks against the gsm-users collection.

PlaintextVerifier compares stored passwords as-is, which is how user lists
exported from the browser build are laid out. HashedVerifier expects bcrypt
hashes and upgrades any plaintext entry it successfully checks.
"""
from __future__ import annotations

from typing import Protocol, Union

from ...database.repositories.users_repo import UsersRepo
from ...utils.auth import hash_password, is_password_hash, needs_rehash, verify_password
from ...utils.loggers import get_logger
from .model import AuthFailure, User

_log = get_logger(__name__)

AuthResult = Union[User, AuthFailure]


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> AuthResult:
        ...


def _lookup(repo: UsersRepo, username: str, password: str):
    if not (username or "").strip() or not password:
        return None, AuthFailure("empty_fields")
    u = repo.get_user_by_username(username)
    if not u:
        return None, AuthFailure("unknown_user")
    return u, None


class PlaintextVerifier:
    def __init__(self, repo: UsersRepo):
        self.repo = repo

    def verify(self, username: str, password: str) -> AuthResult:
        u, failure = _lookup(self.repo, username, password)
        if failure:
            return failure
        if u.get("password") != password:
            return AuthFailure("wrong_password")
        return User.from_mapping(u)


class HashedVerifier:
    def __init__(self, repo: UsersRepo):
        self.repo = repo

    def verify(self, username: str, password: str) -> AuthResult:
        u, failure = _lookup(self.repo, username, password)
        if failure:
            return failure
        stored = u.get("password")
        if is_password_hash(stored):
            ok = verify_password(password, stored)
        else:
            # legacy plaintext entry
            ok = stored == password
        if not ok:
            return AuthFailure("wrong_password")

        if needs_rehash(stored):
            self.repo.set_password(u["username"], hash_password(password))
            _log.info("Upgraded stored password for %s", u["username"])
        return User.from_mapping(u)
