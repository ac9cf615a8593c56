# gsm_pos/utils/auth.py
from __future__ import annotations

from typing import Union

import bcrypt

_BCRYPT_DEFAULT_ROUNDS = 12          # used when hashing
_BCRYPT_MIN_ACCEPTABLE_ROUNDS = 12   # rehash if lower than this
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_password_hash(value: Union[str, bytes, None]) -> bool:
    """True if `value` looks like a bcrypt hash rather than a stored plaintext password."""
    if not value:
        return False
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    return value.strip().startswith(_BCRYPT_PREFIXES)


def _parse_bcrypt_cost(hash_str: str) -> int | None:
    """
    Extract the cost from a bcrypt hash: $2b$12$...
    Returns None if not parseable.
    """
    parts = hash_str.split("$")
    # ['', '2b', '12', 'rest...']
    if len(parts) < 4:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def hash_password(password: str, *, rounds: int = _BCRYPT_DEFAULT_ROUNDS) -> str:
    """
    Hash `password` with bcrypt. The cost is clamped to a minimum of
    _BCRYPT_MIN_ACCEPTABLE_ROUNDS.
    """
    if not isinstance(password, str) or password == "":
        raise ValueError("Password must be a non-empty string")
    rounds = max(int(rounds), _BCRYPT_MIN_ACCEPTABLE_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, stored_hash: Union[str, bytes, None]) -> bool:
    """Verify `password` against a bcrypt `stored_hash`. Unknown formats never verify."""
    if stored_hash is None or password is None:
        return False
    if isinstance(stored_hash, bytes):
        stored_hash = stored_hash.decode("utf-8", errors="ignore")
    stored_hash = stored_hash.strip()
    if not is_password_hash(stored_hash):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        # malformed salt
        return False


def needs_rehash(stored_hash: Union[str, bytes, None], *, min_rounds: int = _BCRYPT_MIN_ACCEPTABLE_ROUNDS) -> bool:
    """
    Return True if the stored value should be re-hashed on next successful login:
    plaintext values, malformed hashes, or bcrypt below `min_rounds`.
    """
    if not is_password_hash(stored_hash):
        return True
    if isinstance(stored_hash, bytes):
        stored_hash = stored_hash.decode("utf-8", errors="ignore")
    cost = _parse_bcrypt_cost(stored_hash.strip())
    return cost is None or cost < min_rounds
