from __future__ import annotations

from typing import Any

import bcrypt

from .models import MAX_PASSWORD_BYTES

_users: dict[str, dict[str, Any]] = {}


class UsernameTakenError(ValueError):
    pass


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=10)).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed a demo account on import."""
    _users["demo"] = {"password_hash": _hash_password("demo123")}


def register(username: str, password: str) -> dict[str, Any]:
    """Create an account. Raises ``UsernameTakenError`` if the name exists."""
    if username in _users:
        raise UsernameTakenError(username)
    _users[username] = {"password_hash": _hash_password(password)}
    return {"username": username}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username}`` or ``None``."""
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        return None
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username}
    return None


_seed_users()
