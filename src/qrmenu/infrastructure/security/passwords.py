from __future__ import annotations

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

from qrmenu.application.ports.security import PasswordHasher


class Argon2PasswordHasher(PasswordHasher):
    def __init__(self, hasher: _Argon2Hasher | None = None) -> None:
        self._hasher = hasher or _Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
