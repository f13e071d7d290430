"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt
from pydantic import SecretStr

from credential_verification.application.ports.password_hasher_port import PasswordHasherPort
from credential_verification.domain.credentials.errors import PasswordHashingError


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds

    @property
    def name(self) -> str:
        return "bcrypt"

    @property
    def strength(self) -> float:
        return 2.0

    def is_available(self) -> bool:
        return True

    def hash_digest(self, digest: SecretStr) -> str:
        encoded = digest.get_secret_value().encode("utf-8")
        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds))
        except ValueError as error:
            raise PasswordHashingError(hasher_name=self.name, reason=str(error)) from error
        return hashed.decode("utf-8")

    def verify_digest(self, *, digest: SecretStr, hash_value: str) -> bool:
        try:
            return bcrypt.checkpw(
                digest.get_secret_value().encode("utf-8"),
                hash_value.encode("utf-8"),
            )
        except ValueError:
            return False

    def needs_rehash(self, hash_value: str) -> bool:
        """Return True when the stored cost factor differs from configured rounds."""

        parts = hash_value.split("$")
        if len(parts) < 4:
            return True
        try:
            return int(parts[2]) != self._rounds
        except ValueError:
            return True
