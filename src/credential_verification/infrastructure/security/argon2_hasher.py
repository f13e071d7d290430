"""Argon2id password hasher adapter."""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)
from pydantic import SecretStr

from credential_verification.application.ports.password_hasher_port import PasswordHasherPort
from credential_verification.domain.credentials.errors import PasswordHashingError


class Argon2idPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using argon2id in PHC string format."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost_kib: int = 65_536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost_kib,
            parallelism=parallelism,
        )

    @property
    def name(self) -> str:
        return "argon2id"

    @property
    def strength(self) -> float:
        return 3.0

    def is_available(self) -> bool:
        return True

    def hash_digest(self, digest: SecretStr) -> str:
        try:
            return self._hasher.hash(digest.get_secret_value())
        except HashingError as error:
            raise PasswordHashingError(hasher_name=self.name, reason=str(error)) from error

    def verify_digest(self, *, digest: SecretStr, hash_value: str) -> bool:
        try:
            return self._hasher.verify(hash_value, digest.get_secret_value())
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hash_value: str) -> bool:
        try:
            return self._hasher.check_needs_rehash(hash_value)
        except InvalidHashError:
            return True
