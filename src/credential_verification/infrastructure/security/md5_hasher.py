"""Legacy iterated-MD5 hasher kept so old credentials can still verify and upgrade."""

from __future__ import annotations

import hashlib
import hmac

from pydantic import SecretStr

from credential_verification.application.ports.password_hasher_port import PasswordHasherPort


class IteratedMd5PasswordHasher(PasswordHasherPort):
    """MD5 applied repeatedly to the digest; never the best hasher when others exist."""

    def __init__(self, *, iterations: int = 1000) -> None:
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        self._iterations = iterations

    @property
    def name(self) -> str:
        return "md5"

    @property
    def strength(self) -> float:
        return 1.0

    def is_available(self) -> bool:
        # FIPS-restricted builds drop md5 from the available set.
        return "md5" in hashlib.algorithms_available

    def hash_digest(self, digest: SecretStr) -> str:
        value = digest.get_secret_value()
        for _ in range(self._iterations):
            value = hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()
        return value

    def verify_digest(self, *, digest: SecretStr, hash_value: str) -> bool:
        return hmac.compare_digest(self.hash_digest(digest), hash_value)

    def needs_rehash(self, hash_value: str) -> bool:
        """Legacy hashes are replaced by a stronger hasher, never re-hashed as md5."""

        return False
