"""Registry mapping hasher name tags to hash algorithm implementations."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import SecretStr

from credential_verification.application.ports.credential_repository_port import CredentialRecord
from credential_verification.application.ports.password_hasher_port import PasswordHasherPort
from credential_verification.domain.credentials.comparison import ComparisonResult
from credential_verification.domain.credentials.digest import CURRENT_DIGEST_FORMAT
from credential_verification.domain.credentials.errors import HasherUnavailableError
from credential_verification.domain.credentials.stored_hash import (
    MalformedStoredHashError,
    StoredHash,
)


class PasswordHasherRegistry:
    """Resolve stored hashes to hashers and pick the strongest hasher for upgrades."""

    def __init__(self, hashers: Iterable[PasswordHasherPort]) -> None:
        self._hashers: dict[str, PasswordHasherPort] = {}
        for hasher in hashers:
            if hasher.name in self._hashers:
                raise ValueError(f"duplicate password hasher name: {hasher.name!r}")
            self._hashers[hasher.name] = hasher

    @property
    def hasher_names(self) -> tuple[str, ...]:
        return tuple(self._hashers)

    def get_hasher(self, name: str) -> PasswordHasherPort:
        """Return the named hasher, or raise when it is unknown or cannot run."""

        hasher = self._hashers.get(name)
        if hasher is None or not hasher.is_available():
            raise HasherUnavailableError(hasher_name=name)
        return hasher

    def best_hasher(self) -> PasswordHasherPort:
        """Return the strongest hasher that can run in this process."""

        available = [hasher for hasher in self._hashers.values() if hasher.is_available()]
        if not available:
            raise HasherUnavailableError(hasher_name="<best>")
        return max(available, key=lambda hasher: hasher.strength)

    def compare(self, *, digest: SecretStr, password_hash: str) -> ComparisonResult:
        """Compare one digest with one stored `<name>:<hash>` value."""

        try:
            stored = StoredHash.parse(password_hash)
            hasher = self.get_hasher(stored.hasher_name)
        except (MalformedStoredHashError, HasherUnavailableError):
            return ComparisonResult.UNAVAILABLE

        if hasher.verify_digest(digest=digest, hash_value=stored.hash_value):
            return ComparisonResult.MATCH
        return ComparisonResult.MISMATCH

    def can_upgrade(self, record: CredentialRecord) -> bool:
        """Return whether a stored credential would benefit from re-hashing."""

        if record.digest_format is not CURRENT_DIGEST_FORMAT:
            return True

        stored = StoredHash.parse(record.password_hash)
        best = self.best_hasher()
        if stored.hasher_name != best.name:
            return True
        return best.needs_rehash(stored.hash_value)

    def hash_for_storage(self, digest: SecretStr) -> StoredHash:
        """Hash one digest with the strongest available hasher."""

        best = self.best_hasher()
        return StoredHash(hasher_name=best.name, hash_value=best.hash_digest(digest))
