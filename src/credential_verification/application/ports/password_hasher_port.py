"""Port for one pluggable password hash algorithm."""

from __future__ import annotations

from typing import Protocol

from pydantic import SecretStr


class PasswordHasherPort(Protocol):
    """Hash algorithm capability contract.

    Hashers operate on the account-bound digest, never on the raw secret, and
    return or accept the hash text without the `<name>:` tag.
    """

    @property
    def name(self) -> str:
        """Stable tag persisted in front of every hash this hasher produces."""

    @property
    def strength(self) -> float:
        """Relative strength; the registry upgrades toward the highest value."""

    def is_available(self) -> bool:
        """Return whether this algorithm can run in the current process."""

    def hash_digest(self, digest: SecretStr) -> str:
        """Hash one digest for storage."""

    def verify_digest(self, *, digest: SecretStr, hash_value: str) -> bool:
        """Compare one digest with a hash previously produced by this hasher."""

    def needs_rehash(self, hash_value: str) -> bool:
        """Return whether a hash should be recomputed with current parameters."""
