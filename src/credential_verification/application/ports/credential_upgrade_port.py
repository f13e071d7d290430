"""Port for persisting an opportunistic credential hash upgrade."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from credential_verification.application.ports.write_guard_port import WriteCapability
from credential_verification.domain.credentials.content_source import ContentSource
from credential_verification.domain.credentials.digest import DigestFormat

PASSWORD_UPGRADE_TRANSACTION = "password.upgrade"


@dataclass(frozen=True)
class CredentialHashUpgradeInput:
    """Replacement hash plus the attribution recorded on its audit transaction."""

    credential_id: int
    account_id: str
    expected_password_hash: str
    new_password_hash: str
    new_password_salt: str
    new_digest_format: DigestFormat
    old_hasher_name: str
    new_hasher_name: str
    actor_id: str
    content_source: ContentSource


class CredentialUpgradePort(Protocol):
    """Atomic hash replacement and audit transaction contract."""

    async def apply_hash_upgrade(
        self,
        payload: CredentialHashUpgradeInput,
        *,
        capability: WriteCapability,
    ) -> int:
        """Replace one credential hash and append its audit transaction atomically.

        Returns the audit transaction id. Raises `CredentialUpgradeConflictError`
        when the stored hash no longer equals `expected_password_hash`, and
        `CredentialUpgradeError` for other write failures.
        """
