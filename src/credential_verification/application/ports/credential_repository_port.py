"""Port for credential record queries used by the verification engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from credential_verification.domain.credentials.digest import DigestFormat


@dataclass(frozen=True)
class CredentialRecord:
    """Credential persistence model."""

    credential_id: int
    account_id: str
    credential_type: str
    password_hash: str
    password_salt: str
    digest_format: DigestFormat
    is_revoked: bool
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return not self.is_revoked


class CredentialRepositoryPort(Protocol):
    """Credential store query contract."""

    async def list_for_account(
        self,
        *,
        account_id: str,
        credential_types: Sequence[str] | None = None,
        is_revoked: bool | None = None,
    ) -> list[CredentialRecord]:
        """Return credentials owned by one account, optionally filtered.

        `None` filters are not applied. Result order carries no meaning.
        """
