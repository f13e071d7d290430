"""Port for reading credential audit transactions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from credential_verification.domain.credentials.content_source import ContentSource


@dataclass(frozen=True)
class CredentialTransactionRecord:
    """One audited change applied to a credential."""

    transaction_id: int
    credential_id: int
    account_id: str
    actor_id: str
    transaction_type: str
    old_value: str | None
    new_value: str | None
    content_source: ContentSource
    created_at: datetime


class CredentialTransactionRepositoryPort(Protocol):
    """Credential audit history contract."""

    async def list_transactions(self, *, credential_id: int) -> list[CredentialTransactionRecord]:
        """Return audit transactions for one credential, oldest first."""
