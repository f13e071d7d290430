"""SQLAlchemy adapter for credential queries, hash upgrades and audit history."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, cast

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_verification.application.ports.credential_repository_port import (
    CredentialRecord,
    CredentialRepositoryPort,
)
from credential_verification.application.ports.credential_transaction_repository_port import (
    CredentialTransactionRecord,
    CredentialTransactionRepositoryPort,
)
from credential_verification.application.ports.credential_upgrade_port import (
    PASSWORD_UPGRADE_TRANSACTION,
    CredentialHashUpgradeInput,
    CredentialUpgradePort,
)
from credential_verification.application.ports.write_guard_port import WriteCapability
from credential_verification.domain.credentials.content_source import ContentSource
from credential_verification.domain.credentials.digest import DigestFormat
from credential_verification.domain.credentials.errors import (
    CredentialUpgradeConflictError,
    CredentialUpgradeError,
)
from credential_verification.infrastructure.db.metadata import (
    credential_transactions,
    credentials,
)


class SqlAlchemyCredentialRepository(
    CredentialRepositoryPort,
    CredentialUpgradePort,
    CredentialTransactionRepositoryPort,
):
    """Credential store backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_for_account(
        self,
        *,
        account_id: str,
        credential_types: Sequence[str] | None = None,
        is_revoked: bool | None = None,
    ) -> list[CredentialRecord]:
        """Return credentials owned by one account, optionally filtered."""

        statement = sa.select(*credentials.c).where(credentials.c.account_id == account_id)
        if credential_types is not None:
            statement = statement.where(credentials.c.credential_type.in_(list(credential_types)))
        if is_revoked is not None:
            statement = statement.where(credentials.c.is_revoked == is_revoked)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_credential_record(row) for row in result.mappings().all()]

    async def apply_hash_upgrade(
        self,
        payload: CredentialHashUpgradeInput,
        *,
        capability: WriteCapability,
    ) -> int:
        """Swap the stored hash and append the upgrade transaction in one commit."""

        capability.require_open()

        update_statement = (
            sa.update(credentials)
            .where(
                credentials.c.id == payload.credential_id,
                credentials.c.password_hash == payload.expected_password_hash,
            )
            .values(
                password_hash=payload.new_password_hash,
                password_salt=payload.new_password_salt,
                digest_format=payload.new_digest_format.value,
                updated_at=sa.text("CURRENT_TIMESTAMP"),
            )
        )
        insert_statement = sa.insert(credential_transactions).values(
            credential_id=payload.credential_id,
            account_id=payload.account_id,
            actor_id=payload.actor_id,
            transaction_type=PASSWORD_UPGRADE_TRANSACTION,
            old_value=payload.old_hasher_name,
            new_value=payload.new_hasher_name,
            content_source=payload.content_source.to_payload(),
        ).returning(credential_transactions.c.id)

        try:
            async with self._session_factory() as session, session.begin():
                updated = cast(CursorResult[Any], await session.execute(update_statement))
                if updated.rowcount != 1:
                    raise CredentialUpgradeConflictError(credential_id=payload.credential_id)
                inserted = await session.execute(insert_statement)
                transaction_id = int(inserted.scalar_one())
        except SQLAlchemyError as error:
            raise CredentialUpgradeError(
                credential_id=payload.credential_id,
                reason=type(error).__name__,
            ) from error

        return transaction_id

    async def list_transactions(self, *, credential_id: int) -> list[CredentialTransactionRecord]:
        """Return audit transactions for one credential, oldest first."""

        statement = (
            sa.select(*credential_transactions.c)
            .where(credential_transactions.c.credential_id == credential_id)
            .order_by(credential_transactions.c.created_at, credential_transactions.c.id)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_transaction_record(row) for row in result.mappings().all()]


def _to_credential_record(row: sa.RowMapping) -> CredentialRecord:
    return CredentialRecord(
        credential_id=int(row["id"]),
        account_id=cast(str, row["account_id"]),
        credential_type=cast(str, row["credential_type"]),
        password_hash=cast(str, row["password_hash"]),
        password_salt=cast(str, row["password_salt"]),
        digest_format=DigestFormat(cast(str, row["digest_format"])),
        is_revoked=bool(row["is_revoked"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )


def _to_transaction_record(row: sa.RowMapping) -> CredentialTransactionRecord:
    raw_content_source = row["content_source"]
    content_source_payload = raw_content_source if isinstance(raw_content_source, dict) else {}
    return CredentialTransactionRecord(
        transaction_id=int(row["id"]),
        credential_id=int(row["credential_id"]),
        account_id=cast(str, row["account_id"]),
        actor_id=cast(str, row["actor_id"]),
        transaction_type=cast(str, row["transaction_type"]),
        old_value=cast(str | None, row["old_value"]),
        new_value=cast(str | None, row["new_value"]),
        content_source=ContentSource.from_payload(content_source_payload),
        created_at=cast(datetime, row["created_at"]),
    )
