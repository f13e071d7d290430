from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.config import Config

from alembic import command
from credential_verification.application.ports.credential_upgrade_port import (
    PASSWORD_UPGRADE_TRANSACTION,
    CredentialHashUpgradeInput,
)
from credential_verification.domain.credentials.content_source import (
    ContentSource,
    ContentSourceKind,
)
from credential_verification.domain.credentials.digest import DigestFormat
from credential_verification.domain.credentials.errors import (
    CredentialUpgradeConflictError,
    CredentialUpgradeError,
    WriteGuardError,
)
from credential_verification.infrastructure.db.credential_repository import (
    SqlAlchemyCredentialRepository,
)
from credential_verification.infrastructure.db.session import create_session_factory
from credential_verification.infrastructure.db.write_guard import ScopedWriteGuard


def _upgrade_head(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(alembic_config, "head")

    return sync_url, async_url


def _insert_credential(
    connection: sa.Connection,
    *,
    account_id: str,
    credential_type: str,
    password_hash: str,
    is_revoked: bool = False,
    digest_format: str = "hmac-sha256",
) -> int:
    result = connection.execute(
        sa.text(
            "INSERT INTO credentials "
            "(account_id, credential_type, password_hash, password_salt, digest_format, "
            "is_revoked) "
            "VALUES (:account_id, :credential_type, :password_hash, :password_salt, "
            ":digest_format, :is_revoked)"
        ),
        {
            "account_id": account_id,
            "credential_type": credential_type,
            "password_hash": password_hash,
            "password_salt": "salt",
            "digest_format": digest_format,
            "is_revoked": is_revoked,
        },
    )
    return int(result.lastrowid)


def _upgrade_input(credential_id: int, *, expected_password_hash: str) -> CredentialHashUpgradeInput:
    return CredentialHashUpgradeInput(
        credential_id=credential_id,
        account_id="account-1",
        expected_password_hash=expected_password_hash,
        new_password_hash="argon2id:$argon2id$new",
        new_password_salt="new-salt",
        new_digest_format=DigestFormat.HMAC_SHA256,
        old_hasher_name="md5",
        new_hasher_name="argon2id",
        actor_id="actor-1",
        content_source=ContentSource(source=ContentSourceKind.WEB, params={"ip": "10.0.0.1"}),
    )


@pytest.mark.asyncio
async def test_list_for_account_applies_type_and_revoked_filters(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "credential_filters.db")
    repo = SqlAlchemyCredentialRepository(create_session_factory(async_url))

    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        active_account = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="account",
            password_hash="md5:aaa",
        )
        revoked_account = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="account",
            password_hash="md5:bbb",
            is_revoked=True,
            digest_format="sha1",
        )
        active_vcs = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="vcs",
            password_hash="md5:ccc",
        )
        _insert_credential(
            connection,
            account_id="account-2",
            credential_type="account",
            password_hash="md5:ddd",
        )

    everything = await repo.list_for_account(account_id="account-1")
    active_login = await repo.list_for_account(
        account_id="account-1",
        credential_types=["account"],
        is_revoked=False,
    )
    revoked = await repo.list_for_account(account_id="account-1", is_revoked=True)

    assert {record.credential_id for record in everything} == {
        active_account,
        revoked_account,
        active_vcs,
    }
    assert [record.credential_id for record in active_login] == [active_account]
    assert [record.credential_id for record in revoked] == [revoked_account]
    assert revoked[0].is_revoked is True
    assert revoked[0].is_active is False
    assert revoked[0].digest_format is DigestFormat.LEGACY_SHA1
    assert active_login[0].password_hash == "md5:aaa"


@pytest.mark.asyncio
async def test_apply_hash_upgrade_replaces_hash_and_records_transaction(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "credential_upgrade.db")
    repo = SqlAlchemyCredentialRepository(create_session_factory(async_url))
    guard = ScopedWriteGuard()

    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        credential_id = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="account",
            password_hash="md5:aaa",
            digest_format="sha1",
        )

    with guard.unguarded_writes(reason="test") as capability:
        transaction_id = await repo.apply_hash_upgrade(
            _upgrade_input(credential_id, expected_password_hash="md5:aaa"),
            capability=capability,
        )

    [record] = await repo.list_for_account(account_id="account-1")
    assert record.password_hash == "argon2id:$argon2id$new"
    assert record.password_salt == "new-salt"
    assert record.digest_format is DigestFormat.HMAC_SHA256

    [transaction] = await repo.list_transactions(credential_id=credential_id)
    assert transaction.transaction_id == transaction_id
    assert transaction.transaction_type == PASSWORD_UPGRADE_TRANSACTION
    assert transaction.old_value == "md5"
    assert transaction.new_value == "argon2id"
    assert transaction.actor_id == "actor-1"
    assert transaction.account_id == "account-1"
    assert transaction.content_source.source is ContentSourceKind.WEB
    assert transaction.content_source.params == {"ip": "10.0.0.1"}


@pytest.mark.asyncio
async def test_apply_hash_upgrade_conflict_rolls_back_everything(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "credential_conflict.db")
    repo = SqlAlchemyCredentialRepository(create_session_factory(async_url))
    guard = ScopedWriteGuard()

    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        credential_id = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="account",
            password_hash="bcrypt:already-upgraded-elsewhere",
        )

    with guard.unguarded_writes(reason="test") as capability:
        with pytest.raises(CredentialUpgradeConflictError) as excinfo:
            await repo.apply_hash_upgrade(
                _upgrade_input(credential_id, expected_password_hash="md5:stale"),
                capability=capability,
            )

    assert isinstance(excinfo.value, CredentialUpgradeError)
    [record] = await repo.list_for_account(account_id="account-1")
    assert record.password_hash == "bcrypt:already-upgraded-elsewhere"
    assert await repo.list_transactions(credential_id=credential_id) == []


@pytest.mark.asyncio
async def test_apply_hash_upgrade_requires_open_capability(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "credential_guard.db")
    repo = SqlAlchemyCredentialRepository(create_session_factory(async_url))
    guard = ScopedWriteGuard()

    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        credential_id = _insert_credential(
            connection,
            account_id="account-1",
            credential_type="account",
            password_hash="md5:aaa",
        )

    with guard.unguarded_writes(reason="test") as capability:
        pass

    with pytest.raises(WriteGuardError):
        await repo.apply_hash_upgrade(
            _upgrade_input(credential_id, expected_password_hash="md5:aaa"),
            capability=capability,
        )

    [record] = await repo.list_for_account(account_id="account-1")
    assert record.password_hash == "md5:aaa"
