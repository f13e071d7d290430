"""SQLAlchemy metadata definitions for credential tables."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()
sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

credentials = sa.Table(
    "credentials",
    metadata,
    sa.Column("id", sqlite_bigint, primary_key=True, autoincrement=True),
    sa.Column("account_id", sa.Text(), nullable=False),
    sa.Column("credential_type", sa.Text(), nullable=False),
    sa.Column("password_hash", sa.Text(), nullable=False),
    sa.Column("password_salt", sa.Text(), nullable=False),
    sa.Column(
        "digest_format",
        sa.Text(),
        nullable=False,
        server_default=sa.text("'hmac-sha256'"),
    ),
    sa.Column("is_revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.CheckConstraint(
        "digest_format IN ('hmac-sha256', 'sha1')",
        name="ck_credentials_digest_format",
    ),
)
sa.Index(
    "ix_credentials_account_id_type_revoked",
    credentials.c.account_id,
    credentials.c.credential_type,
    credentials.c.is_revoked,
)

credential_transactions = sa.Table(
    "credential_transactions",
    metadata,
    sa.Column("id", sqlite_bigint, primary_key=True, autoincrement=True),
    sa.Column(
        "credential_id",
        sqlite_bigint,
        sa.ForeignKey("credentials.id"),
        nullable=False,
    ),
    sa.Column("account_id", sa.Text(), nullable=False),
    sa.Column("actor_id", sa.Text(), nullable=False),
    sa.Column("transaction_type", sa.Text(), nullable=False),
    sa.Column("old_value", sa.Text(), nullable=True),
    sa.Column("new_value", sa.Text(), nullable=True),
    sa.Column("content_source", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
)
sa.Index(
    "ix_credential_transactions_credential_id_created_at",
    credential_transactions.c.credential_id,
    credential_transactions.c.created_at,
)
sa.Index(
    "ix_credential_transactions_account_id_created_at",
    credential_transactions.c.account_id,
    credential_transactions.c.created_at,
)
