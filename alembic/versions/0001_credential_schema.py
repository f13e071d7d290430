"""Initial schema for credentials and credential transactions."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_credential_schema"
down_revision = None
branch_labels = None
depends_on = None

sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "credentials",
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
    op.create_index(
        "ix_credentials_account_id_type_revoked",
        "credentials",
        ["account_id", "credential_type", "is_revoked"],
        unique=False,
    )

    op.create_table(
        "credential_transactions",
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
        sa.Column(
            "content_source",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index(
        "ix_credential_transactions_credential_id_created_at",
        "credential_transactions",
        ["credential_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_credential_transactions_account_id_created_at",
        "credential_transactions",
        ["account_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_credential_transactions_account_id_created_at",
        table_name="credential_transactions",
    )
    op.drop_index(
        "ix_credential_transactions_credential_id_created_at",
        table_name="credential_transactions",
    )
    op.drop_table("credential_transactions")
    op.drop_index("ix_credentials_account_id_type_revoked", table_name="credentials")
    op.drop_table("credentials")
