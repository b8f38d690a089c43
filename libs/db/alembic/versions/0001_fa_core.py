# ruff: noqa: I001
"""Accounts, typed categories, transactions; seed the Transfer category.

Revision ID: 0001_fa_core
Revises: None
Create Date: 2026-09-14
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_fa_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "fa_accounts",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    op.create_table(
        "fa_categories",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "type in ('expense','income','transfer')", name="ck_fa_categories_type"
        ),
    )

    # Seed the canonical transfer category used by the transfer linker
    op.bulk_insert(
        sa.table(
            "fa_categories",
            sa.column("id", sa.Text()),
            sa.column("name", sa.Text()),
            sa.column("type", sa.Text()),
        ),
        [
            {"id": "transfer", "name": "Transfer", "type": "transfer"},
            {"id": "income", "name": "Income", "type": "income"},
            {"id": "other", "name": "Other", "type": "expense"},
        ],
    )

    op.create_table(
        "fa_transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("account_id", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category_id", sa.Text(), nullable=True),
        sa.Column("type", sa.Text(), nullable=True),
        sa.Column(
            "categorized_by",
            sa.Text(),
            nullable=False,
            server_default=sa.text("'unknown'"),
        ),
        sa.Column(
            "review_flagged",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["account_id"], ["fa_accounts.id"], name="fk_fa_tx_account", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["fa_categories.id"],
            name="fk_fa_tx_category",
            deferrable=True,
            initially="DEFERRED",
        ),
        sa.CheckConstraint(
            "categorized_by in ('default','manual','rule','import','unknown')",
            name="ck_fa_tx_categorized_by",
        ),
        sa.CheckConstraint(
            "type IS NULL OR type in ('expense','income','transfer')",
            name="ck_fa_tx_type",
        ),
    )

    op.create_index("ix_fa_transactions_date", "fa_transactions", ["date"], unique=False)
    op.create_index(
        "ix_fa_transactions_account_date", "fa_transactions", ["account_id", "date"], unique=False
    )
    op.create_index(
        "ix_fa_transactions_category", "fa_transactions", ["category_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_fa_transactions_category", table_name="fa_transactions")
    op.drop_index("ix_fa_transactions_account_date", table_name="fa_transactions")
    op.drop_index("ix_fa_transactions_date", table_name="fa_transactions")
    op.drop_table("fa_transactions")
    op.drop_table("fa_categories")
    op.drop_table("fa_accounts")
