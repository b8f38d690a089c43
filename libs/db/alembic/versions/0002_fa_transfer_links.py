# ruff: noqa: I001
"""Counterpart account column for linked internal transfers.

Revision ID: 0002_fa_transfer_links
Revises: 0001_fa_core
Create Date: 2026-09-21
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002_fa_transfer_links"
down_revision: str | None = "0001_fa_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("fa_transactions", sa.Column("to_account_id", sa.Text(), nullable=True))
    op.create_foreign_key(
        "fk_fa_tx_to_account",
        "fa_transactions",
        "fa_accounts",
        ["to_account_id"],
        ["id"],
        ondelete="SET NULL",
    )

    # The linker scans only rows that have not been linked yet
    op.create_index(
        "ix_fa_tx_unlinked_date",
        "fa_transactions",
        ["date"],
        unique=False,
        postgresql_where=sa.text("to_account_id IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("ix_fa_tx_unlinked_date", table_name="fa_transactions")
    op.drop_constraint("fk_fa_tx_to_account", "fa_transactions", type_="foreignkey")
    op.drop_column("fa_transactions", "to_account_id")
