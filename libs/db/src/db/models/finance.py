from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# Closed set of category types understood by the reconciliation engine.
CATEGORY_TYPES: tuple[str, ...] = ("expense", "income", "transfer")
_CATEGORY_TYPES_SQL = ", ".join(f"'{t}'" for t in CATEGORY_TYPES)


# ---------------------------
# Reference: fa_accounts
# ---------------------------


class FaAccount(Base):
    __tablename__ = "fa_accounts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )


# ---------------------------
# Reference: fa_categories
# ---------------------------


class FaCategory(Base):
    __tablename__ = "fa_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    __table_args__ = (
        CheckConstraint(
            f"type in ({_CATEGORY_TYPES_SQL})",
            name="ck_fa_categories_type",
        ),
    )


# ---------------------------
# Core: fa_transactions
# ---------------------------


class FaTransaction(Base):
    __tablename__ = "fa_transactions"

    # INTEGER on SQLite so the rowid alias autoincrements (tests use SQLite).
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("fa_accounts.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("fa_categories.id", deferrable=True, initially="DEFERRED"),
        nullable=True,
    )
    # Counterpart account of a linked internal transfer. NULL means the row has
    # not been linked (it may still be transfer-labeled).
    to_account_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("fa_accounts.id", ondelete="SET NULL"), nullable=True
    )
    # Denormalized copy of the category type written by the transfer linker.
    type: Mapped[str | None] = mapped_column(String, nullable=True)
    categorized_by: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'unknown'")
    )
    review_flagged: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )

    __table_args__ = (
        CheckConstraint(
            "categorized_by in ('default','manual','rule','import','unknown')",
            name="ck_fa_tx_categorized_by",
        ),
        CheckConstraint(
            f"type IS NULL OR type in ({_CATEGORY_TYPES_SQL})",
            name="ck_fa_tx_type",
        ),
    )


__all__ = [
    "Base",
    "CATEGORY_TYPES",
    "FaAccount",
    "FaCategory",
    "FaTransaction",
]
