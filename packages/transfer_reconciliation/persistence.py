# ruff: noqa: I001
"""Persistence integration for transfer_reconciliation.

Functions here read and update the shared database owned by ``libs/db``
through the SQLAlchemy ORM models in ``db.models.finance``. Callers provide a
session (see ``db.client.session_scope``) and own the commit.

Scope:
- Load transactions joined with their category into ``Transaction`` models
  (the data-access boundary where the category shape is normalized).
- Link detected transfer pairs by recording each leg's counterpart account.
- Run label-independent detection + linking over recent or newly imported
  transactions.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from db.models.finance import FaAccount, FaCategory, FaTransaction
from .categories import TRANSFER
from .detector import DATE_TOLERANCE_DAYS, detect_transfer_pairs
from .logging_setup import get_logger
from .models import Transaction, TransferPair

_logger = get_logger(__name__)


def _row_to_transaction(tx: FaTransaction, cat: FaCategory | None) -> Transaction:
    category: dict[str, Any] | None = None
    if cat is not None:
        category = {"id": cat.id, "name": cat.name, "type": cat.type}
    return Transaction.model_validate(
        {
            "id": str(tx.id),
            "amount": tx.amount,
            "date": tx.date,
            "account_id": tx.account_id,
            "description": tx.description,
            "category_id": tx.category_id,
            "category": category,
        }
    )


def fetch_transactions(
    session: Session,
    *,
    account_ids: Iterable[str] | None = None,
    since: date | None = None,
    until: date | None = None,
    unlinked_only: bool = False,
) -> list[Transaction]:
    """Return transactions (newest first) with their category resolved.

    Parameters
    ----------
    account_ids:
        Restrict to these accounts when given.
    since / until:
        Inclusive date bounds.
    unlinked_only:
        Only rows not yet linked to a counterpart account.
    """

    stmt = select(FaTransaction, FaCategory).outerjoin(
        FaCategory, FaTransaction.category_id == FaCategory.id
    )
    if account_ids is not None:
        stmt = stmt.where(FaTransaction.account_id.in_(list(account_ids)))
    if since is not None:
        stmt = stmt.where(FaTransaction.date >= since)
    if until is not None:
        stmt = stmt.where(FaTransaction.date <= until)
    if unlinked_only:
        stmt = stmt.where(FaTransaction.to_account_id.is_(None))
    stmt = stmt.order_by(FaTransaction.date.desc(), FaTransaction.id)

    return [_row_to_transaction(tx, cat) for tx, cat in session.execute(stmt).all()]


def _transfer_category_id(session: Session) -> str | None:
    """Id of the canonical "Transfer" category, when seeded."""

    return session.execute(
        select(FaCategory.id)
        .where(FaCategory.type == TRANSFER, FaCategory.name == "Transfer")
        .order_by(FaCategory.id)
        .limit(1)
    ).scalar_one_or_none()


def link_transfer_pairs(
    session: Session,
    pairs: Iterable[TransferPair],
    *,
    transfer_category_id: str | None = None,
) -> int:
    """Record each pair's counterpart account on both legs.

    When ``transfer_category_id`` is given, both legs are also recategorized
    as transfers (``categorized_by='default'``) and their review flag cleared.
    Returns the number of pairs linked. The caller commits.
    """

    now = func.now()
    linked = 0
    for pair in pairs:
        legs = (
            (pair.outflow_id, pair.inflow_account_id),
            (pair.inflow_id, pair.outflow_account_id),
        )
        for tx_id, counterpart_account in legs:
            values: dict[str, Any] = {"to_account_id": counterpart_account, "updated_at": now}
            if transfer_category_id is not None:
                values.update(
                    {
                        "category_id": transfer_category_id,
                        "type": TRANSFER,
                        "categorized_by": "default",
                        "review_flagged": False,
                    }
                )
            session.execute(
                update(FaTransaction).where(FaTransaction.id == int(tx_id)).values(**values)
            )
        linked += 1
        _logger.debug(
            "persistence:linked outflow=%s inflow=%s amount=%s",
            pair.outflow_id,
            pair.inflow_id,
            pair.amount,
        )
    return linked


def _months_ago(today: date, months: int) -> date:
    year, month = divmod(today.year * 12 + (today.month - 1) - months, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _account_ids(session: Session) -> list[str]:
    return list(session.execute(select(FaAccount.id).order_by(FaAccount.id)).scalars())


def detect_and_link_transfers(
    session: Session,
    *,
    months: int = 6,
    today: date | None = None,
) -> int:
    """Detect and link transfer pairs among unlinked rows of the last ``months``.

    Returns ``0`` without touching the database when fewer than two accounts
    exist. The caller commits.
    """

    if months < 1:
        raise ValueError("months must be a positive integer")

    account_ids = _account_ids(session)
    if len(account_ids) < 2:
        return 0

    start = _months_ago(today or date.today(), months)
    candidates = fetch_transactions(
        session, account_ids=account_ids, since=start, unlinked_only=True
    )
    if not candidates:
        return 0

    pairs = detect_transfer_pairs(candidates)
    linked = link_transfer_pairs(
        session, pairs, transfer_category_id=_transfer_category_id(session)
    )
    _logger.info(
        "persistence:link_transfers since=%s candidates=%d linked=%d",
        start.isoformat(),
        len(candidates),
        linked,
    )
    return linked


def detect_and_link_new_transfers(session: Session, new_transaction_ids: Iterable[str]) -> int:
    """Link pairs involving freshly imported transactions.

    Candidates are unlinked rows dated within the detection tolerance of the
    new transactions' date range; only pairs with at least one new leg are
    linked. Returns the number of pairs linked. The caller commits.
    """

    new_ids = {str(i) for i in new_transaction_ids}
    if not new_ids:
        return 0
    if len(_account_ids(session)) < 2:
        return 0

    new_dates = list(
        session.execute(
            select(FaTransaction.date).where(FaTransaction.id.in_([int(i) for i in new_ids]))
        ).scalars()
    )
    if not new_dates:
        return 0

    window = timedelta(days=DATE_TOLERANCE_DAYS)
    candidates = fetch_transactions(
        session,
        since=min(new_dates) - window,
        until=max(new_dates) + window,
        unlinked_only=True,
    )
    relevant = [
        p
        for p in detect_transfer_pairs(candidates)
        if p.outflow_id in new_ids or p.inflow_id in new_ids
    ]
    return link_transfer_pairs(
        session, relevant, transfer_category_id=_transfer_category_id(session)
    )


__all__ = [
    "fetch_transactions",
    "link_transfer_pairs",
    "detect_and_link_transfers",
    "detect_and_link_new_transfers",
]
