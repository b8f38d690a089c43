"""Label-independent transfer detection over unlinked transactions.

Used by the linker (``persistence.detect_and_link_transfers``) to pair an
outflow in one account with an inflow of the same amount in another account.
Unlike the confirmation matcher, category labels play no part here and the
closest-dated inflow wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from .logging_setup import get_logger
from .models import Transaction, TransferPair

DATE_TOLERANCE_DAYS = 3
AMOUNT_TOLERANCE = Decimal("0.01")

_logger = get_logger(__name__)


def _days_between(a: Transaction, b: Transaction) -> int:
    return abs((a.date - b.date).days)


def detect_transfer_pairs(
    transactions: Sequence[Transaction],
    *,
    tolerance_days: int = DATE_TOLERANCE_DAYS,
) -> list[TransferPair]:
    """Pair outflows with inflows of equal amount in other accounts.

    Outflows are visited in input order. For each, the unmatched inflow with
    ``|inflow - |outflow|| <= 0.01`` and the smallest date gap (at most
    ``tolerance_days``) is chosen; ties keep the earliest inflow in input
    order. Every transaction joins at most one pair.

    Raises ``ValueError`` when a transaction has no ``id``.
    """

    if tolerance_days < 0:
        raise ValueError("tolerance_days must be non-negative")
    missing = [i for i, tx in enumerate(transactions) if tx.id is None]
    if missing:
        raise ValueError(f"detect_transfer_pairs requires ids; missing at positions {missing}")

    outflows = [tx for tx in transactions if tx.amount < 0]
    inflows = [tx for tx in transactions if tx.amount > 0]
    matched: set[str] = set()
    pairs: list[TransferPair] = []

    for outflow in outflows:
        if outflow.id in matched:
            continue
        abs_amount = abs(outflow.amount)

        best: Transaction | None = None
        best_gap: int | None = None
        for inflow in inflows:
            if inflow.id in matched or inflow.account_id == outflow.account_id:
                continue
            if abs(inflow.amount - abs_amount) > AMOUNT_TOLERANCE:
                continue
            gap = _days_between(outflow, inflow)
            if gap > tolerance_days:
                continue
            if best_gap is None or gap < best_gap:
                best, best_gap = inflow, gap

        if best is None:
            continue

        assert outflow.id is not None and best.id is not None  # checked above
        matched.update((outflow.id, best.id))
        pairs.append(
            TransferPair(
                outflow_id=outflow.id,
                inflow_id=best.id,
                outflow_account_id=outflow.account_id,
                inflow_account_id=best.account_id,
                amount=abs_amount,
                date=outflow.date,
            )
        )

    _logger.debug(
        "detector:done outflows=%d inflows=%d pairs=%d", len(outflows), len(inflows), len(pairs)
    )
    return pairs


__all__ = ["DATE_TOLERANCE_DAYS", "detect_transfer_pairs"]
