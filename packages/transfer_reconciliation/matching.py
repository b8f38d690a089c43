"""Confirmed transfer matching.

A transfer label from the data source is not trusted on its own: bill-pay and
peer-payment services routinely tag real expenses as "Transfer". A
transfer-labeled transaction (the *anchor*) is confirmed only when the batch
also holds a counterpart that

- has the same absolute amount in cents (same amount bucket),
- lives in a different account,
- moves money in the opposite direction,
- is dated at most two days away (exactly two days is accepted), and
- is not income-categorized (paychecks can coincide with a same-day transfer).

The first such counterpart in bucket order wins; nearest-date selection is not
attempted. Unlabeled transactions never anchor a search but may be
counterparts.

Buckets never interact, so ``concurrency > 1`` scans them on a thread pool
and merges the per-bucket results; the outcome is identical to a sequential
scan.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal

from .buckets import build_amount_buckets
from .categories import INCOME, TRANSFER, category_type
from .logging_setup import get_logger
from .models import ConfirmedPair, TransactionLike

# Inclusive date window between the two legs of a transfer.
TRANSFER_WINDOW = timedelta(days=2)

_logger = get_logger(__name__)


def _sign(amount: Decimal | float) -> int:
    return (amount > 0) - (amount < 0)


def _scan_bucket(
    transactions: Sequence[TransactionLike],
    members: list[int],
    types: list[str | None],
) -> list[ConfirmedPair]:
    confirmed: set[int] = set()
    pairs: list[ConfirmedPair] = []

    for i in members:
        if i in confirmed or types[i] != TRANSFER:
            continue
        anchor = transactions[i]
        anchor_sign = _sign(anchor.amount)

        for j in members:
            if j == i or j in confirmed:
                continue
            if types[j] == INCOME:
                continue
            other = transactions[j]
            if other.account_id == anchor.account_id:
                continue
            if _sign(other.amount) == anchor_sign:
                continue
            if abs(anchor.date - other.date) > TRANSFER_WINDOW:
                continue

            confirmed.update((i, j))
            pairs.append(ConfirmedPair(anchor=i, counterpart=j))
            break

    return pairs


def confirmed_transfer_pairs(
    transactions: Sequence[TransactionLike],
    *,
    concurrency: int = 1,
) -> list[ConfirmedPair]:
    """Return confirmed ``(anchor, counterpart)`` index pairs for the batch.

    Pairs are ordered by bucket (first appearance of the amount in the batch)
    and then by anchor position within the bucket.
    """

    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    # Resolve each category type once; the scan consults it repeatedly.
    types = [category_type(tx) for tx in transactions]
    candidates = [m for m in build_amount_buckets(transactions).values() if len(m) >= 2]

    if concurrency > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=min(concurrency, len(candidates))) as pool:
            per_bucket = list(
                pool.map(lambda members: _scan_bucket(transactions, members, types), candidates)
            )
    else:
        per_bucket = [_scan_bucket(transactions, members, types) for members in candidates]

    pairs = [p for bucket_pairs in per_bucket for p in bucket_pairs]
    _logger.debug(
        "matching:done batch=%d candidate_buckets=%d confirmed_pairs=%d",
        len(transactions),
        len(candidates),
        len(pairs),
    )
    return pairs


def confirmed_transfer_indices(
    transactions: Sequence[TransactionLike],
    *,
    concurrency: int = 1,
) -> set[int]:
    """Return the batch indices that are legs of a confirmed transfer pair."""

    confirmed: set[int] = set()
    for pair in confirmed_transfer_pairs(transactions, concurrency=concurrency):
        confirmed.update(pair)
    return confirmed


__all__ = [
    "TRANSFER_WINDOW",
    "confirmed_transfer_pairs",
    "confirmed_transfer_indices",
]
