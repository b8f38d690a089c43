"""Amount bucket index: group batch positions by absolute amount in cents.

Keys are integer minor units (``round(abs(amount) * 100)``, half-up) so that
amounts which differ only by floating-point noise land in the same bucket.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .models import TransactionLike

_ONE = Decimal("1")
_CENTS = Decimal("100")


def _as_decimal(amount: Decimal | float | int | str) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() first: Decimal(0.1) would carry the binary expansion.
    return Decimal(str(amount))


def amount_bucket_key(amount: Decimal | float | int | str) -> int:
    """Return the absolute ``amount`` in integer cents (half-up rounding).

    Rounding applies to the decimal text of the amount, so sub-cent inputs
    can land one cent away from binary float rounding: ``1.005`` keys to
    ``101`` here while ``round(1.005 * 100)`` gives ``100``. Amounts stored
    at two decimals are unaffected.
    """

    cents = (abs(_as_decimal(amount)) * _CENTS).quantize(_ONE, rounding=ROUND_HALF_UP)
    return int(cents)


def build_amount_buckets(transactions: Sequence[TransactionLike]) -> dict[int, list[int]]:
    """Map each bucket key to the batch indices sharing it, in input order."""

    buckets: dict[int, list[int]] = {}
    for idx, tx in enumerate(transactions):
        buckets.setdefault(amount_bucket_key(tx.amount), []).append(idx)
    return buckets


__all__ = ["amount_bucket_key", "build_amount_buckets"]
