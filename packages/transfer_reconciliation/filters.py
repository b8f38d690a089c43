"""Transfer exclusion policies consumed by reporting code.

- ``exclude_all_transfers``: conservative. Drops only legs of confirmed
  transfer pairs; a transfer-labeled transaction without a counterpart stays
  in (it is treated as a real, mislabeled expense or income).
- ``exclude_transfers_by_category``: label-only. Drops every
  transfer-labeled transaction without looking for a counterpart.
- ``exclude_transfers``: label-only, driven by a precomputed list of
  transfer category ids (see ``TransferCategoryIdCache``).

All three are stable filters returning new lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from .categories import is_transfer_tx
from .matching import confirmed_transfer_indices
from .models import TransactionLike

TxT = TypeVar("TxT", bound=TransactionLike)


def exclude_all_transfers(transactions: Sequence[TxT], *, concurrency: int = 1) -> list[TxT]:
    """Remove every leg of a confirmed transfer pair."""

    confirmed = confirmed_transfer_indices(transactions, concurrency=concurrency)
    if not confirmed:
        return list(transactions)
    return [tx for idx, tx in enumerate(transactions) if idx not in confirmed]


def exclude_transfers_by_category(transactions: Iterable[TxT]) -> list[TxT]:
    """Remove every transaction whose category type is ``transfer``."""

    return [tx for tx in transactions if not is_transfer_tx(tx)]


def exclude_transfers(
    transactions: Iterable[TxT],
    transfer_category_ids: Iterable[str],
) -> list[TxT]:
    """Remove transactions whose ``category_id`` is a transfer category id.

    An empty id list is a no-op; uncategorized transactions are kept.
    """

    ids = frozenset(transfer_category_ids)
    if not ids:
        return list(transactions)
    return [tx for tx in transactions if getattr(tx, "category_id", None) not in ids]


__all__ = [
    "exclude_all_transfers",
    "exclude_transfers_by_category",
    "exclude_transfers",
]
