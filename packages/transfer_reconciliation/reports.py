"""Monthly income/expense totals with a selectable transfer policy.

Policies
--------
- ``"matched"``: drop confirmed transfer pairs (``exclude_all_transfers``).
- ``"label"``: drop every transfer-labeled row
  (``exclude_transfers_by_category``).
- ``"none"``: keep everything.

Positive amounts count as income, negative amounts as expenses (absolute
value). Totals are ``Decimal`` quantized to cents.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from .filters import exclude_all_transfers, exclude_transfers_by_category
from .models import MonthlyTotals, Transaction

type TransferPolicy = Literal["matched", "label", "none"]

POLICIES: tuple[str, ...] = ("matched", "label", "none")

_CENT = Decimal("0.01")


def apply_policy(
    transactions: Sequence[Transaction], policy: TransferPolicy | str
) -> list[Transaction]:
    """Return ``transactions`` filtered according to ``policy``."""

    if policy == "matched":
        return exclude_all_transfers(transactions)
    if policy == "label":
        return exclude_transfers_by_category(transactions)
    if policy == "none":
        return list(transactions)
    raise ValueError(f"Unsupported transfer policy: {policy!r}. Allowed: {list(POLICIES)}")


def income_expense_report(
    transactions: Sequence[Transaction],
    *,
    policy: TransferPolicy | str = "matched",
) -> list[MonthlyTotals]:
    """Aggregate income and expenses per ``YYYY-MM``, months ascending."""

    income: dict[str, Decimal] = {}
    expenses: dict[str, Decimal] = {}
    for tx in apply_policy(transactions, policy):
        month = tx.date.strftime("%Y-%m")
        income.setdefault(month, Decimal("0"))
        expenses.setdefault(month, Decimal("0"))
        if tx.amount > 0:
            income[month] += tx.amount
        else:
            expenses[month] += abs(tx.amount)

    return [
        MonthlyTotals(
            month=m,
            income=income[m].quantize(_CENT, rounding=ROUND_HALF_UP),
            expenses=expenses[m].quantize(_CENT, rounding=ROUND_HALF_UP),
        )
        for m in sorted(income)
    ]


__all__ = ["POLICIES", "TransferPolicy", "apply_policy", "income_expense_report"]
