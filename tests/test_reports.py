from __future__ import annotations

from decimal import Decimal

import pytest

from tests.helpers.transactions import tx
from transfer_reconciliation.models import MonthlyTotals
from transfer_reconciliation.reports import income_expense_report


def _batch():
    return [
        tx("chk", 3000, "2024-01-01", "income", description="Paycheck"),
        tx("chk", -500, "2024-01-10", "transfer", description="To savings"),
        tx("sav", 500, "2024-01-11", description="From checking"),
        tx("chk", "-120.50", "2024-01-12", "expense", description="Groceries"),
        tx("chk", -80, "2024-01-20", "transfer", description="Zelle rent"),
        tx("chk", -40, "2024-02-03", "expense", description="Gas"),
    ]


def test_matched_policy_counts_unpaired_transfer_as_expense():
    assert income_expense_report(_batch(), policy="matched") == [
        MonthlyTotals("2024-01", Decimal("3000.00"), Decimal("200.50")),
        MonthlyTotals("2024-02", Decimal("0.00"), Decimal("40.00")),
    ]


def test_label_policy_drops_every_transfer_label():
    rows = income_expense_report(_batch(), policy="label")
    assert rows[0] == MonthlyTotals("2024-01", Decimal("3500.00"), Decimal("120.50"))
    assert rows[0].net == Decimal("3379.50")


def test_none_policy_keeps_everything():
    [jan, feb] = income_expense_report(_batch(), policy="none")
    assert (jan.income, jan.expenses) == (Decimal("3500.00"), Decimal("700.50"))
    assert feb.net == Decimal("-40.00")


def test_unknown_policy_rejected():
    with pytest.raises(ValueError, match="Unsupported transfer policy"):
        income_expense_report(_batch(), policy="best-guess")


def test_empty_batch_has_no_months():
    assert income_expense_report([]) == []
