from __future__ import annotations

from tests.helpers.transactions import tx
from transfer_reconciliation.filters import (
    exclude_all_transfers,
    exclude_transfers,
    exclude_transfers_by_category,
)


def _scenario_a():
    return [
        tx("1", -500, "2024-01-10", "transfer"),
        tx("2", 500, "2024-01-11"),
    ]


def test_matched_pair_exclusion_removes_both_legs():
    assert exclude_all_transfers(_scenario_a()) == []


def test_matched_pair_exclusion_keeps_far_apart_legs():
    batch = [
        tx("1", -500, "2024-01-10", "transfer"),
        tx("2", 500, "2024-01-20"),
    ]
    assert exclude_all_transfers(batch) == batch


def test_income_protected_and_unpaired_transfer_kept():
    tx_a = tx("1", -500, "2024-01-10", "transfer")
    tx_c = tx("2", 500, "2024-01-10", "income")
    assert exclude_all_transfers([tx_a, tx_c]) == [tx_a, tx_c]


def test_policies_diverge_for_unpaired_transfer_label():
    zelle = tx("1", -80, "2024-01-10", "transfer", description="Zelle rent")
    groceries = tx("1", -42.1, "2024-01-12", "expense")
    batch = [zelle, groceries]

    assert exclude_transfers_by_category(batch) == [groceries]
    assert exclude_all_transfers(batch) == [zelle, groceries]


def test_label_only_exclusion_keeps_unlabeled_counterpart():
    batch = _scenario_a()
    assert exclude_transfers_by_category(batch) == [batch[1]]


def test_filters_are_stable_and_do_not_mutate_input():
    batch = [
        tx("1", -12, "2024-01-01", "expense"),
        tx("1", -500, "2024-01-10", "transfer"),
        tx("3", 99, "2024-01-10", "income"),
        tx("2", 500, "2024-01-11"),
        tx("1", -7, "2024-01-15"),
    ]
    original = list(batch)

    kept = exclude_all_transfers(batch)

    assert kept == [batch[0], batch[2], batch[4]]
    assert batch == original
    assert kept is not batch


def test_matched_pair_exclusion_is_idempotent():
    batch = [
        tx("1", -500, "2024-01-10", "transfer"),
        tx("2", 500, "2024-01-11"),
        tx("3", 500, "2024-01-11"),
        tx("1", -80, "2024-01-10", "transfer"),
        tx("2", 80, "2024-01-10", "income"),
        tx("4", -500, "2024-01-12", "transfer"),
    ]
    once = exclude_all_transfers(batch)
    assert exclude_all_transfers(once) == once


def test_empty_and_singleton_batches_pass_through():
    single = [tx("1", -5, "2024-01-10", "transfer")]
    assert exclude_all_transfers([]) == []
    assert exclude_all_transfers(single) == single
    assert exclude_transfers_by_category([]) == []


# ---- id-driven exclusion ------------------------------------------------------------


def test_exclude_transfers_by_id():
    batch = [
        tx("1", -500, "2024-01-10", category_id="xfer"),
        tx("2", 500, "2024-01-11", category_id="cc-payment"),
        tx("1", -12, "2024-01-12", category_id="groceries"),
        tx("1", -3, "2024-01-12"),
    ]
    assert exclude_transfers(batch, ["xfer", "cc-payment"]) == [batch[2], batch[3]]


def test_exclude_transfers_with_no_ids_is_noop():
    batch = [tx("1", -500, "2024-01-10", category_id="xfer")]
    assert exclude_transfers(batch, []) == batch
    assert exclude_transfers(batch, ()) is not batch
