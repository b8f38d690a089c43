# ruff: noqa: I001
"""CLI for the ``transfer_reconciliation`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands below only parse options and delegate. Environment
variables (``DATABASE_URL``, ``TRANSFER_RECON_*``) are loaded from a local
``.env`` via ``python-dotenv`` without overriding the shell environment.
"""

from __future__ import annotations

import csv
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .logging_setup import configure_logging, get_logger
from .models import Transaction

_logger = get_logger(__name__)

_FILTER_POLICIES = ("matched", "label", "ids")


# ---- Small module-level helpers used by CLI commands -------------------------


def _resolve_workers(override: int | None = None) -> int:
    """Resolve bucket-scan concurrency.

    Explicit ``override`` wins; otherwise ``TRANSFER_RECON_MATCH_WORKERS``.
    Capped to 32 with a minimum of 1 (the default).
    """

    value = override
    if value is None:
        env_workers = os.getenv("TRANSFER_RECON_MATCH_WORKERS")
        try:
            value = int(env_workers) if env_workers else None
        except ValueError:
            value = None
    if value is None or value < 1:
        return 1
    return min(value, 32)


def _load_csv_or_report(csv_path: str) -> list[Transaction] | None:
    """Load ``csv_path``; print an error to stderr and return ``None`` on failure."""

    from .ingest import load_transactions_csv

    try:
        return load_transactions_csv(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
    except csv.Error as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
    except ValidationError as e:
        print(f"Error: Invalid transaction rows: {e}", file=sys.stderr)
    return None


def _transfer_id_cache(database_url: str | None):
    """Build a ``TransferCategoryIdCache`` backed by ``fa_categories``."""

    from db.client import session_scope

    from .cache import TransferCategoryIdCache, ttl_from_env
    from .categories import load_transfer_category_ids

    def _loader() -> list[str]:
        with session_scope(database_url=database_url) as session:
            return load_transfer_category_ids(session)

    return TransferCategoryIdCache(_loader, ttl_seconds=ttl_from_env())


# ---- Command handlers ---------------------------------------------------------


def cmd_confirm_transfers(csv_path: str, *, workers: int | None = None) -> int:
    """Print confirmed transfer pairs as ``"<anchor>\\t<counterpart>\\t<amount>"``.

    Indices are zero-based CSV data-row positions.
    """

    from .matching import confirmed_transfer_pairs

    transactions = _load_csv_or_report(csv_path)
    if transactions is None:
        return 1

    try:
        pairs = confirmed_transfer_pairs(transactions, concurrency=_resolve_workers(workers))
    except ValueError as e:
        print(f"Error: matching failed: {e}", file=sys.stderr)
        return 1

    for anchor, counterpart in pairs:
        amount = abs(transactions[anchor].amount)
        print(f"{anchor}\t{counterpart}\t{amount:.2f}")
    return 0


def cmd_filter_transfers(
    csv_path: str,
    *,
    policy: str = "matched",
    database_url: str | None = None,
) -> int:
    """Print rows surviving the chosen policy as ``"<idx>\\t<date>\\t<account>\\t<amount>"``.

    ``ids`` filters by the transfer category ids stored in the database.
    """

    from .filters import exclude_all_transfers, exclude_transfers, exclude_transfers_by_category

    if policy not in _FILTER_POLICIES:
        print(
            f"Error: Unsupported policy {policy!r}. Allowed: {', '.join(_FILTER_POLICIES)}",
            file=sys.stderr,
        )
        return 1

    transactions = _load_csv_or_report(csv_path)
    if transactions is None:
        return 1

    # Filter over (idx, tx) positions so output keeps the original indices.
    positions = {id(tx): idx for idx, tx in enumerate(transactions)}
    if policy == "matched":
        kept = exclude_all_transfers(transactions, concurrency=_resolve_workers())
    elif policy == "label":
        kept = exclude_transfers_by_category(transactions)
    else:
        try:
            ids = _transfer_id_cache(database_url).get()
        except Exception as e:
            print(f"Error: failed to load transfer category ids: {e}", file=sys.stderr)
            return 1
        kept = exclude_transfers(transactions, ids)

    for tx in kept:
        print(f"{positions[id(tx)]}\t{tx.date.isoformat()}\t{tx.account_id}\t{tx.amount:.2f}")
    return 0


def cmd_report(csv_path: str, *, policy: str = "matched") -> int:
    """Print monthly totals as ``"<month>\\t<income>\\t<expenses>\\t<net>"``."""

    from .reports import income_expense_report

    transactions = _load_csv_or_report(csv_path)
    if transactions is None:
        return 1

    try:
        rows = income_expense_report(transactions, policy=policy)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for row in rows:
        print(f"{row.month}\t{row.income:.2f}\t{row.expenses:.2f}\t{row.net:.2f}")
    return 0


def cmd_link_transfers(*, database_url: str | None = None, months: int = 6) -> int:
    """Detect and link transfer pairs in the database; print the linked count."""

    from db.client import session_scope

    from .persistence import detect_and_link_transfers

    try:
        with session_scope(database_url=database_url) as session:
            linked = detect_and_link_transfers(session, months=months)
    except Exception as e:
        print(f"Error: transfer linking failed: {e}", file=sys.stderr)
        return 1

    print(f"linked\t{linked}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Reconcile internal transfers across linked accounts so money moving "
        "between your own accounts is not counted as income or expense."
    ),
)


# Module-level option object (no calls in parameter defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a transactions CSV (date, amount, account_id, ...)",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files
    readable=True,
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("confirm-transfers")
def confirm_transfers_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    workers: int | None = typer.Option(
        None, help="Bucket-scan threads (falls back to TRANSFER_RECON_MATCH_WORKERS)."
    ),
) -> None:
    """List confirmed transfer pairs."""

    _exit(cmd_confirm_transfers(str(csv_path), workers=workers))


@app.command("filter-transfers")
def filter_transfers_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    policy: str = typer.Option(
        "matched", help="matched (confirmed pairs), label (category type) or ids (DB ids)."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL for --policy ids (falls back to env var)."
    ),
) -> None:
    """Print the rows that survive transfer exclusion."""

    _exit(cmd_filter_transfers(str(csv_path), policy=policy, database_url=database_url))


@app.command("report")
def report_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    policy: str = typer.Option("matched", help="matched, label or none."),
) -> None:
    """Monthly income/expense totals after transfer exclusion."""

    _exit(cmd_report(str(csv_path), policy=policy))


@app.command("link-transfers")
def link_transfers_cmd(
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    months: int = typer.Option(6, min=1, help="Look-back window in months."),
) -> None:
    """Detect outflow/inflow pairs in the database and link them as transfers."""

    _exit(cmd_link_transfers(database_url=database_url, months=months))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (falls back to TRANSFER_RECON_LOG_LEVEL)."
    ),
) -> None:
    """Load ``.env`` (without overriding the environment) and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    _logger.debug("cli:start")


if __name__ == "__main__":  # pragma: no cover
    app()
