"""CSV ingest for the ``transfer-recon`` CLI."""

from .csv_transactions import load_transactions_csv, to_records

__all__ = ["load_transactions_csv", "to_records"]
