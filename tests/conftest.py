"""Pytest configuration for test isolation.

Engines are cached per database URL for the life of the process and the CLI
reads ``TRANSFER_RECON_*``/``DATABASE_URL`` from the environment (and from a
``.env`` in the working directory). To keep tests hermetic, every test runs
from its own temporary directory with those variables cleared, and cached
engines and the CLI log handler are dropped afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engines

from transfer_reconciliation.logging_setup import reset_logging

_ENV_VARS = (
    "DATABASE_URL",
    "TRANSFER_RECON_LOG_LEVEL",
    "TRANSFER_RECON_CACHE_TTL_SECONDS",
    "TRANSFER_RECON_MATCH_WORKERS",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run in ``tmp_path`` with reconciliation env vars unset."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    dispose_engines()
    reset_logging()
