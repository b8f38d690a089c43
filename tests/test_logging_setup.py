from __future__ import annotations

import io
import logging

import pytest

from tests.helpers.transactions import tx
from transfer_reconciliation.logging_setup import (
    configure_logging,
    get_logger,
    reset_logging,
    resolve_level,
)
from transfer_reconciliation.matching import confirmed_transfer_pairs


def test_get_logger_qualifies_bare_names():
    assert get_logger("cache").name == "transfer_reconciliation.cache"
    qualified = "transfer_reconciliation.matching"
    assert get_logger(qualified).name == qualified
    assert get_logger("transfer_reconciliation").name == "transfer_reconciliation"


def test_library_is_silent_until_configured():
    get_logger("matching")
    handlers = logging.getLogger("transfer_reconciliation").handlers
    assert handlers and all(isinstance(h, logging.NullHandler) for h in handlers)


def test_resolve_level(monkeypatch: pytest.MonkeyPatch):
    assert resolve_level() == logging.INFO
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("15") == 15
    assert resolve_level("chatty") == logging.INFO
    monkeypatch.setenv("TRANSFER_RECON_LOG_LEVEL", "WARNING")
    assert resolve_level() == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_configure_logging_emits_matcher_debug_lines():
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)

    confirmed_transfer_pairs(
        [tx("1", -500, "2024-01-10", "transfer"), tx("2", 500, "2024-01-11")]
    )

    assert "matching:done batch=2 candidate_buckets=1 confirmed_pairs=1" in stream.getvalue()


def test_reconfigure_only_changes_level():
    stream = io.StringIO()
    first = configure_logging("INFO", stream=stream)
    second = configure_logging("WARNING")

    pkg_logger = logging.getLogger("transfer_reconciliation")
    assert first is second
    assert pkg_logger.handlers == [first]
    assert pkg_logger.level == logging.WARNING

    get_logger("cache").info("hidden")
    get_logger("cache").warning("shown")
    assert stream.getvalue().splitlines()[-1].endswith("transfer_reconciliation.cache: shown")
    assert "hidden" not in stream.getvalue()


def test_reset_logging_detaches_handler():
    handler = configure_logging("INFO", stream=io.StringIO())
    reset_logging()
    assert handler not in logging.getLogger("transfer_reconciliation").handlers
