"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from decimal import Decimal

import pytest

from walletledger.config import TestConfig
from walletledger.domain.ledger import TransactionInput
from walletledger.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="walletledger.test",
        level=logging.INFO,
        pathname="ledger.py",
        lineno=42,
        msg="Transaction created",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)


def test_json_formatter_basic_fields():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "walletledger.test"
    assert log_data["message"] == "Transaction created"
    assert log_data["line"] == 42
    assert "timestamp" in log_data


def test_json_formatter_carries_extra_fields():
    record = _record()
    record.wallet_id = 7
    record.delta = Decimal("-30.00")

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"wallet_id": 7, "delta": "-30.00"}


def test_json_formatter_with_exception():
    try:
        raise ValueError("balance drifted")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "balance drifted" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_setup_logging_writes_json_file(tmp_path):
    config = TestConfig(data_dir=tmp_path)
    config.LOG_TO_FILE = True

    logger = setup_logging(config)
    logger.warning("Wallet balance overridden", extra={"wallet_id": 3})
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == "walletledger"
    assert len(logger.handlers) == 2
    lines = (tmp_path / "logs" / "walletledger.log").read_text().strip().splitlines()
    entries = [json.loads(line) for line in lines]
    assert entries[-1]["message"] == "Wallet balance overridden"
    assert entries[-1]["extra"]["wallet_id"] == 3
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_setup_logging_is_repeatable(tmp_path):
    config = TestConfig(data_dir=tmp_path)

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 1


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_follows_dev_mode(tmp_path, dev_mode):
    config = TestConfig(data_dir=tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console = [
        h
        for h in logger.handlers
        if isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(console) == 1
    assert console[0].level == (logging.INFO if dev_mode else logging.WARNING)


def test_get_logger_namespaces():
    assert get_logger("ledger").name == "walletledger.ledger"
    assert get_logger("walletledger.storage").name == "walletledger.storage"


def test_ledger_logs_committed_mutations(caplog, ledger, user_id, categories, wallet_factory):
    wallet = wallet_factory()

    with caplog.at_level(logging.INFO, logger="walletledger"):
        ledger.create_transaction(
            user_id,
            TransactionInput(
                wallet_id=wallet["id"],
                category_id=categories["Salary"],
                amount=Decimal("100"),
                transaction_type="income",
                transaction_date=datetime(2026, 3, 1),
            ),
        )

    created = [r for r in caplog.records if r.getMessage() == "Transaction created"]
    assert len(created) == 1
    assert created[0].wallet_id == wallet["id"]
    assert created[0].delta == "100.00"
