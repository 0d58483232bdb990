"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from spendlens.config import BaseConfig
from spendlens.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    record = logging.LogRecord(**defaults)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the standard fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.strategy = "avalanche"
    record.months_to_payoff = 14

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"strategy": "avalanche", "months_to_payoff": 14}


def test_setup_logging(tmp_path, monkeypatch):
    """setup_logging writes JSON lines to a rotating file under DATA_DIR."""
    monkeypatch.setenv("SPENDLENS_DATA_DIR", str(tmp_path))
    config = BaseConfig()
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "spendlens"
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "spendlens.log"
    assert log_file.exists()

    get_logger("services.debts").warning("Payoff projection did not converge", extra={"max_months": 360})
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["message"] == "Payoff projection did not converge"
    assert lines[-1]["logger"] == "spendlens.services.debts"
    assert lines[-1]["extra"]["max_months"] == 360


def test_setup_logging_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDLENS_DATA_DIR", str(tmp_path))
    config = BaseConfig()

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger namespaces loggers without double prefixes."""
    assert get_logger("module1").name == "spendlens.module1"
    assert get_logger("spendlens.services.debts").name == "spendlens.services.debts"
    assert get_logger("spendlens").name == "spendlens"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, monkeypatch, dev_mode):
    """Console logging level adjusts based on dev mode."""
    monkeypatch.setenv("SPENDLENS_DATA_DIR", str(tmp_path))
    config = BaseConfig()
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
