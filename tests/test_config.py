import logging

import pytest
from pydantic import ValidationError

from expense_tracker.config import Settings, get_settings
from expense_tracker.logger import get_logger, setup_logging


def test_defaults(monkeypatch):
    for var in ("LOG_LEVEL", "MOCK_SEED", "MOCK_EXPENSE_COUNT", "SEED_PATH", "CURRENCY_SYMBOL"):
        monkeypatch.delenv(f"EXPENSE_TRACKER_{var}", raising=False)
    s = Settings(_env_file=None)
    assert s.log_level == "INFO"
    assert s.mock_seed is None
    assert s.mock_expense_count == 50
    assert s.mock_history_days == 30
    assert s.seed_path is None
    assert s.currency_symbol == "$"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("EXPENSE_TRACKER_LOG_LEVEL", "debug")
    monkeypatch.setenv("EXPENSE_TRACKER_MOCK_SEED", "11")
    monkeypatch.setenv("EXPENSE_TRACKER_SEED_PATH", "")
    s = get_settings()
    assert s.log_level == "DEBUG"
    assert s.mock_seed == 11
    assert s.seed_path is None


def test_rejects_invalid_counts():
    with pytest.raises(ValidationError):
        Settings(mock_expense_count=-1)
    with pytest.raises(ValidationError):
        Settings(mock_history_days=0)


def test_setup_logging_is_idempotent():
    logger = setup_logging(Settings(log_level="WARNING"))
    setup_logging(Settings(log_level="WARNING"))
    assert logger.name == "expense_tracker"
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_get_logger_children():
    assert get_logger().name == "expense_tracker"
    assert get_logger("store").name == "expense_tracker.store"
