import json
import logging
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from accounts.logging import REDACTED, _redact_secrets, _serialize_values, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture(autouse=True)
def _allow_file_logging():
    """Disable the _is_test guard so logging tests can create real file handlers."""
    with patch("accounts.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "gateway"
        setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("accounts.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "gateway")

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_no_file_handler_under_pytest(self, tmp_path):
        with patch("accounts.logging._is_test", return_value=True):
            assert setup_logging(log_dir=tmp_path / "gateway") is None
        assert not (tmp_path / "gateway").exists()

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()

    def test_json_mode_redacts_and_binds_context(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "gateway")

        structlog.contextvars.bind_contextvars(trace_id="trace-1")
        structlog.get_logger("test.json").info("player created", username="alice", password="hunter2")
        structlog.contextvars.clear_contextvars()

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[-1])
        assert parsed["event"] == "player created"
        assert parsed["trace_id"] == "trace-1"
        assert parsed["username"] == "alice"
        assert parsed["password"] == REDACTED
        assert "hunter2" not in log_path.read_text()


class TestProcessors:
    class _Mode(Enum):
        MEMORY = "memory"

    def test_serializes_enum_and_decimal(self):
        event_dict = {"mode": self._Mode.MEMORY, "balance": Decimal("1.50"), "count": 3}
        result = _serialize_values(None, "", event_dict)
        assert result == {"mode": "memory", "balance": "1.50", "count": 3}

    def test_serializes_one_dict_deep(self):
        result = _serialize_values(None, "", {"components": {"cache": self._Mode.MEMORY}})
        assert result["components"] == {"cache": "memory"}

    def test_redacts_secret_and_password(self):
        result = _redact_secrets(None, "", {"secret": "s", "password": "p", "username": "alice"})
        assert result == {"secret": REDACTED, "password": REDACTED, "username": "alice"}
