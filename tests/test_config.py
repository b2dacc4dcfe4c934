"""
Tests for environment-driven configuration and structured logging
"""

import json
import logging

import pytest

from rwa_core import config as config_module
from rwa_core.config import RwaConfig, get_config, reload_config
from rwa_core.errors import InvalidAmount
from rwa_core.logging_config import JSONFormatter, get_logger, log_action, rejections_logged, setup_logging


class TestRwaConfig:
    """Test configuration defaults and environment overrides"""

    def test_defaults(self):
        settings = RwaConfig(_env_file=None)

        assert settings.api_port == 8090
        assert settings.jwt_algorithm == "HS256"
        assert settings.unit_decimals == 6
        assert settings.settlement_symbol == "USDC"
        assert settings.slippage_floor_percent == 99
        assert settings.enable_audit_logging

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("RWA_API_PORT", "9000")
        monkeypatch.setenv("RWA_AUTH_ENABLED", "false")
        monkeypatch.setenv("RWA_SETTLEMENT_SYMBOL", "EURC")

        settings = RwaConfig(_env_file=None)

        assert settings.api_port == 9000
        assert not settings.auth_enabled
        assert settings.settlement_symbol == "EURC"

    def test_reload_config(self, monkeypatch):
        original = config_module.config
        monkeypatch.setenv("RWA_LOG_LEVEL", "DEBUG")
        try:
            reloaded = reload_config()
            assert reloaded.log_level == "DEBUG"
            assert get_config() is reloaded
        finally:
            config_module.config = original


class TestStructuredLogging:
    """Test the JSON log formatter and log_action helper"""

    def test_json_formatter(self):
        record = logging.LogRecord("rwa.test", logging.INFO, __file__, 1, "Minted 10 units", None, None)
        record.identity = "alice"
        record.action = "mint"
        record.asset = "asset_1"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "rwa.test"
        assert entry["message"] == "Minted 10 units"
        assert entry["identity"] == "alice"
        assert entry["action"] == "mint"
        assert entry["asset"] == "asset_1"
        assert "resource" not in entry

    def test_setup_logging(self):
        logger = setup_logging(level="WARNING", logger_name="rwa.setup_test")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

        setup_logging(level="INFO", logger_name="rwa.setup_test")
        assert len(logger.handlers) == 1

    def test_log_action(self, caplog):
        logger = get_logger("rwa.log_action_test")

        with caplog.at_level(logging.INFO, logger="rwa.log_action_test"):
            log_action(
                logger, "info", "Redeemed 5 units",
                identity="bob", action="redeem", extra={"amount": 5}
            )

        record = caplog.records[-1]
        assert record.getMessage() == "Redeemed 5 units"
        assert record.identity == "bob"
        assert record.action == "redeem"
        assert record.extra == {"amount": 5}

    def test_error_code_in_json(self):
        record = logging.LogRecord("rwa.test", logging.WARNING, __file__, 1, "mint rejected", None, None)
        record.error = "supply_exceeded"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["error"] == "supply_exceeded"

    def test_rejections_logged(self, caplog):
        logger = get_logger("rwa.rejections_test")

        with caplog.at_level(logging.INFO, logger="rwa.rejections_test"):
            with pytest.raises(InvalidAmount):
                with rejections_logged(logger, "redeem", identity="bob", asset="asset_1"):
                    raise InvalidAmount("Amount must be positive")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "redeem rejected: Amount must be positive"
        assert record.error == "invalid_amount"
        assert record.identity == "bob"
        assert record.asset == "asset_1"

    def test_rejections_logged_ignores_other_errors(self, caplog):
        logger = get_logger("rwa.rejections_test")

        with caplog.at_level(logging.INFO, logger="rwa.rejections_test"):
            with pytest.raises(KeyError):
                with rejections_logged(logger, "redeem"):
                    raise KeyError("missing")

        assert caplog.records == []
