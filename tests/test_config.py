"""Tests for settings and logging configuration."""

import json
import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cmdstack.config import Settings
from cmdstack.core.commands.models import PrintStyle
from cmdstack.utils.logging import (
    StructuredFormatter,
    configure_logging,
    get_invocation_id,
    invocation_id_var,
    set_invocation_id,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, clean_env) -> None:
        settings = Settings(_env_file=None)

        assert settings.db_path == "~/.cmdstack/cmdstack.db"
        assert settings.print_style is PrintStyle.ALL
        assert settings.display_limit == 10
        assert settings.log_level == "WARNING"
        assert settings.log_json is False

    def test_environment_overrides(self, clean_env) -> None:
        env = {
            "CMDSTACK_DB_PATH": "/tmp/x.db",
            "CMDSTACK_PRINT_STYLE": "command",
            "CMDSTACK_DISPLAY_LIMIT": "50",
            "CMDSTACK_LOG_LEVEL": "debug",
            "CMDSTACK_LOG_JSON": "true",
        }
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)

        assert settings.db_path == "/tmp/x.db"
        assert settings.print_style is PrintStyle.COMMAND
        assert settings.display_limit == 50
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_env_file(self, clean_env, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("CMDSTACK_DISPLAY_LIMIT=7\n", encoding="utf-8")

        settings = Settings(_env_file=str(env_file))

        assert settings.display_limit == 7

    @pytest.mark.parametrize("limit", [4, 201])
    def test_display_limit_bounds(self, clean_env, limit) -> None:
        with pytest.raises(ValidationError):
            Settings(display_limit=limit, _env_file=None)

    def test_invalid_print_style(self, clean_env) -> None:
        with pytest.raises(ValidationError):
            Settings(print_style="fancy", _env_file=None)

    def test_unknown_log_level_rejected(self, clean_env) -> None:
        with patch.dict(os.environ, {"CMDSTACK_LOG_LEVEL": "verbose"}):
            with pytest.raises(ValidationError, match="Unknown log level"):
                Settings(_env_file=None)


class TestStructuredFormatter:
    """Tests for JSON log formatting."""

    def _record(self, message: str = "hello") -> logging.LogRecord:
        return logging.LogRecord(
            name="cmdstack.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=message,
            args=(),
            exc_info=None,
        )

    def test_format_is_json(self) -> None:
        token = invocation_id_var.set("")
        try:
            data = json.loads(StructuredFormatter().format(self._record()))
        finally:
            invocation_id_var.reset(token)

        assert data["level"] == "INFO"
        assert data["logger"] == "cmdstack.test"
        assert data["message"] == "hello"
        assert "invocation_id" not in data

    def test_invocation_id_included_when_set(self) -> None:
        token = invocation_id_var.set("")
        try:
            set_invocation_id("abc123")
            assert get_invocation_id() == "abc123"
            data = json.loads(StructuredFormatter().format(self._record()))
        finally:
            invocation_id_var.reset(token)

        assert data["invocation_id"] == "abc123"


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        package_logger = logging.getLogger("cmdstack")
        saved = (list(package_logger.handlers), package_logger.level)
        yield
        package_logger.handlers[:] = saved[0]
        package_logger.setLevel(saved[1])

    def test_repeated_calls_keep_one_handler(self) -> None:
        configure_logging(logging.INFO)
        handler = configure_logging(logging.DEBUG, json_format=True)
        package_logger = logging.getLogger("cmdstack")

        assert package_logger.handlers == [handler]
        assert package_logger.level == logging.DEBUG
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_level_name_accepted(self) -> None:
        configure_logging("ERROR")

        assert logging.getLogger("cmdstack").level == logging.ERROR
