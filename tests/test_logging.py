"""Tests for log sanitization and user-facing error messages."""

import json
import logging

import pytest

from nmcrpc.shared.logging import (
    HumanReadableFormatter,
    LoggingConfig,
    LogLevel,
    StructuredFormatter,
    format_error_for_user,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    sanitize_rpc_params,
)
from nmcrpc.shared.network import TransportError, TransportErrorType
from nmcrpc.features.registration.process import NameAlreadyReservedError


def make_record(message, *args):
    return logging.LogRecord(
        name="nmcrpc.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )


class TestLoggingConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NMCRPC_LOG_LEVEL", raising=False)
        monkeypatch.delenv("NMCRPC_LOG_STDOUT", raising=False)
        config = LoggingConfig.from_environment()
        assert config.log_level == LogLevel.INFO
        assert config.log_to_stdout is False

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("NMCRPC_LOG_LEVEL", "debug")
        monkeypatch.setenv("NMCRPC_LOG_STDOUT", "yes")
        config = LoggingConfig.from_environment()
        assert config.log_level == LogLevel.DEBUG
        assert config.log_to_stdout is True

    def test_invalid_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("NMCRPC_LOG_LEVEL", "chatty")
        assert LoggingConfig.from_environment().log_level == LogLevel.INFO


class TestSanitize:
    def test_passphrase(self):
        result = sanitize_message("passphrase=hunter2 for wallet")
        assert "hunter2" not in result
        assert "[REDACTED]" in result

    def test_rpcpassword(self):
        assert "s3cret" not in sanitize_message("rpcpassword=s3cret")

    def test_rand(self):
        result = sanitize_message('{"rand": "0123456789abcdef"}')
        assert "0123456789abcdef" not in result

    def test_plain_message_unchanged(self):
        assert sanitize_message("Reserved d/example") == "Reserved d/example"

    def test_sanitize_dict(self):
        result = sanitize_dict(
            {"name": "d/example", "rand": "abcdef", "nested": {"passphrase": "x"}}
        )
        assert result == {
            "name": "d/example",
            "rand": "[REDACTED]",
            "nested": {"passphrase": "[REDACTED]"},
        }

    @pytest.mark.parametrize(
        "method,params,expected",
        [
            ("walletpassphrase", ["hunter2", 3600], ["[REDACTED]", 3600]),
            (
                "name_firstupdate",
                ["d/x", "0123abcd", "txid", "v"],
                ["d/x", "[REDACTED]", "txid", "v"],
            ),
            ("name_show", ["d/x"], ["d/x"]),
        ],
    )
    def test_sanitize_rpc_params(self, method, params, expected):
        assert sanitize_rpc_params(method, params) == expected


class TestFormatters:
    def test_human_readable_sanitizes(self):
        formatter = HumanReadableFormatter()
        output = formatter.format(make_record("unlock with passphrase=%s", "hunter2"))
        assert "hunter2" not in output
        assert "nmcrpc.test" in output

    def test_structured_output(self):
        formatter = StructuredFormatter()
        record = make_record("Reserved %s", "d/example")
        record.context = {"name": "d/example", "rand": "abcdef"}

        data = json.loads(formatter.format(record))

        assert data["message"] == "Reserved d/example"
        assert data["level"] == "INFO"
        assert data["context"] == {"name": "d/example", "rand": "[REDACTED]"}


    def test_context_from_logger_extra(self):
        logger = logging.getLogger("nmcrpc.test.context")
        records = []

        class Collect(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Collect()
        logger.addHandler(handler)
        try:
            logger.warning(
                "Unlock failed", extra={"context": {"passphrase": "hunter2", "method": "walletpassphrase"}}
            )
        finally:
            logger.removeHandler(handler)

        data = json.loads(StructuredFormatter().format(records[0]))
        assert data["context"] == {"passphrase": "[REDACTED]", "method": "walletpassphrase"}


class TestUserFriendlyErrors:
    def test_connection_error(self):
        error = TransportError(
            error_type=TransportErrorType.CONNECTION_ERROR,
            message="Cannot connect to daemon: http://localhost:8336.",
        )
        message, suggestion = get_user_friendly_error(error)
        assert message == "Unable to connect to the daemon."
        assert suggestion is not None

    def test_already_reserved(self):
        message, _ = get_user_friendly_error(NameAlreadyReservedError("d/taken"))
        assert message == "The name is already registered by someone else."

    def test_unknown_error(self):
        assert format_error_for_user("something odd") == "An unexpected error occurred."

    def test_message_with_suggestion(self):
        text = format_error_for_user("HTTP error 401: RPC authentication failed")
        assert text.startswith("The daemon rejected the RPC credentials.")
        assert "rpcpassword" in text
