"""Centralized logging configuration for nmcrpc.

This module provides:
- Configurable log levels (DEBUG for dev, INFO for prod)
- Sanitization of wallet passphrases and name reservation secrets
- User-friendly error message mapping for the command line tools
- Structured logging with context fields
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = True
    log_to_stdout: bool = False
    log_dir: Path | None = None
    log_filename: str = "nmcrpc.log"
    sanitize_sensitive: bool = True
    include_context: bool = True

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        env_level = os.getenv("NMCRPC_LOG_LEVEL", "INFO").upper()
        try:
            log_level = LogLevel(env_level)
        except ValueError:
            log_level = LogLevel.INFO

        log_to_stdout = os.getenv("NMCRPC_LOG_STDOUT", "").lower() in (
            "1",
            "true",
            "yes",
        )

        return cls(
            log_level=log_level,
            log_to_stdout=log_to_stdout,
        )


SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"(passphrase['\"]?\s*[:=]\s*['\"]?)([^\s'\",]+)",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(rpcpassword['\"]?\s*[:=]\s*['\"]?)([^\s'\",]+)",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(['\"]?rand['\"]?\s*[:=]\s*['\"]?)([A-Fa-f0-9]{8,})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(private[_-]?key['\"]?\s*[:=]\s*['\"]?)([A-Za-z0-9]{50,})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
]


# Parameter positions that must never reach a log file, per RPC method.
SENSITIVE_RPC_PARAMS: dict[str, set[int]] = {
    "walletpassphrase": {0},
    "walletpassphrasechange": {0, 1},
    "encryptwallet": {0},
    "importprivkey": {0},
    "name_firstupdate": {1},
}


def sanitize_message(message: str) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(
            sensitive in key_lower
            for sensitive in ["passphrase", "password", "secret", "rand"]
        ):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict(item)
                if isinstance(item, dict)
                else sanitize_message(item)
                if isinstance(item, str)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def sanitize_rpc_params(method: str, params: list[Any]) -> list[Any]:
    hidden = SENSITIVE_RPC_PARAMS.get(method, set())
    return ["[REDACTED]" if i in hidden else p for i, p in enumerate(params)]


@dataclass
class ErrorMapping:
    error_pattern: str
    user_message: str
    log_level: LogLevel = LogLevel.ERROR
    suggest_action: str | None = None


ERROR_MAPPINGS: list[ErrorMapping] = [
    ErrorMapping(
        error_pattern="timeout|timed out",
        user_message="Connection to the daemon timed out.",
        log_level=LogLevel.WARNING,
        suggest_action="The daemon may still be syncing; try again later.",
    ),
    ErrorMapping(
        error_pattern="connection refused|cannot connect|connection error",
        user_message="Unable to connect to the daemon.",
        log_level=LogLevel.WARNING,
        suggest_action="Check that the daemon is running with RPC enabled.",
    ),
    ErrorMapping(
        error_pattern="authentication failed|401",
        user_message="The daemon rejected the RPC credentials.",
        log_level=LogLevel.WARNING,
        suggest_action="Check rpcuser and rpcpassword in your namecoin.conf.",
    ),
    ErrorMapping(
        error_pattern="wrong wallet passphrase|passphrase cannot be empty",
        user_message="The wallet passphrase is not correct.",
        log_level=LogLevel.WARNING,
        suggest_action="Enter the passphrase used to encrypt the wallet.",
    ),
    ErrorMapping(
        error_pattern="unlock the wallet",
        user_message="The wallet is locked.",
        log_level=LogLevel.WARNING,
        suggest_action="Unlock the wallet and try again.",
    ),
    ErrorMapping(
        error_pattern="already reserved",
        user_message="The name is already registered by someone else.",
        log_level=LogLevel.WARNING,
        suggest_action="Choose a different name or wait until it expires.",
    ),
    ErrorMapping(
        error_pattern="insufficient funds|not enough",
        user_message="Insufficient balance for this transaction.",
        log_level=LogLevel.WARNING,
        suggest_action="Ensure the wallet has enough coins for the name fees.",
    ),
    ErrorMapping(
        error_pattern="name not found",
        user_message="The name does not exist.",
        log_level=LogLevel.WARNING,
        suggest_action="Check the spelling, including the namespace prefix.",
    ),
    ErrorMapping(
        error_pattern="state file|registrationmanager|nameregistration",
        user_message="The registration state file could not be read.",
        log_level=LogLevel.ERROR,
        suggest_action="Make sure the file was written by nmreg and is not corrupted.",
    ),
]


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    error_message = str(error) if isinstance(error, Exception) else error
    error_lower = error_message.lower()

    for mapping in ERROR_MAPPINGS:
        if re.search(mapping.error_pattern, error_lower):
            return mapping.user_message, mapping.suggest_action

    return "An unexpected error occurred.", None


class StructuredFormatter(logging.Formatter):
    def __init__(
        self,
        sanitize: bool = True,
        include_context: bool = True,
    ):
        super().__init__()
        self.sanitize = sanitize
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            log_data["module"] = record.module
            log_data["function"] = record.funcName
            log_data["line"] = record.lineno

        extra_data = getattr(record, "context", None)
        if extra_data and isinstance(extra_data, dict):
            if self.sanitize:
                extra_data = sanitize_dict(extra_data)
            log_data["context"] = extra_data

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            if self.sanitize:
                exc_text = sanitize_message(exc_text)
            log_data["exception"] = exc_text

        if self.sanitize:
            log_data["message"] = sanitize_message(log_data["message"])

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            return f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"


class HumanReadableFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        if self.sanitize:
            formatted = sanitize_message(formatted)
        return formatted


_logging_initialized = False


def _make_formatter(config: LoggingConfig, log_format: str) -> logging.Formatter:
    if log_format == "json":
        return StructuredFormatter(
            sanitize=config.sanitize_sensitive,
            include_context=config.include_context,
        )
    return HumanReadableFormatter(sanitize=config.sanitize_sensitive)


def setup_logging(config: LoggingConfig | None = None) -> None:
    global _logging_initialized

    if _logging_initialized:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.value))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_format = (
        "json" if os.getenv("NMCRPC_LOG_FORMAT", "human").lower() == "json" else "human"
    )

    handlers: list[logging.Handler] = []

    if config.log_to_file:
        if config.log_dir is None:
            config.log_dir = Path.home() / ".nmcrpc"
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / config.log_filename

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(_make_formatter(config, log_format))
        handlers.append(file_handler)

    if config.log_to_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(_make_formatter(config, log_format))
        handlers.append(stdout_handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    _logging_initialized = True


def format_error_for_user(error: Exception | str) -> str:
    user_message, suggestion = get_user_friendly_error(error)
    if suggestion:
        return f"{user_message} {suggestion}"
    return user_message


__all__ = [
    "LogLevel",
    "LoggingConfig",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "sanitize_message",
    "sanitize_dict",
    "sanitize_rpc_params",
    "get_user_friendly_error",
    "setup_logging",
    "format_error_for_user",
]
