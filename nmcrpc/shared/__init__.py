"""Shared utilities for nmcrpc."""

from nmcrpc.shared.logging import (
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    sanitize_rpc_params,
    setup_logging,
)
from nmcrpc.shared.network import (
    JsonRpcClient,
    RetryConfig,
    RpcError,
    RpcErrorCode,
    TimeoutConfig,
    TransportError,
    TransportErrorType,
)
from nmcrpc.shared.protocols import RpcClientProtocol
from nmcrpc.shared.settings import RpcSettings

__all__ = [
    "JsonRpcClient",
    "RetryConfig",
    "RpcClientProtocol",
    "RpcError",
    "RpcErrorCode",
    "RpcSettings",
    "TimeoutConfig",
    "TransportError",
    "TransportErrorType",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "sanitize_rpc_params",
    "setup_logging",
]
