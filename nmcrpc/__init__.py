"""nmcrpc - Namecoin JSON-RPC client with a resumable name registration workflow.

This package is organized into feature-based modules:
- features.coin: Addresses, message signatures, balance and wallet unlocking
- features.names: Name lookup, listing and updates
- features.registration: name_new / name_firstupdate registration processes
- shared: Shared utilities (JSON-RPC transport, settings, logging)
"""

from nmcrpc.features.coin import (
    Address,
    Balance,
    CoinService,
    NoPrivateKeyError,
    UnlockFailureError,
    WalletLockedError,
    WalletUnlocker,
)
from nmcrpc.features.names import (
    NameInfo,
    NameNotFoundError,
    NameService,
    NameValidator,
)
from nmcrpc.features.registration import (
    FormatError,
    InvalidStateError,
    NameAlreadyReservedError,
    NameRegistration,
    NotYetEligibleError,
    RegistrationManager,
    RegistrationState,
)
from nmcrpc.shared import (
    JsonRpcClient,
    RetryConfig,
    RpcError,
    RpcErrorCode,
    RpcSettings,
    TimeoutConfig,
    TransportError,
    TransportErrorType,
)

__version__ = "0.1.0"
__all__ = [
    "Address",
    "Balance",
    "CoinService",
    "FormatError",
    "InvalidStateError",
    "JsonRpcClient",
    "NameAlreadyReservedError",
    "NameInfo",
    "NameNotFoundError",
    "NameRegistration",
    "NameService",
    "NameValidator",
    "NoPrivateKeyError",
    "NotYetEligibleError",
    "RegistrationManager",
    "RegistrationState",
    "RetryConfig",
    "RpcError",
    "RpcErrorCode",
    "RpcSettings",
    "TimeoutConfig",
    "TransportError",
    "TransportErrorType",
    "UnlockFailureError",
    "WalletLockedError",
    "WalletUnlocker",
]
