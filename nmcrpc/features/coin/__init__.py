"""Coin feature module for nmcrpc.

This module provides the name-independent wallet functionality:
- Validate addresses and check their ownership
- Sign and verify messages
- Query balance and transaction confirmations
- Temporarily unlock an encrypted wallet
"""

from nmcrpc.features.coin.service import (
    UNLOCK_SECONDS,
    Address,
    Balance,
    CoinService,
    NoPrivateKeyError,
    UnlockFailureError,
    WalletLockedError,
    WalletUnlocker,
)

__all__ = [
    "UNLOCK_SECONDS",
    "Address",
    "Balance",
    "CoinService",
    "NoPrivateKeyError",
    "UnlockFailureError",
    "WalletLockedError",
    "WalletUnlocker",
]
