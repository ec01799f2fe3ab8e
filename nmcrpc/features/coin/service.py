"""Wallet-level operations of the daemon: addresses, balance, signatures, unlocking."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from nmcrpc.shared.network import RpcError, RpcErrorCode, TransportError
from nmcrpc.shared.protocols import RpcClientProtocol

logger = logging.getLogger(__name__)

# Seconds the wallet is unlocked for when a private key is needed.
UNLOCK_SECONDS = 3600


class UnlockFailureError(Exception):
    """The wallet could not be unlocked with the given passphrase."""


class WalletLockedError(Exception):
    """An operation needs a private key but the wallet is locked."""


class NoPrivateKeyError(Exception):
    """The wallet does not hold the private key of an address."""


@dataclass(frozen=True)
class Address:
    address: str
    valid: bool
    mine: bool

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class Balance:
    units: int

    COIN = 100_000_000

    @classmethod
    def from_coins(cls, value: Any) -> "Balance":
        amount = Decimal(str(value)) * cls.COIN
        return cls(units=int(amount.to_integral_value()))

    @property
    def coins(self) -> Decimal:
        return Decimal(self.units) / self.COIN

    def __str__(self) -> str:
        sign = "-" if self.units < 0 else ""
        full, frac = divmod(abs(self.units), self.COIN)
        return f"{sign}{full}.{frac:08d}"


class CoinService:
    def __init__(self, rpc: RpcClientProtocol):
        self.rpc = rpc

    def test_connection(self) -> tuple[bool, str]:
        """Run a trivial command and describe the outcome for display."""
        try:
            info = self.rpc.execute("getinfo")
        except TransportError as e:
            if e.status_code is not None:
                return False, f"HTTP-Error ({e.status_code}): {e.message}"
            return False, e.message
        except RpcError as e:
            return False, e.message

        version = int(info.get("version", 0))
        patch = version % 100
        version //= 100
        minor = version % 100
        version //= 100
        version_str = f"0.{version}.{minor}"
        if patch > 0:
            version_str += f".{patch}"

        logger.info("Connected to daemon version %s", version_str)
        return True, f"Success!  Daemon version {version_str} running."

    def query_address(self, address: str) -> Address:
        res = self.rpc.execute("validateaddress", address)
        valid = bool(res.get("isvalid", False))
        mine = valid and bool(res.get("ismine", False))
        return Address(address=address, valid=valid, mine=mine)

    def create_address(self) -> Address:
        address = self.rpc.execute("getnewaddress")
        return self.query_address(address)

    def get_balance(self) -> Balance:
        return Balance.from_coins(self.rpc.execute("getbalance"))

    def get_number_of_confirmations(self, txid: str) -> int:
        # An unknown txid raises RpcError with code -4 which is passed on.
        res = self.rpc.execute("gettransaction", txid)
        return int(res["confirmations"])

    def need_wallet_passphrase(self) -> bool:
        info = self.rpc.execute("getinfo")
        until = info.get("unlocked_until")
        if until is None:
            return False
        return int(until) < time.time() + UNLOCK_SECONDS

    def verify_message(self, address: Address, message: str, signature: str) -> bool:
        if not address.valid:
            return False

        try:
            res = self.rpc.execute("verifymessage", address.address, signature, message)
        except RpcError as e:
            # Malformed signature (bad base64) simply does not verify.
            if e.code == RpcErrorCode.INVALID_ADDRESS_OR_KEY:
                return False
            raise

        return res is True

    def sign_message(self, address: Address, message: str) -> str:
        if not address.valid:
            raise ValueError(f"Can't sign with invalid address: {address.address}")

        try:
            return str(self.rpc.execute("signmessage", address.address, message))
        except RpcError as e:
            if e.code == RpcErrorCode.WALLET_UNLOCK_NEEDED:
                raise WalletLockedError("Need to unlock the wallet first.") from e
            if e.code == RpcErrorCode.TYPE_ERROR:
                raise NoPrivateKeyError(
                    f"You don't have the private key of {address.address} in order"
                    " to sign messages with that address."
                ) from e
            raise


class WalletUnlocker:
    """Unlock the wallet for the duration of a ``with`` block.

    The wallet is locked again on exit, but only if this object unlocked it.
    """

    def __init__(self, coin: CoinService):
        self.coin = coin
        self.rpc = coin.rpc
        self.unlocked = False

    def unlock(self, passphrase: str) -> None:
        if self.unlocked:
            raise RuntimeError("Wallet is already unlocked!")

        if not self.coin.need_wallet_passphrase():
            return

        # walletpassphrase does not handle an empty passphrase correctly.
        if not passphrase:
            raise UnlockFailureError("Wallet passphrase cannot be empty.")

        # It may be unlocked for too short a time; start from a locked wallet.
        self.rpc.execute("walletlock")
        try:
            self.rpc.disable_logging_one_shot()
            self.rpc.execute("walletpassphrase", passphrase, UNLOCK_SECONDS)
        except RpcError as e:
            if e.code == RpcErrorCode.WALLET_PASSPHRASE_INCORRECT:
                raise UnlockFailureError("Wrong wallet passphrase.") from e
            raise

        self.unlocked = True
        logger.info("Wallet unlocked for %d seconds", UNLOCK_SECONDS)

    def lock(self) -> None:
        if not self.unlocked:
            return
        self.rpc.execute("walletlock")
        self.unlocked = False
        logger.info("Wallet locked again")

    def __enter__(self) -> "WalletUnlocker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.lock()
