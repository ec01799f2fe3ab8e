from __future__ import annotations

from typing import Any

import pytest

from nmcrpc.shared.network import RpcError, RpcErrorCode


class FakeDaemon:
    """In-memory stand-in for the daemon's RPC interface.

    Transactions created by name_new/name_firstupdate/name_update start with
    zero confirmations; tests move them forward with ``confirm``.
    """

    def __init__(self):
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.names: dict[str, dict[str, Any]] = {}
        self.confirmations: dict[str, int] = {}
        self.addresses: dict[str, bool] = {"NMyAddress": True, "NOtherAddress": False}
        self.failures: dict[str, Exception] = {}
        self.info: dict[str, Any] = {"version": 38000, "unlocked_until": None}
        self.logging_suppressed: list[str] = []
        self._suppress_next = False
        self._counter = 0

    def disable_logging_one_shot(self) -> None:
        self._suppress_next = True

    def fail(self, method: str, error: Exception) -> None:
        self.failures[method] = error

    def confirm(self, txid: str, confirmations: int) -> None:
        self.confirmations[txid] = confirmations

    def add_name(
        self,
        name: str,
        value: str = "",
        address: str = "NOtherAddress",
        expired: bool = False,
        expires_in: int = 20000,
    ) -> None:
        self.names[name] = {
            "name": name,
            "value": value,
            "address": address,
            "expired": expired,
            "expires_in": expires_in,
        }

    def method_calls(self, method: str) -> list[tuple[Any, ...]]:
        return [params for name, params in self.calls if name == method]

    def _new_txid(self, prefix: str) -> str:
        self._counter += 1
        txid = f"{prefix}{self._counter:04d}"
        self.confirmations[txid] = 0
        return txid

    def execute(self, method: str, *params: Any) -> Any:
        self.calls.append((method, params))
        if self._suppress_next:
            self.logging_suppressed.append(method)
            self._suppress_next = False

        if method in self.failures:
            raise self.failures.pop(method)

        handler = getattr(self, f"_rpc_{method}", None)
        if handler is None:
            raise RpcError(code=-32601, message="Method not found", method=method)
        return handler(*params)

    def _rpc_name_new(self, name):
        txid = self._new_txid("new")
        return [txid, f"{self._counter:016x}"]

    def _rpc_name_firstupdate(self, name, rand, tx, value):
        return self._new_txid("first")

    def _rpc_name_update(self, name, value, address=None):
        return self._new_txid("update")

    def _rpc_gettransaction(self, txid):
        if txid not in self.confirmations:
            raise RpcError(
                code=RpcErrorCode.WALLET_ERROR,
                message="Invalid or non-wallet transaction id",
                method="gettransaction",
            )
        return {"txid": txid, "confirmations": self.confirmations[txid]}

    def _rpc_name_show(self, name):
        if name not in self.names:
            raise RpcError(
                code=RpcErrorCode.WALLET_ERROR,
                message="failed to read from name DB",
                method="name_show",
            )
        return dict(self.names[name])

    def _rpc_name_list(self):
        return [dict(entry) for entry in self.names.values()]

    def _rpc_validateaddress(self, address):
        if address not in self.addresses:
            return {"isvalid": False}
        return {"isvalid": True, "address": address, "ismine": self.addresses[address]}

    def _rpc_getinfo(self):
        return dict(self.info)

    def _rpc_walletlock(self):
        return None

    def _rpc_walletpassphrase(self, passphrase, timeout):
        if passphrase != "correct horse":
            raise RpcError(
                code=RpcErrorCode.WALLET_PASSPHRASE_INCORRECT,
                message="The wallet passphrase entered was incorrect.",
                method="walletpassphrase",
            )
        return None


@pytest.fixture
def daemon():
    return FakeDaemon()


@pytest.fixture(autouse=True)
def isolate_home(request, monkeypatch, tmp_path):
    """Keep unit tests away from the real ~/.namecoin and ~/.nmcrpc."""
    if request.node.get_closest_marker("integration"):
        yield
        return
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("NMCRPC_CONFIG_FILE", raising=False)
    yield
