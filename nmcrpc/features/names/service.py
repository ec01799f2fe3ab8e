"""Name lookup and update service for nmcrpc."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from nmcrpc.features.coin.service import Address, CoinService
from nmcrpc.shared.network import RpcError, RpcErrorCode
from nmcrpc.shared.protocols import RpcClientProtocol

logger = logging.getLogger(__name__)


class NameNotFoundError(Exception):
    def __init__(self, name: str):
        super().__init__(f"Name not found: {name}")
        self.name = name


def split_name(name: str) -> tuple[str, str] | None:
    """Split ``namespace/label`` into its parts, or None without a namespace."""
    if "/" not in name:
        return None
    namespace, label = name.split("/", 1)
    return namespace, label


@dataclass(frozen=True)
class NameInfo:
    """Snapshot of a name as the daemon reported it at query time.

    Query the name again for fresh data.  The fields describing the current
    registration raise NameNotFoundError if the name does not exist.
    """

    name: str
    exists: bool
    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    owner: Address | None = None

    def _ensure_exists(self) -> None:
        if not self.exists:
            raise NameNotFoundError(self.name)

    @property
    def address(self) -> Address:
        self._ensure_exists()
        return self.owner

    @property
    def value(self) -> str:
        self._ensure_exists()
        return str(self.data.get("value", ""))

    @property
    def expired(self) -> bool:
        self._ensure_exists()
        # Older daemons report 0/1, newer ones a boolean.
        return bool(self.data.get("expired", False))

    @property
    def expires_in(self) -> int:
        self._ensure_exists()
        return int(self.data.get("expires_in", 0))

    @property
    def namespace(self) -> str | None:
        parts = split_name(self.name)
        return parts[0] if parts else None

    def json_value(self) -> Any:
        return json.loads(self.value)

    @property
    def is_available(self) -> bool:
        return not self.exists or self.expired

    def to_dict(self) -> dict[str, Any]:
        if not self.exists:
            return {"name": self.name, "exists": False}
        return {
            "name": self.name,
            "exists": True,
            "address": self.address.address,
            "value": self.value,
            "expired": self.expired,
            "expires_in": self.expires_in,
        }


class NameService:
    def __init__(self, rpc: RpcClientProtocol, coin: CoinService | None = None):
        self.rpc = rpc
        self.coin = coin or CoinService(rpc)

    def query_name(self, name: str) -> NameInfo:
        try:
            data = self.rpc.execute("name_show", name)
        except RpcError as e:
            if e.code == RpcErrorCode.WALLET_ERROR:
                logger.debug("Name %s does not exist", name)
                return NameInfo(name=name, exists=False)
            raise

        owner = self.coin.query_address(data.get("address", ""))
        return NameInfo(
            name=name, exists=True, data=MappingProxyType(dict(data)), owner=owner
        )

    def query_name_in_namespace(self, namespace: str, label: str) -> NameInfo:
        return self.query_name(f"{namespace}/{label}")

    def for_my_names(self) -> list[NameInfo]:
        """Return snapshots of all names currently held by the wallet."""
        entries = self.rpc.execute("name_list")
        names = []
        for entry in entries:
            if entry.get("transferred"):
                continue
            owner = self.coin.query_address(entry.get("address", ""))
            names.append(
                NameInfo(
                    name=entry["name"],
                    exists=True,
                    data=MappingProxyType(dict(entry)),
                    owner=owner,
                )
            )
        return names

    def update_name(
        self,
        info: NameInfo,
        value: str | None = None,
        address: str | None = None,
    ) -> str:
        """Issue name_update, keeping the current value unless one is given.

        With ``address`` set, the name is sent to that address.
        """
        if not info.exists:
            raise NameNotFoundError(info.name)

        new_value = info.value if value is None else value
        params: list[Any] = [info.name, new_value]

        if address is not None:
            target = self.coin.query_address(address)
            if not target.valid:
                raise ValueError(f"Invalid recipient address: {address}")
            params.append(target.address)

        txid = str(self.rpc.execute("name_update", *params))
        if address is not None:
            logger.info("Sent %s to %s in transaction %s", info.name, address, txid)
        else:
            logger.info("Updated %s in transaction %s", info.name, txid)
        return txid
