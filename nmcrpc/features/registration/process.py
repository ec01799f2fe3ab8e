"""Two-phase registration of a single name (name_new, then name_firstupdate).

The state needed between the two transactions can be written out with
``to_json`` and restored with ``NameRegistration.from_json``, so that the
registration can be finished by a later run of the program.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from nmcrpc.features.coin.service import CoinService
from nmcrpc.features.names.service import NameInfo
from nmcrpc.shared.network import TransportError, TransportErrorType
from nmcrpc.shared.protocols import RpcClientProtocol

logger = logging.getLogger(__name__)

FORMAT_TYPE = "NameRegistration"
FORMAT_VERSION = 1


class InvalidStateError(RuntimeError):
    """An operation was attempted in a state that does not allow it."""


class NameAlreadyReservedError(Exception):
    def __init__(self, name: str):
        super().__init__(f"Name is already reserved: {name}")
        self.name = name


class NotYetEligibleError(Exception):
    """name_firstupdate was attempted before name_new had enough confirmations."""


class FormatError(ValueError):
    """Persisted registration state is malformed or has an unsupported version."""


class RegistrationState(Enum):
    NOT_STARTED = "not_started"
    RESERVED = "registered"
    ACTIVATED = "activated"


def parse_json_object(text: str, expected_type: str, version: int) -> dict[str, Any]:
    """Decode ``text`` and check its ``type`` and ``version`` tags."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise FormatError(f"Invalid JSON for {expected_type}: {e}") from e
    return check_format_tags(data, expected_type, version)


def check_format_tags(data: Any, expected_type: str, version: int) -> dict[str, Any]:
    # bool is an int subclass and 1.0 == 1, so compare the exact type.
    if (
        not isinstance(data, dict)
        or data.get("type") != expected_type
        or type(data.get("version")) is not int
        or data["version"] != version
    ):
        raise FormatError(
            f"Wrong JSON object found, expected version {version} {expected_type}."
        )
    return data


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise FormatError(f"Missing or invalid field '{key}' in {FORMAT_TYPE}.")
    return value


class NameRegistration:
    """Registration process of one name.

    ``register_name`` issues name_new and moves to RESERVED.  Once that
    transaction has ``FIRSTUPDATE_DELAY`` confirmations, ``activate`` issues
    name_firstupdate and moves to ACTIVATED.  The registration is finished
    when the activation transaction is confirmed.

    State only changes after the corresponding RPC call has returned, so a
    failed call leaves the object as it was and the step can be retried.
    """

    # Confirmations of name_new required before name_firstupdate.
    FIRSTUPDATE_DELAY = 12

    def __init__(self, rpc: RpcClientProtocol):
        self.rpc = rpc
        self._coin = CoinService(rpc)
        self._state = RegistrationState.NOT_STARTED
        self._name: str | None = None
        self._value = ""
        self._rand: str | None = None
        self._tx: str | None = None
        self._tx_activation: str | None = None

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def value(self) -> str:
        return self._value

    @property
    def rand(self) -> str | None:
        return self._rand

    @property
    def reservation_txid(self) -> str | None:
        return self._tx

    @property
    def activation_txid(self) -> str | None:
        return self._tx_activation

    def register_name(self, info: NameInfo) -> None:
        if self._state is not RegistrationState.NOT_STARTED:
            raise InvalidStateError("Can register_name() only in NOT_STARTED state.")
        if info.exists and not info.expired:
            raise NameAlreadyReservedError(info.name)

        res = self.rpc.execute("name_new", info.name)
        if not (
            isinstance(res, list)
            and len(res) == 2
            and all(isinstance(part, str) for part in res)
        ):
            logger.error("Unexpected name_new result for %s: %r", info.name, res)
            raise TransportError(
                error_type=TransportErrorType.INVALID_RESPONSE,
                message=f"RPC name_new: unexpected result for {info.name}: {res!r}",
            )

        self._name = info.name
        self._tx, self._rand = res
        self._value = ""

        # Set last so nothing above can leave a half-initialised RESERVED state.
        self._state = RegistrationState.RESERVED
        logger.info("Reserved %s in transaction %s", self._name, self._tx)

    def set_value(self, value: str) -> None:
        if self._state is not RegistrationState.RESERVED:
            raise InvalidStateError("Can set_value() only in RESERVED state.")
        self._value = value

    def set_json_value(self, value: Any) -> None:
        self.set_value(json.dumps(value))

    def _confirmations(self, txid: str) -> int:
        return self._coin.get_number_of_confirmations(txid)

    def can_activate(self) -> bool:
        if self._state is not RegistrationState.RESERVED:
            return False
        return self._confirmations(self._tx) >= self.FIRSTUPDATE_DELAY

    def activate(self) -> None:
        if self._state is not RegistrationState.RESERVED:
            raise InvalidStateError("Can activate() only in RESERVED state.")
        if not self.can_activate():
            raise NotYetEligibleError(
                f"Can't yet activate {self._name}, please wait longer."
            )

        txid = self.rpc.execute(
            "name_firstupdate", self._name, self._rand, self._tx, self._value
        )
        if not isinstance(txid, str):
            logger.error("Unexpected name_firstupdate result for %s: %r", self._name, txid)
            raise TransportError(
                error_type=TransportErrorType.INVALID_RESPONSE,
                message=f"RPC name_firstupdate: unexpected result for {self._name}: {txid!r}",
            )

        self._tx_activation = txid
        self._state = RegistrationState.ACTIVATED
        logger.info("Activated %s in transaction %s", self._name, txid)

    def is_finished(self) -> bool:
        if self._state is not RegistrationState.ACTIVATED:
            return False
        return self._confirmations(self._tx_activation) > 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": FORMAT_TYPE,
            "version": FORMAT_VERSION,
            "name": self._name,
            "state": self._state.value,
        }
        if self._state is RegistrationState.RESERVED:
            data["value"] = self._value
            data["rand"] = self._rand
            data["tx"] = self._tx
        elif self._state is RegistrationState.ACTIVATED:
            data["tx_activation"] = self._tx_activation
        else:
            raise InvalidStateError("Can't serialize a registration that is not started.")
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, rpc: RpcClientProtocol, data: Any) -> "NameRegistration":
        data = check_format_tags(data, FORMAT_TYPE, FORMAT_VERSION)

        reg = cls(rpc)
        reg._name = _require_str(data, "name")

        state = data.get("state")
        if state == RegistrationState.RESERVED.value:
            reg._value = _require_str(data, "value")
            reg._rand = _require_str(data, "rand")
            reg._tx = _require_str(data, "tx")
            reg._state = RegistrationState.RESERVED
        elif state == RegistrationState.ACTIVATED.value:
            reg._tx_activation = _require_str(data, "tx_activation")
            reg._state = RegistrationState.ACTIVATED
        else:
            raise FormatError(f"Unknown registration state: {state!r}")

        return reg

    @classmethod
    def from_json(cls, rpc: RpcClientProtocol, text: str) -> "NameRegistration":
        return cls.from_dict(rpc, parse_json_object(text, FORMAT_TYPE, FORMAT_VERSION))

    def _observable(self) -> tuple:
        if self._state is RegistrationState.RESERVED:
            return (self._state, self._name, self._value, self._rand, self._tx)
        if self._state is RegistrationState.ACTIVATED:
            return (self._state, self._name, self._tx_activation)
        return (self._state,)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameRegistration):
            return NotImplemented
        return self._observable() == other._observable()

    def __repr__(self) -> str:
        return f"NameRegistration(name={self._name!r}, state={self._state.name})"
