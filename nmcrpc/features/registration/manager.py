"""Management of many name registrations and their persistent state."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator

from nmcrpc.features.names.service import NameInfo
from nmcrpc.features.registration.process import (
    FormatError,
    NameRegistration,
    parse_json_object,
)
from nmcrpc.shared.protocols import RpcClientProtocol

logger = logging.getLogger(__name__)


class RegistrationManager:
    """Ordered collection of registration processes sharing one RPC client.

    The manager does not enforce unique names.  State is saved as a JSON
    object whose ``names`` list holds each process' own JSON string, so every
    entry can be validated on its own.
    """

    FORMAT_TYPE = "RegistrationManager"
    FORMAT_VERSION = 1

    def __init__(self, rpc: RpcClientProtocol):
        self.rpc = rpc
        self._names: list[NameRegistration] = []

    def __iter__(self) -> Iterator[NameRegistration]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __getitem__(self, index: int) -> NameRegistration:
        return self._names[index]

    def register_name(self, info: NameInfo) -> NameRegistration:
        """Start registration of a name and return the new process.

        The process is only added if name_new succeeded.  Set its value with
        ``set_value`` on the returned object.
        """
        reg = NameRegistration(self.rpc)
        reg.register_name(info)
        self._names.append(reg)
        return reg

    def update(self) -> int:
        """Activate every process that can be activated.

        Errors propagate immediately; processes handled before the failing one
        keep their new state, so calling this again is safe.
        """
        activated = 0
        for reg in self._names:
            if reg.can_activate():
                reg.activate()
                activated += 1

        if activated:
            logger.info("Activated %d of %d registrations", activated, len(self._names))
        return activated

    def clean_up(self) -> int:
        """Remove finished processes and return how many were removed."""
        remaining = [reg for reg in self._names if not reg.is_finished()]
        removed = len(self._names) - len(remaining)
        self._names = remaining

        if removed:
            logger.info("Removed %d finished registrations", removed)
        return removed

    def clear(self) -> None:
        self._names = []

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.FORMAT_TYPE,
            "version": self.FORMAT_VERSION,
            "names": [reg.to_json() for reg in self._names],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def load_json(self, text: str) -> None:
        """Replace all processes with those encoded in ``text``.

        On a FormatError the current processes are left untouched.
        """
        data = parse_json_object(text, self.FORMAT_TYPE, self.FORMAT_VERSION)

        entries = data.get("names")
        if not isinstance(entries, list):
            raise FormatError("Missing or invalid field 'names' in RegistrationManager.")

        names = []
        for entry in entries:
            if not isinstance(entry, str):
                raise FormatError("RegistrationManager entries must be JSON strings.")
            names.append(NameRegistration.from_json(self.rpc, entry))

        self._names = names
        logger.debug("Loaded %d registrations", len(names))

    @classmethod
    def from_json(cls, rpc: RpcClientProtocol, text: str) -> "RegistrationManager":
        manager = cls(rpc)
        manager.load_json(text)
        return manager

    def save(self, path: str | Path) -> None:
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")
        text = self.to_json()
        try:
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d registrations to %s", len(self._names), path)

    def load(self, path: str | Path) -> None:
        self.load_json(Path(path).read_text(encoding="utf-8"))
