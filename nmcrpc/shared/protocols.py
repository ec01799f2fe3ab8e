"""Structural types shared between the feature modules."""

from __future__ import annotations

from typing import Any, Protocol


class RpcClientProtocol(Protocol):
    def execute(self, method: str, *params: Any) -> Any: ...

    def disable_logging_one_shot(self) -> None: ...
