"""Connection settings for the daemon's JSON-RPC interface."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "NMCRPC_CONFIG_FILE"

DEFAULT_HOST = "localhost"
DEFAULT_PORT_MAINNET = 8336
DEFAULT_PORT_TESTNET = 18336


@dataclass
class RpcSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT_MAINNET
    username: str = ""
    password: str = ""

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def auth(self) -> tuple[str, str]:
        return (self.username, self.password)

    def read_config(self, filename: str | Path) -> None:
        """Update the settings from a namecoin.conf style file.

        This is a best-effort guess at the daemon's configuration: a missing
        or unreadable file and unknown keys are ignored.  An explicit
        ``rpcport`` always wins over the port implied by ``testnet``.
        """
        path = Path(filename).expanduser()
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.debug("Could not read config file %s: %s", path, e)
            return

        new_port = 0
        for line in lines:
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if key == "rpcport":
                try:
                    new_port = int(value)
                except ValueError:
                    logger.warning("Ignoring invalid rpcport in %s: %r", path, value)
            elif key == "rpcuser":
                self.username = value
            elif key == "rpcpassword":
                self.password = value
            elif key == "rpcconnect":
                self.host = value
            elif key == "testnet" and new_port == 0:
                new_port = (
                    DEFAULT_PORT_TESTNET if value != "0" else DEFAULT_PORT_MAINNET
                )

        if new_port != 0:
            self.port = new_port

        logger.debug("Read RPC settings from %s (host=%s, port=%d)", path, self.host, self.port)

    def read_default_config(self) -> None:
        override = os.getenv(CONFIG_FILE_ENV)
        if override:
            self.read_config(override)
            return

        self.read_config(Path.home() / ".namecoin" / "namecoin.conf")

    @classmethod
    def from_default_config(cls) -> "RpcSettings":
        settings = cls()
        settings.read_default_config()
        return settings
