"""Helpers shared by the command line utilities."""

from __future__ import annotations

import logging
import sys
from getpass import getpass
from pathlib import Path

from nmcrpc.features.coin.service import CoinService
from nmcrpc.shared.logging import format_error_for_user
from nmcrpc.shared.network import JsonRpcClient, RpcError
from nmcrpc.shared.settings import RpcSettings

logger = logging.getLogger(__name__)


def create_rpc() -> JsonRpcClient:
    return JsonRpcClient(RpcSettings.from_default_config())


def read_passphrase(coin: CoinService) -> str:
    """Prompt for the wallet passphrase, but only if the wallet needs one."""
    if not coin.need_wallet_passphrase():
        return ""
    return getpass("Enter wallet passphrase: ")


def read_name_list(path: str | Path) -> list[str]:
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise RuntimeError(f"Could not read list of names: {e}") from e
    return [line.strip() for line in lines if line.strip()]


def report_error(program: str, error: Exception) -> int:
    if isinstance(error, RpcError):
        print("JSON-RPC error:", file=sys.stderr)
        print(error.message, file=sys.stderr)
    else:
        print(f"Error: {error}", file=sys.stderr)
        print(format_error_for_user(error), file=sys.stderr)

    logger.error("%s failed: %s", program, error)
    return 1
